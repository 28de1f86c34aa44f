from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# MyriadX-style on-chip budget: 2.5 MiB split between activations and weights.
TOTAL_MEMORY_BYTES = int(2.5 * 2 ** 20)
ACTIVATION_FRACTION = 0.25
WORD_SIZE = 4
PRELOAD_SCALE = 50  # preloads per full pool of data moved

"""
Cost model (heuristic, not a hardware model):
- preload_count: how many times a pool must be refilled to move num_rows × row_size words,
  floored to whole pools, times PRELOAD_SCALE.
- activation_memory / weight_memory: word counts for one conv layer. activation_memory reuses
  kernel height where the output height would belong; corrected=True swaps in output height.
"""


@dataclass(frozen=True)
class VirtualMemory:
    capacity: int
    word_size: int = WORD_SIZE


@dataclass(frozen=True)
class MemoryConfig:
    total_bytes: int = TOTAL_MEMORY_BYTES
    activation_fraction: float = ACTIVATION_FRACTION
    word_size: int = WORD_SIZE
    preload_scale: int = PRELOAD_SCALE

    def __post_init__(self):
        if self.total_bytes <= 0:
            raise ValueError("total_bytes must be >= 1.")
        if not 0.0 < self.activation_fraction < 1.0:
            raise ValueError("activation_fraction must be in (0, 1).")
        if self.word_size <= 0:
            raise ValueError("word_size must be >= 1.")
        if self.preload_scale < 0:
            raise ValueError("preload_scale must be >= 0.")
        act = int(self.total_bytes * self.activation_fraction)
        if act < 1 or self.total_bytes - act < 1:
            raise ValueError(f"total_bytes={self.total_bytes} leaves an empty pool at "
                             f"activation_fraction={self.activation_fraction}.")

    @classmethod
    def from_mib(cls, total_mib: float, **kwargs) -> "MemoryConfig":
        return cls(total_bytes=int(total_mib * 2 ** 20), **kwargs)


def split_memory(cfg: MemoryConfig) -> Tuple[VirtualMemory, VirtualMemory]:
    """Returns (activations, weights); the two capacities always sum to cfg.total_bytes."""
    activations = VirtualMemory(capacity=int(cfg.total_bytes * cfg.activation_fraction), word_size=cfg.word_size)
    weights = VirtualMemory(capacity=cfg.total_bytes - activations.capacity, word_size=cfg.word_size)
    return activations, weights


@dataclass(frozen=True)
class ConvLayerShape:
    input_size: Tuple[int, int, int]  # (width, height, channels)
    kernel: Tuple[int, int]
    stride: Tuple[int, int]
    filter_count: int

    @property
    def output_size(self) -> Tuple[int, int, int]:
        w, h, _ = self.input_size
        sx, sy = self.stride
        return ((w - 1) // sx, (h - 1) // sy, self.filter_count)


def preload_count(pool: VirtualMemory, num_rows: int, row_size: int, scale: int = PRELOAD_SCALE) -> int:
    return (row_size * num_rows * pool.word_size // pool.capacity) * scale


def activation_memory(layer: ConvLayerShape, corrected: bool = False) -> int:
    in_x, _, in_c = layer.input_size
    out_x, out_y, out_c = layer.output_size
    _, ky = layer.kernel
    out_rows = out_y if corrected else ky
    return in_x * ky * in_c + out_x * out_rows * out_c


def weight_memory(layer: ConvLayerShape) -> int:
    in_c = layer.input_size[2]
    out_c = layer.output_size[2]
    kx, ky = layer.kernel
    return in_c * out_c * kx * ky + out_c


def activation_preloads(pool: VirtualMemory, layer: ConvLayerShape, scale: int = PRELOAD_SCALE) -> int:
    """One input row (width × channels) per input line."""
    in_x, in_y, in_c = layer.input_size
    return preload_count(pool, in_y, in_x * in_c, scale)


def weight_preloads(pool: VirtualMemory, layer: ConvLayerShape, scale: int = PRELOAD_SCALE) -> int:
    """One kx × ky × C_in kernel per filter."""
    kx, ky = layer.kernel
    return preload_count(pool, layer.filter_count, kx * ky * layer.input_size[2], scale)
