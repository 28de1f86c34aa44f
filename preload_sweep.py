"""
Preload sweep engine: one enumerator over six conv axes, two aggregation modes.

Axes (outer → inner): input spatial extent (W = H), input channels, filters,
kernel width, kernel height, stride (sx = sy).

  PLOT_SERIES: group weight preloads by outer-axis label; one value per input-channel count.
               Matches the per-config curves drawn in the GUI.
  HISTOGRAM:   one memory value per combination → occurrence count per value →
               number of distinct values sharing each occurrence count.

Both folds are order-independent, so any enumeration order gives the same aggregate.

Run:  python sweep_preload.py --help
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import product
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Sequence

from preload_model import (
    ConvLayerShape,
    MemoryConfig,
    activation_memory,
    activation_preloads,
    split_memory,
    weight_memory,
    weight_preloads,
)

if TYPE_CHECKING:
    from sweep_config import Conv2DParameters

log = logging.getLogger(__name__)


class AggregationMode(Enum):
    PLOT_SERIES = "plot_series"
    HISTOGRAM = "histogram"


class MemoryMetric(Enum):
    TOTAL = "total"
    ACTIVATION = "activation"
    WEIGHT = "weight"


@dataclass(frozen=True)
class SweepAxes:
    input_spatial: Sequence[int]
    input_channels: Sequence[int]
    filters: Sequence[int]
    kernel_x: Sequence[int]
    kernel_y: Sequence[int]
    stride: Sequence[int] = (1,)

    @classmethod
    def reference(cls) -> "SweepAxes":
        """17×17 input, C_in 1..1533, filters 1..1024 step 128, 1×1 kernel, stride 1."""
        return cls(
            input_spatial=range(17, 18),
            input_channels=range(1, 1534),
            filters=range(1, 1025, 128),
            kernel_x=range(1, 2),
            kernel_y=range(1, 2),
            stride=range(1, 2),
        )

    @classmethod
    def from_parameters(cls, params: "Conv2DParameters") -> "SweepAxes":
        """Build from a Conv2DParameters record (explicit value lists)."""
        return cls(
            input_spatial=tuple(params.in_s),
            input_channels=tuple(params.in_c),
            filters=tuple(params.filter),
            kernel_x=tuple(params.kx),
            kernel_y=tuple(params.ky),
            stride=tuple(params.stride),
        )

    def unique_labels(self) -> "SweepAxes":
        """Drop repeated values on the label axes; the channel axis is kept as given."""
        return SweepAxes(
            input_spatial=tuple(dict.fromkeys(self.input_spatial)),
            input_channels=self.input_channels,
            filters=tuple(dict.fromkeys(self.filters)),
            kernel_x=tuple(dict.fromkeys(self.kernel_x)),
            kernel_y=tuple(dict.fromkeys(self.kernel_y)),
            stride=tuple(dict.fromkeys(self.stride)),
        )

    @property
    def combination_count(self) -> int:
        n = 1
        for axis in (self.input_spatial, self.input_channels, self.filters,
                     self.kernel_x, self.kernel_y, self.stride):
            n *= len(axis)
        return n


@dataclass(frozen=True)
class SweepPoint:
    layer: ConvLayerShape
    label: str
    activation_preloads: int
    weight_preloads: int
    activation_memory: int
    weight_memory: int

    def memory(self, metric: MemoryMetric) -> int:
        if metric is MemoryMetric.ACTIVATION:
            return self.activation_memory
        if metric is MemoryMetric.WEIGHT:
            return self.weight_memory
        return self.activation_memory + self.weight_memory


def config_label(layer: ConvLayerShape) -> str:
    """Series key from the five non-channel axes."""
    w, h, _ = layer.input_size
    kx, ky = layer.kernel
    return f"In({w}, {h}), k({kx}, {ky}), fi {layer.filter_count}, st {layer.stride[0]}"


def enumerate_layers(axes: SweepAxes) -> Iterator[ConvLayerShape]:
    for s, c, f, kx, ky, st in product(axes.input_spatial, axes.input_channels, axes.filters,
                                       axes.kernel_x, axes.kernel_y, axes.stride):
        yield ConvLayerShape(input_size=(s, s, c), kernel=(kx, ky), stride=(st, st), filter_count=f)


def evaluate(axes: SweepAxes, memory: Optional[MemoryConfig] = None,
             corrected: bool = False) -> Iterator[SweepPoint]:
    """Exactly one SweepPoint per axis combination."""
    memory = memory or MemoryConfig()
    act_pool, wt_pool = split_memory(memory)
    for layer in enumerate_layers(axes):
        yield SweepPoint(
            layer=layer,
            label=config_label(layer),
            activation_preloads=activation_preloads(act_pool, layer, memory.preload_scale),
            weight_preloads=weight_preloads(wt_pool, layer, memory.preload_scale),
            activation_memory=activation_memory(layer, corrected=corrected),
            weight_memory=weight_memory(layer),
        )


# ── aggregation ──────────────────────────────────────────────────────────

@dataclass
class SeriesResult:
    series: Dict[str, List[int]]
    channels: List[int]

    def __len__(self) -> int:
        return len(self.series)


@dataclass
class SeriesAccumulator:
    """label → costs in input-channel order (channel axis order is preserved per label)."""
    series: Dict[str, List[int]] = field(default_factory=dict)

    def add(self, label: str, value: int):
        self.series.setdefault(label, []).append(value)

    def finalize(self, channels: Sequence[int]) -> SeriesResult:
        return SeriesResult(series={k: list(v) for k, v in self.series.items()}, channels=list(channels))


@dataclass
class HistogramResult:
    max_cost: int
    distinct_cost_count: int
    total_evaluated: int
    counts: Dict[int, int]
    count_of_counts: Dict[int, int]

    def count_of_count(self, occurrences: int) -> int:
        """Number of distinct memory values seen exactly `occurrences` times."""
        return self.count_of_counts.get(occurrences, 0)

    def summary(self, upto: int = 3) -> Dict[str, int]:
        out = {
            "max_cost": self.max_cost,
            "distinct_cost_count": self.distinct_cost_count,
        }
        for n in range(1, upto + 1):
            out[f"count_of_count[{n}]"] = self.count_of_count(n)
        return out


@dataclass
class HistogramAccumulator:
    counts: Dict[int, int] = field(default_factory=dict)

    def add(self, value: int):
        if value in self.counts:
            self.counts[value] += 1
        else:
            self.counts[value] = 1

    def merge(self, other: "HistogramAccumulator") -> "HistogramAccumulator":
        merged = HistogramAccumulator(counts=dict(self.counts))
        for value, n in other.counts.items():
            merged.counts[value] = merged.counts.get(value, 0) + n
        return merged

    def finalize(self) -> HistogramResult:
        count_of_counts: Dict[int, int] = {}
        for n in self.counts.values():
            count_of_counts[n] = count_of_counts.get(n, 0) + 1
        return HistogramResult(
            max_cost=max(self.counts) if self.counts else 0,
            distinct_cost_count=len(self.counts),
            total_evaluated=sum(self.counts.values()),
            counts=dict(sorted(self.counts.items())),
            count_of_counts=dict(sorted(count_of_counts.items())),
        )


def sweep_series(axes: SweepAxes, memory: Optional[MemoryConfig] = None) -> SeriesResult:
    # one series per label, exactly len(input_channels) points each
    acc = SeriesAccumulator()
    for point in evaluate(axes.unique_labels(), memory):
        acc.add(point.label, point.weight_preloads)
    return acc.finalize(axes.input_channels)


def sweep_histogram(axes: SweepAxes, memory: Optional[MemoryConfig] = None,
                    metric: MemoryMetric = MemoryMetric.TOTAL, corrected: bool = False) -> HistogramResult:
    acc = HistogramAccumulator()
    for point in evaluate(axes, memory, corrected=corrected):
        acc.add(point.memory(metric))
    return acc.finalize()


def run_sweep(axes: SweepAxes, mode: AggregationMode, memory: Optional[MemoryConfig] = None,
              metric: MemoryMetric = MemoryMetric.TOTAL, corrected: bool = False):
    """Dispatch one enumeration to the requested aggregation."""
    log.debug("sweep start: mode=%s combinations=%d", mode.value, axes.combination_count)
    if mode is AggregationMode.PLOT_SERIES:
        result = sweep_series(axes, memory)
        log.debug("sweep done: %d series", len(result))
    else:
        result = sweep_histogram(axes, memory, metric=metric, corrected=corrected)
        log.debug("sweep done: %d distinct values", result.distinct_cost_count)
    return result
