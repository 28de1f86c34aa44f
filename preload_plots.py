"""
Presentation for preload sweeps. Sinks take finished numbers only; nothing here runs a sweep.

  draw_preload_series   one line per config label, x = C_in
  draw_count_histogram  distinct memory values per occurrence count
  draw_gaussian_surface 3-D surface of a 2-D Gaussian (rendering demo, not tied to the cost model)
"""
from __future__ import annotations

import sys
from typing import Mapping, Optional, Protocol, Sequence, TextIO

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors

GAUSS_SD_X = 0.1
GAUSS_SD_Y = 0.1
GAUSS_AMPLITUDE = 5.0


class SeriesSink(Protocol):
    def render(self, series: Mapping[str, Sequence[int]], channels: Sequence[int]) -> None:
        ...


def series_to_frame(series: Mapping[str, Sequence[int]], channels: Sequence[int]) -> pd.DataFrame:
    df = pd.DataFrame({label: list(vals) for label, vals in series.items()}, index=list(channels))
    df.index.name = "C_in"
    return df


def gaussian_pdf(x, y):
    x = np.asarray(x, dtype=float) / 10.0
    y = np.asarray(y, dtype=float) / 10.0
    return GAUSS_AMPLITUDE * np.exp(-x * x / 2.0 / GAUSS_SD_X / GAUSS_SD_X - y * y / 2.0 / GAUSS_SD_Y / GAUSS_SD_Y)


# ── Panel drawing functions (accept an ax so they work standalone or combined) ─

def draw_preload_series(ax, series: Mapping[str, Sequence[int]], channels: Sequence[int], title=None):
    for label, vals in series.items():
        ax.plot(list(channels), list(vals), "-", linewidth=1, label=label)
    ax.set_xlabel("Input channels (C_in)", fontsize=7)
    ax.set_ylabel("Weight preloads", fontsize=7)
    ax.set_title(title or "Weight preloads vs C_in", fontsize=8)
    if series:
        ax.legend(fontsize=5, loc="upper left")
    ax.grid(True, alpha=0.3)


def draw_count_histogram(ax, result):
    occ = list(result.count_of_counts.keys())
    n_vals = list(result.count_of_counts.values())
    x = np.arange(len(occ))
    ax.bar(x, n_vals, color="#4e79a7", edgecolor="black", linewidth=0.5)
    ax.set_xticks(x)
    ax.set_xticklabels([str(o) for o in occ], fontsize=6)
    ax.set_xlabel("Configs sharing a memory value", fontsize=7)
    ax.set_ylabel("# distinct memory values", fontsize=7)
    ax.set_title(f"Memory value collisions (max = {result.max_cost:,}, "
                 f"{result.distinct_cost_count:,} distinct)", fontsize=8)
    ax.grid(axis="y", alpha=0.3)


def draw_gaussian_surface(ax, pitch: float = 0.5):
    """ax must be a 3-D axes (projection="3d"). pitch in radians, 0 .. π/2."""
    xs = np.arange(-15, 16) / 5.0
    X, Z = np.meshgrid(xs, xs)
    Y = gaussian_pdf(X, Z)
    norm = mcolors.Normalize(vmin=0.0, vmax=GAUSS_AMPLITUDE)
    colors = plt.get_cmap("viridis")(norm(Y))
    ax.plot_surface(X, Z, Y, facecolors=colors, linewidth=0, antialiased=True, shade=False)
    ax.view_init(elev=np.degrees(pitch), azim=-60)
    ax.set_xlim(-3, 3)
    ax.set_ylim(-3, 3)
    ax.set_zlim(0, 6)
    ax.set_title("2D Gaussian PDF", fontsize=8)


# ── Standalone figure wrappers ────────────────────────────────────────────

def fig_preload_series(series, channels, figsize=(10, 5)):
    fig, ax = plt.subplots(figsize=figsize)
    draw_preload_series(ax, series, channels)
    plt.tight_layout()
    return fig


def fig_count_histogram(result, figsize=(8, 5)):
    fig, ax = plt.subplots(figsize=figsize)
    draw_count_histogram(ax, result)
    plt.tight_layout()
    return fig


def fig_gaussian_surface(pitch: float = 0.5, figsize=(6, 4)):
    fig = plt.figure(figsize=figsize)
    ax = fig.add_subplot(projection="3d")
    draw_gaussian_surface(ax, pitch)
    return fig


# ── Sinks ─────────────────────────────────────────────────────────────────

class FigureSink:
    """Saves the series as a line chart."""

    def __init__(self, path, dpi: int = 150):
        self.path = path
        self.dpi = dpi

    def render(self, series, channels):
        fig = fig_preload_series(series, channels)
        fig.savefig(self.path, dpi=self.dpi)
        plt.close(fig)


class TerminalSink:
    """Prints the series as a C_in × label table."""

    def __init__(self, stream: Optional[TextIO] = None, max_rows: int = 20):
        self.stream = stream
        self.max_rows = max_rows

    def render(self, series, channels):
        out = self.stream or sys.stdout
        df = series_to_frame(series, channels)
        if df.empty:
            print("(no data)", file=out)
            return
        print(df.to_string(max_rows=self.max_rows), file=out)
