"""
Sweep conv-layer configs and report memory preload estimates.

  plot_series (default without --config): reference sweep (17×17, C_in 1..1533, filters step 128),
              weight preloads per C_in for each config → line chart / table.
  histogram   (default with --config):     axes from hardware/operation/mode in the JSON file,
              one memory value per combination → max, distinct count, count-of-counts.

Exit codes: 0 ok, 1 config error, 2 usage error.

Run:  python sweep_preload.py
      python sweep_preload.py --config config/sweep_config.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from preload_model import ACTIVATION_FRACTION, PRELOAD_SCALE, TOTAL_MEMORY_BYTES, MemoryConfig
from preload_sweep import AggregationMode, MemoryMetric, SweepAxes, run_sweep
from sweep_config import (
    DEFAULT_HARDWARE,
    DEFAULT_MODE,
    DEFAULT_OPERATION,
    SweepConfigError,
    load_conv2d_parameters,
)

log = logging.getLogger("sweep_preload")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sweep_preload",
        description="Estimate memory preload costs over a conv-layer parameter sweep.",
    )
    parser.add_argument("--mode", choices=[m.value for m in AggregationMode], default=None,
                        help="Aggregation (default: histogram with --config, else plot_series).")
    parser.add_argument("--config", default=None, help="Sweep config JSON.")
    parser.add_argument("--hardware", default=DEFAULT_HARDWARE)
    parser.add_argument("--operation", default=DEFAULT_OPERATION)
    parser.add_argument("--timing-mode", default=DEFAULT_MODE, help="Mode key under hardware/operation.")
    parser.add_argument("--metric", choices=[m.value for m in MemoryMetric], default=MemoryMetric.TOTAL.value,
                        help="Memory value used for the histogram.")
    parser.add_argument("--corrected-activation", action="store_true",
                        help="Use output height instead of kernel height in activation memory.")
    parser.add_argument("--total-mib", type=float, default=TOTAL_MEMORY_BYTES / 2 ** 20)
    parser.add_argument("--activation-fraction", type=float, default=ACTIVATION_FRACTION)
    parser.add_argument("--preload-scale", type=int, default=PRELOAD_SCALE)
    parser.add_argument("--out", default=None, help="Save a figure to this path.")
    parser.add_argument("--table", action="store_true", help="Print plot series as a table.")
    parser.add_argument("--log-level", type=str.upper, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def _print_histogram(result):
    for key, val in result.summary().items():
        print(f"{key}: {val}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    mode = AggregationMode(args.mode) if args.mode else (
        AggregationMode.HISTOGRAM if args.config else AggregationMode.PLOT_SERIES)

    try:
        memory = MemoryConfig.from_mib(args.total_mib, activation_fraction=args.activation_fraction,
                                       preload_scale=args.preload_scale)
    except ValueError as e:
        log.error("invalid memory settings: %s", e)
        return 2

    if args.config:
        try:
            params = load_conv2d_parameters(args.config, args.hardware, args.operation, args.timing_mode)
        except SweepConfigError as e:
            log.error("%s", e)
            return 1
        axes = SweepAxes.from_parameters(params)
    else:
        axes = SweepAxes.reference()

    log.info("%s sweep over %d combinations", mode.value, axes.combination_count)
    result = run_sweep(axes, mode, memory, metric=MemoryMetric(args.metric), corrected=args.corrected_activation)

    if mode is AggregationMode.HISTOGRAM:
        _print_histogram(result)
        if args.out:
            import matplotlib.pyplot as plt
            from preload_plots import fig_count_histogram

            fig = fig_count_histogram(result)
            fig.savefig(args.out, dpi=150)
            plt.close(fig)
            print(f"Saved {args.out}")
        return 0

    from preload_plots import FigureSink, TerminalSink

    if args.table or not args.out:
        TerminalSink().render(result.series, result.channels)
    if args.out:
        FigureSink(args.out).render(result.series, result.channels)
        print(f"Saved {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
