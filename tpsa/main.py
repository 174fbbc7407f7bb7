"""CLI entry point for the TPSA solver."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Sequence

from .config import TPSAConfig, load_config
from .errors import ConfigError, TPSAError
from .io import load_reference_tour, read_points, reference_tour_path, write_output
from .solver import SolveResult, solve_points
from .utils import LOGGER, configure_logging

DEFAULT_MIN_TEMP = 0.01
DEFAULT_MAX_TEMP = 100.0
DEFAULT_THREAD = 16
DEFAULT_PERIOD = 32
DEFAULT_MAX_ITERATION = 100


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parallel tempering simulated annealing for the TSP")
    parser.add_argument("--data", help="Coordinate file (x<TAB>y rows or TSPLIB)")
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument("--min-temp", type=float, help=f"Coldest temperature (default {DEFAULT_MIN_TEMP})")
    parser.add_argument("--max-temp", type=float, help=f"Hottest temperature (default {DEFAULT_MAX_TEMP})")
    parser.add_argument(
        "--thread",
        type=int,
        help=(
            f"Number of replicas (default {DEFAULT_THREAD}). Replicas run on a thread pool, "
            "so the GIL keeps the sweeps on one core at a time"
        ),
    )
    parser.add_argument("--period", type=int, help=f"2-opt sweeps per iteration (default {DEFAULT_PERIOD})")
    parser.add_argument(
        "--max-iteration", type=int, help=f"Exchange cycles (default {DEFAULT_MAX_ITERATION})"
    )
    parser.add_argument("--seed", type=int, help="Seed to use for deterministic runs")
    parser.add_argument(
        "--reference",
        type=Path,
        help="Reference tour file (defaults to ans/<name>.opt.tour next to the data file)",
    )
    parser.add_argument("--output", type=Path, help="Write the result as JSON")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> TPSAConfig:
    """Merge the optional JSON config with command-line overrides."""
    if args.config is not None:
        config = load_config(args.config)
    else:
        config = TPSAConfig(
            min_temp=DEFAULT_MIN_TEMP,
            max_temp=DEFAULT_MAX_TEMP,
            thread=DEFAULT_THREAD,
            period=DEFAULT_PERIOD,
            max_iteration=DEFAULT_MAX_ITERATION,
        )
    overrides = {
        "min_temp": args.min_temp,
        "max_temp": args.max_temp,
        "thread": args.thread,
        "period": args.period,
        "max_iteration": args.max_iteration,
        "seed": args.seed,
        "data_file": args.data,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    if not config.data_file:
        raise ConfigError("A data file is required (--data or data_file in the config)")
    return config.validate()


def print_solution_summary(data_file: str, result: SolveResult) -> None:
    """Display the optimisation result."""
    print(f"Data({data_file})")
    print(f"TPSA solution  : {result.cost}")
    if result.reference_cost is not None:
        print(f"Exact solution : {result.reference_cost}")
        if result.gap is not None:
            print(f"Gap            : {result.gap * 100:.2f}%")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(logging, args.log_level))

    try:
        config = resolve_config(args)
        assert config.data_file is not None
        points = read_points(config.data_file)
    except TPSAError as exc:
        LOGGER.error("%s", exc)
        return 2

    reference_path = args.reference or reference_tour_path(config.data_file)
    reference: List[int] | None = None
    if args.reference is not None or reference_path.exists():
        reference = load_reference_tour(reference_path, len(points))
    else:
        LOGGER.warning("No reference tour found at %s", reference_path)

    result = solve_points(points, config, reference_tour=reference)
    print_solution_summary(config.data_file, result)
    if args.output:
        write_output(args.output, result, data_file=config.data_file)
        LOGGER.info("Result written to %s", args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
