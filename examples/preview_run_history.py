"""Render a preview report from a generated run history.

This script builds a deterministic sample history and a set of in-run
snapshots, then writes history, gait and hip charts plus text summaries.
"""

from __future__ import annotations

import argparse
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from run_analytics.config import EngineConfig
from run_analytics.report_generator import ReportGenerator
from run_analytics.sample_data import DEFAULT_SEED, generate_runs, generate_snapshots
from run_analytics.stats import StatsAggregator

LOG_PATH = Path("logs") / "run_analytics.log"


def configure_logging(log_path: Path = LOG_PATH, level: str = "INFO") -> None:
    """Log to a rotating file at ``level`` and to stderr at WARNING+.

    DEBUG surfaces the degenerate-input notes (flat series, zero-length gait
    arcs, unclamped bars).
    """

    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_level = getattr(logging, level.upper())

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.WARNING)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_level, logging.WARNING))
    root_logger.handlers.clear()
    root_logger.addHandler(file_handler)
    root_logger.addHandler(stream_handler)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview run history charts")
    parser.add_argument(
        "--output",
        default="./reports",
        help="Directory to store charts and summaries",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=30,
        help="Number of runs in the sample history",
    )
    parser.add_argument(
        "--snapshots",
        type=int,
        default=8,
        help="Number of in-run snapshots",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help="Random seed for the sample data",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=LOG_PATH,
        help="Rotating log file path",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING"],
        default="INFO",
        help="Level written to the log file",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging(args.log_file, args.log_level)

    config = EngineConfig.from_env()
    runs = generate_runs(count=args.runs, seed=args.seed)
    snapshots = generate_snapshots(count=args.snapshots, seed=args.seed)
    logging.info("Generated %d runs and %d snapshots", len(runs), len(snapshots))

    generator = ReportGenerator(output_dir=args.output, config=config)
    report_files = generator.generate_complete_report(runs, snapshots)
    logging.info("Reports generated in %s", args.output)

    totals = StatsAggregator(config).history_totals(runs)

    print("\nPreview report written")
    if totals is not None:
        print(f"Runs: {totals.total_runs}, {totals.total_distance:.1f} mi")
    for name, path in report_files.items():
        print(f"  {name}: {path or '(skipped)'}")
    print(f"Logs: {args.log_file}")

    print("\n" + generator.generate_text_summary(runs)["athlete"])


if __name__ == "__main__":
    main()
