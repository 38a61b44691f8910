"""
Command-line entry point.

Usage:
    swimtrack ingest FILE...
    swimtrack analyze FILE... [--lookback-days N]

Both commands print JSON to stdout; logs go to stderr. Configuration is
read from environment variables or a `.env` file in the working directory.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import Optional

from dotenv import load_dotenv

from . import __version__
from .config.settings import get_settings
from .core.stats.engine import analyze
from .infrastructure.parsers.ingest import ingest_paths
from .reporting.schemas import IngestResultPayload, StatisticsReportPayload


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="swimtrack", description="Swim file ingestion and statistics")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="Parse files and print normalized sessions")
    ingest.add_argument("files", nargs="+", help="FIT, TCX or CSV files")

    stats = commands.add_parser("analyze", help="Parse files and print the statistics report")
    stats.add_argument("files", nargs="+", help="FIT, TCX or CSV files")
    stats.add_argument(
        "--lookback-days",
        type=int,
        default=None,
        help="Only analyze sessions from the last N days (default: all-time)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "lookback_days", None) is not None and args.lookback_days <= 0:
        parser.error("--lookback-days must be positive")

    get_settings.cache_clear()
    settings = get_settings()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )

    problems = settings.validate_thresholds()
    if problems:
        logger.error("Invalid configuration", extra={"problems": problems})
        for problem in problems:
            print(problem, file=sys.stderr)
        return 2

    summary = asyncio.run(ingest_paths(args.files, settings.ingest_options))

    if args.command == "ingest":
        output = [IngestResultPayload.from_domain(result).model_dump(mode="json") for result in summary.results]
    else:
        config = settings.analysis_config
        if args.lookback_days is not None:
            config = replace(config, lookback_days=args.lookback_days)
        report = analyze(summary.sessions, config)
        output = StatisticsReportPayload.from_domain(report).model_dump(mode="json")
        for failure in summary.failures:
            print(failure.error, file=sys.stderr)

    print(json.dumps(output, indent=2))
    return 1 if summary.all_failed else 0


if __name__ == "__main__":
    sys.exit(main())
