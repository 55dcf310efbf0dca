"""Fetch Hellenic Bank rates, cross-check them against Bank of Cyprus and save them.

Meant to run as a scheduled job; only one instance may run at a time.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from fx_cyprus.config import LOG_LEVELS, Settings, load_settings, parse_threshold
from fx_cyprus.context import RunContext
from fx_cyprus.db.factory import create_backend
from fx_cyprus.exceptions import ConfigurationError, FatalRunError
from fx_cyprus.ingestion.html_table import HtmlTableFetcher
from fx_cyprus.ingestion.strategy import SourceFetcher
from fx_cyprus.pipeline import UpdateResult, build_rate_table, publish_rates
from fx_cyprus.reporting.reporters import (
    CompositeReporter,
    CsvReporter,
    HtmlReporter,
    LogReporter,
    Reporter,
)
from fx_cyprus.utils.lock import RunLock
from fx_cyprus.utils.logger import get_logger, set_log_level

LOGGER = get_logger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2

__all__ = ["build_reporter", "parse_args", "update_rates", "main"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", help="Path to the TOML configuration file")
    parser.add_argument("--db", dest="db_url", help="Database URL overriding [sink] url")
    parser.add_argument("--csv", dest="csv_path", help="Write the CSV report to this path")
    parser.add_argument("--html", dest="html_path", help="Write the HTML report to this path")
    parser.add_argument(
        "--threshold",
        dest="threshold",
        help="Maximum allowed difference between the two banks, in percent",
    )
    parser.add_argument("--lock-file", dest="lock_path", help="Run lock file location")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=LOG_LEVELS,
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def build_reporter(settings: Settings) -> Reporter:
    reporters: list[Reporter] = [LogReporter()]
    if settings.csv_report_path is not None:
        reporters.append(CsvReporter(settings.csv_report_path))
    if settings.html_report_path is not None:
        reporters.append(HtmlReporter(settings.html_report_path))
    return CompositeReporter(reporters)


def update_rates(
    settings: Settings,
    *,
    fetcher: SourceFetcher | None = None,
    reporter: Reporter | None = None,
) -> UpdateResult:
    """Run one locked rate update with the concrete collaborators ``settings`` names."""

    context = RunContext(settings=settings)
    with RunLock(settings.lock_path):
        table = build_rate_table(
            context, fetcher or HtmlTableFetcher(timeout=settings.request_timeout)
        )
        # The sink is opened only once the table has passed every check.
        sink = create_backend(settings.sink_url)
        try:
            return publish_rates(
                table, context, sink=sink, reporter=reporter or build_reporter(settings)
            )
        finally:
            sink.close()


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    threshold = parse_threshold(args.threshold) if args.threshold is not None else None
    return settings.with_overrides(
        db_url=args.db_url,
        csv_report_path=Path(args.csv_path) if args.csv_path else None,
        html_report_path=Path(args.html_path) if args.html_path else None,
        rate_threshold=threshold,
        lock_path=Path(args.lock_path) if args.lock_path else None,
        log_level=args.log_level,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = _settings_from_args(args)
    except ConfigurationError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG
    set_log_level(settings.log_level)
    try:
        result = update_rates(settings)
    except FatalRunError as exc:
        LOGGER.error("Rate update aborted: %s", exc)
        return EXIT_FATAL
    LOGGER.info("Saved %s of %s rates", result.persistence.total, len(result.records))
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
