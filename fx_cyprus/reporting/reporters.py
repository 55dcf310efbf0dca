"""Human-readable renderings of the final rate table."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

import pandas as pd

from fx_cyprus.ingestion.models import RateRecord
from fx_cyprus.utils.logger import get_logger

LOGGER = get_logger(__name__)

REPORT_COLUMNS = ["from", "to", "rate", "comment"]


class Reporter(Protocol):
    def report(self, records: Sequence[RateRecord]) -> None:
        ...  # pragma: no cover - protocol definition


def records_frame(records: Sequence[RateRecord]) -> pd.DataFrame:
    """Build a string-typed frame so rates keep their four decimal places."""

    rows = [
        [record.from_currency, record.to_currency, str(record.rate), record.comment]
        for record in records
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS, dtype=str)


class CsvReporter:
    """Write ``from,to,rate,comment`` rows with CRLF line endings."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def report(self, records: Sequence[RateRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        records_frame(records).to_csv(self.path, index=False, lineterminator="\r\n")
        LOGGER.info("Wrote %s rates to %s", len(records), self.path)


class HtmlReporter:
    """Write the rate table as a standalone HTML page."""

    def __init__(self, path: str | Path, *, title: str = "Currency rates") -> None:
        self.path = Path(path)
        self.title = title

    def render(self, records: Sequence[RateRecord]) -> str:
        table = records_frame(records).to_html(index=False, border=1, escape=True)
        return (
            "<!DOCTYPE html>\n<html>\n<head><meta charset=\"utf-8\">"
            f"<title>{self.title}</title></head>\n<body>\n<h1>{self.title}</h1>\n"
            f"{table}\n</body>\n</html>\n"
        )

    def report(self, records: Sequence[RateRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.render(records), encoding="utf-8")
        LOGGER.info("Wrote HTML report with %s rates to %s", len(records), self.path)


class LogReporter:
    """Log the rate table as aligned text."""

    def report(self, records: Sequence[RateRecord]) -> None:
        if not records:
            LOGGER.info("No rates to report")
            return
        LOGGER.info("Final rates:\n%s", records_frame(records).to_string(index=False))


class CompositeReporter:
    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self.reporters = list(reporters)

    def report(self, records: Sequence[RateRecord]) -> None:
        for reporter in self.reporters:
            reporter.report(records)


__all__ = [
    "CompositeReporter",
    "CsvReporter",
    "HtmlReporter",
    "LogReporter",
    "REPORT_COLUMNS",
    "Reporter",
    "records_frame",
]
