"""Turn raw quote-table rows into normalized :class:`Quote` records."""

from __future__ import annotations

from typing import Iterable, Sequence

from fx_cyprus.config import TableLayout
from fx_cyprus.ingestion.models import Quote
from fx_cyprus.utils.logger import get_logger
from fx_cyprus.utils.fixed_point import parse_decimal

LOGGER = get_logger(__name__)


def clean_value(value: str | None) -> str | None:
    """Strip Windows line breaks, join wrapped lines and trim surrounding whitespace."""

    if not value:
        return value
    value = value.replace("\r", "")
    value = "".join(value.split("\n"))
    return value.strip()


def _cell(row: Sequence[str | None], index: int) -> str:
    if index < 0 or index >= len(row):
        return ""
    return clean_value(row[index]) or ""


class QuoteParser:
    """Extract quotes for the required currencies from one source's rows."""

    def __init__(self, layout: TableLayout, required: Iterable[str], *, source: str) -> None:
        self.layout = layout
        self.required = frozenset(code.upper() for code in required)
        self.source = source

    def parse_row(self, row: Sequence[str | None]) -> Quote | None:
        currency = _cell(row, self.layout.code_index).upper()
        # Currency codes are always 3-character strings
        if len(currency) != 3 or currency not in self.required:
            return None
        return Quote(
            currency=currency,
            sell=parse_decimal(_cell(row, self.layout.selling_index)),
            buy=parse_decimal(_cell(row, self.layout.buying_index)),
            source=self.source,
        )

    def parse(self, rows: Iterable[Sequence[str | None]]) -> list[Quote]:
        quotes: list[Quote] = []
        for row in rows:
            quote = self.parse_row(row)
            if quote is not None:
                quotes.append(quote)
        LOGGER.debug("Parsed %s %s quotes", len(quotes), self.source)
        return quotes


__all__ = ["QuoteParser", "clean_value"]
