"""Fetch bank quote tables from public HTML pages (requests + BeautifulSoup)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import requests
from bs4 import BeautifulSoup

from fx_cyprus.config import SourceConfig, TableLayout
from fx_cyprus.exceptions import SourceFetchError
from fx_cyprus.utils.logger import get_logger

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from bs4 import Tag

LOGGER = get_logger(__name__)

DEFAULT_USER_AGENT = "fx-cyprus-rate-updater/1.0"


def _table_depth(table: "Tag") -> int:
    return len(table.find_parents("table"))


def select_table(soup: BeautifulSoup, depth: tuple[int, int]) -> "Tag | None":
    """Return the ``count``-th table nested inside exactly ``depth`` tables."""

    wanted_depth, count = depth
    matches = [table for table in soup.find_all("table") if _table_depth(table) == wanted_depth]
    if count < 0 or count >= len(matches):
        return None
    return matches[count]


def _own_rows(table: "Tag") -> list["Tag"]:
    # Rows of nested tables belong to those tables, not to this one.
    return [row for row in table.find_all("tr") if row.find_parent("table") is table]


def extract_rows(html: str, layout: TableLayout) -> list[list[str]]:
    """Parse ``html`` and return the cell text of every row of the selected table."""

    soup = BeautifulSoup(html, "html.parser")
    table = select_table(soup, layout.depth)
    if table is None:
        raise ValueError(f"No table found at depth {layout.depth}")
    rows: list[list[str]] = []
    for tr in _own_rows(table):
        cells = tr.find_all(["td", "th"], recursive=False)
        rows.append([cell.get_text() for cell in cells])
    return rows


class HtmlTableFetcher:
    """Single-attempt downloader for a bank's quote table."""

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", DEFAULT_USER_AGENT)
        self.timeout = timeout

    def fetch(self, source: SourceConfig) -> list[list[str]]:
        try:
            response = self.session.get(source.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SourceFetchError(source.url, str(exc)) from exc
        LOGGER.info("Fetched %s quotes page from %s", source.name, source.url)
        try:
            rows = extract_rows(response.text, source.layout)
        except ValueError as exc:
            raise SourceFetchError(source.url, str(exc)) from exc
        LOGGER.debug("Extracted %s rows from %s", len(rows), source.name)
        return rows


__all__ = ["DEFAULT_USER_AGENT", "HtmlTableFetcher", "extract_rows", "select_table"]
