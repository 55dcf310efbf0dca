"""Abstractions for pluggable quote sources."""

from __future__ import annotations

from typing import Protocol

from fx_cyprus.config import SourceConfig


class SourceFetcher(Protocol):
    """Contract for retrieving a source's raw quote table.

    Implementations return the rows of the table described by ``source.layout``
    as lists of raw cell text, or raise :class:`~fx_cyprus.exceptions.SourceFetchError`.
    """

    def fetch(self, source: SourceConfig) -> list[list[str]]:
        ...  # pragma: no cover - protocol definition


__all__ = ["SourceFetcher"]
