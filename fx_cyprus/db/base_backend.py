"""Backend strategy interfaces for rate sinks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from fx_cyprus.db.sqlite_manager import PersistenceResult
from fx_cyprus.ingestion.models import RateRecord


class BackendStrategy(ABC):
    """Common interface implemented by every database backend."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create required tables and verify connectivity."""

    @abstractmethod
    def insert_rates(self, rows: Sequence[RateRecord]) -> PersistenceResult:
        """Insert or update rates one record at a time.

        A record that fails to persist is logged and counted in
        :attr:`PersistenceResult.failed`; the remaining records are still written.
        """

    @abstractmethod
    def fetch_all(self) -> list[RateRecord]:
        """Return every stored rate ordered by currency pair."""

    def close(self) -> None:  # pragma: no cover - optional cleanup hook
        """Backends may override to release connections/resources."""


__all__ = ["BackendStrategy"]
