"""SQLite backend strategy implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from fx_cyprus.db import DEFAULT_SQLITE_DB_PATH
from fx_cyprus.db.base_backend import BackendStrategy
from fx_cyprus.db.sqlite_manager import PersistenceResult, SQLiteManager
from fx_cyprus.ingestion.models import RateRecord


class SQLiteBackend(BackendStrategy):
    """Backend strategy that stores rates in a local SQLite database."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_SQLITE_DB_PATH,
        *,
        manager: SQLiteManager | None = None,
    ) -> None:
        self.manager = manager or SQLiteManager(db_path)
        self.db_path = Path(self.manager.db_path)

    def ensure_schema(self) -> None:
        # ``SQLiteManager`` creates the schema in its constructor.
        return None

    def insert_rates(self, rows: Sequence[RateRecord]) -> PersistenceResult:
        return self.manager.insert_rates(rows)

    def fetch_all(self) -> list[RateRecord]:
        return self.manager.fetch_all()

    def close(self) -> None:  # pragma: no cover - trivial delegator
        self.manager.close()


__all__ = ["SQLiteBackend"]
