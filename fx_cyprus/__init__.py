"""Public interface for the fx_cyprus package."""

from __future__ import annotations

from decimal import Decimal
from importlib import metadata as importlib_metadata

from fx_cyprus.config import Settings, load_settings
from fx_cyprus.db import DEFAULT_SQLITE_DB_PATH
from fx_cyprus.exceptions import (
    ConfigurationError,
    EmptySourceError,
    FatalRunError,
    FxCyprusError,
    RunLockHeldError,
    SourceFetchError,
    ToleranceExceededError,
)
from fx_cyprus.ingestion.models import Quote, Rate, RateKind, RateRecord

__all__ = [
    "__version__",
    "ConfigurationError",
    "EmptySourceError",
    "FatalRunError",
    "FxCyprus",
    "FxCyprusError",
    "Quote",
    "Rate",
    "RateKind",
    "RateRecord",
    "RunLockHeldError",
    "Settings",
    "SourceFetchError",
    "ToleranceExceededError",
    "load_settings",
    "update_rates",
]

try:
    __version__ = importlib_metadata.version("fx-cyprus")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"


def update_rates(*args, **kwargs):
    from fx_cyprus.jobs.populate_rates import update_rates as _update_rates

    return _update_rates(*args, **kwargs)


class FxCyprus:
    """Read access to the rates saved by the last successful update."""

    __slots__ = ("db_url", "_backend")

    __version__ = __version__

    def __init__(self, db_url: str | None = None) -> None:
        """Open the sink at ``db_url`` or the bundled SQLite database when omitted."""

        from fx_cyprus.db.factory import create_backend

        self.db_url = db_url or f"sqlite:///{DEFAULT_SQLITE_DB_PATH.as_posix()}"
        self._backend = create_backend(self.db_url)
        self._backend.ensure_schema()

    def rates(self) -> list[RateRecord]:
        """Return every stored rate ordered by currency pair."""

        return self._backend.fetch_all()

    def rate(self, from_currency: str, to_currency: str) -> Decimal | None:
        """Return the stored ``from -> to`` rate or ``None`` when it is unknown."""

        source = from_currency.strip().upper()
        target = to_currency.strip().upper()
        for record in self._backend.fetch_all():
            if record.from_currency == source and record.to_currency == target:
                return record.rate
        return None

    def close(self) -> None:
        self._backend.close()

    def __enter__(self) -> "FxCyprus":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
