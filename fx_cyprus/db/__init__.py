"""Helpers for locating the bundled SQLite rate database."""

from __future__ import annotations

from pathlib import Path
from typing import Final

__all__ = ["DEFAULT_SQLITE_DB_PATH", "bundled_sqlite_path"]

# Resolved so callers always receive an absolute path, which SQLite requires
# when the package is installed in site-packages.
DEFAULT_SQLITE_DB_PATH: Final[Path] = Path(__file__).resolve().with_name("currency_rates.db")


def bundled_sqlite_path() -> Path:
    """Return the absolute path to the packaged ``currency_rates.db`` file."""

    return DEFAULT_SQLITE_DB_PATH
