"""Resolve a database URL into the matching backend strategy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from urllib.parse import unquote, urlparse

from fx_cyprus.db.base_backend import BackendStrategy


class DatabaseBackend(str, Enum):
    """Supported database engines for the rate sink."""

    SQLITE = "sqlite"
    MYSQL = "mysql"
    POSTGRES = "postgres"

    @classmethod
    def from_scheme(cls, scheme: str) -> "DatabaseBackend":
        """Normalise URL schemes (``postgresql+psycopg2``...) into a backend value."""

        if not scheme:
            raise ValueError("DB_URL must include a scheme (e.g. sqlite:// or postgres://)")
        base_scheme, _, _driver = scheme.lower().partition("+")
        if base_scheme in {"postgresql", "postgres"}:
            return cls.POSTGRES
        if base_scheme == "sqlite":
            return cls.SQLITE
        if base_scheme == "mysql":
            return cls.MYSQL
        raise ValueError(
            "Unsupported database backend. Supported values are SQLite, MySQL and Postgres."
        )


def _sqlite_path(url: str) -> Path:
    parsed = urlparse(url)
    # sqlite:///relative.db -> "/relative.db", sqlite:////abs.db -> "//abs.db"
    path = unquote(parsed.netloc + parsed.path)
    if path.startswith("//"):
        return Path(path[1:])
    return Path(path.lstrip("/"))


def create_backend(url: str) -> BackendStrategy:
    """Instantiate the backend that matches ``url``'s scheme."""

    parsed = urlparse(url)
    backend = DatabaseBackend.from_scheme(parsed.scheme)
    if backend is DatabaseBackend.SQLITE:
        from fx_cyprus.db.sqlite_backend import SQLiteBackend

        return SQLiteBackend(_sqlite_path(url))
    from fx_cyprus.db.relational_backend import MySQLBackend, PostgresBackend

    url = url.replace("postgres://", "postgresql://", 1)
    if backend is DatabaseBackend.POSTGRES:
        return PostgresBackend(url)
    return MySQLBackend(url)


__all__ = ["DatabaseBackend", "create_backend"]
