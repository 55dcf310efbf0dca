"""Shared logic for SQL (Postgres/MySQL) backends."""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from sqlalchemy import DateTime, Numeric, bindparam, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from fx_cyprus.db.base_backend import BackendStrategy
from fx_cyprus.db.sqlite_manager import PersistenceResult, utc_now
from fx_cyprus.ingestion.models import RateRecord
from fx_cyprus.utils.logger import get_logger

LOGGER = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS currency_rates (
    cur_from VARCHAR(3) NOT NULL,
    cur_to VARCHAR(3) NOT NULL,
    rate NUMERIC(18, 4) NOT NULL,
    comments VARCHAR(255) NOT NULL DEFAULT '',
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY(cur_from, cur_to)
);
"""

DELETE_SQL = "DELETE FROM currency_rates WHERE cur_from = :cur_from AND cur_to = :cur_to"
INSERT_SQL = """
INSERT INTO currency_rates(cur_from, cur_to, rate, comments, created_at)
VALUES(:cur_from, :cur_to, :rate, :comments, :created_at)
"""
SELECT_SQL = "SELECT cur_from, cur_to, rate, comments FROM currency_rates ORDER BY cur_from, cur_to"


def _insert_statement():
    # Typed binds let drivers without native decimals (sqlite3) accept the rate.
    return text(INSERT_SQL).bindparams(
        bindparam("rate", type_=Numeric(18, 4)),
        bindparam("created_at", type_=DateTime()),
    )


class RelationalBackend(BackendStrategy):
    """Base class that encapsulates SQLAlchemy powered interactions."""

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine_instance: Engine | None = None

    def _get_engine(self) -> Engine:
        if self._engine_instance is None:
            self._engine_instance = create_engine(self.url, future=True)
        return self._engine_instance

    def ensure_schema(self) -> None:
        engine = self._get_engine()
        with engine.begin() as connection:
            LOGGER.info("Ensuring currency_rates schema exists")
            connection.execute(text("SELECT 1"))
            connection.execute(text(SCHEMA_SQL))

    def insert_rates(self, rows: Sequence[RateRecord]) -> PersistenceResult:
        result = PersistenceResult()
        if not rows:
            return result
        engine = self._get_engine()
        for row in rows:
            params = {
                "cur_from": row.from_currency,
                "cur_to": row.to_currency,
                "rate": row.rate,
                "comments": row.comment,
                "created_at": utc_now(),
            }
            try:
                with engine.begin() as connection:
                    replaced = connection.execute(text(DELETE_SQL), params).rowcount
                    connection.execute(_insert_statement(), params)
            except SQLAlchemyError as exc:
                result.failed += 1
                LOGGER.error(
                    "Failed to save rate %s -> %s: %s", row.from_currency, row.to_currency, exc
                )
                continue
            if replaced:
                result.updated += 1
            else:
                result.inserted += 1
        return result

    def fetch_all(self) -> list[RateRecord]:
        engine = self._get_engine()
        records: list[RateRecord] = []
        with engine.connect() as connection:
            for row in connection.execute(text(SELECT_SQL)):
                mapping = row._mapping
                records.append(
                    RateRecord(
                        from_currency=mapping["cur_from"],
                        to_currency=mapping["cur_to"],
                        rate=_normalise_rate(mapping["rate"]),
                        comment=mapping["comments"],
                    )
                )
        return records

    def close(self) -> None:  # pragma: no cover - trivial resource cleanup
        if self._engine_instance is not None:
            self._engine_instance.dispose()


def _normalise_rate(value: object) -> Decimal:
    """Return a four-place Decimal whatever numeric type the driver hands back."""

    if isinstance(value, Decimal):
        return value.quantize(Decimal("0.0001"))
    return Decimal(str(value)).quantize(Decimal("0.0001"))


class PostgresBackend(RelationalBackend):
    """Concrete relational backend for PostgreSQL engines."""


class MySQLBackend(RelationalBackend):
    """Concrete relational backend for MySQL engines."""


__all__ = ["MySQLBackend", "PostgresBackend", "RelationalBackend"]
