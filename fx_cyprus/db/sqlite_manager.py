"""SQLAlchemy persistence for the bundled SQLite rate table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Sequence, cast

from sqlalchemy import Column, DateTime, Numeric, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from fx_cyprus.db import DEFAULT_SQLITE_DB_PATH
from fx_cyprus.ingestion.models import RateRecord
from fx_cyprus.utils.logger import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class _CurrencyRate(Base):
    __tablename__ = "currency_rates"

    cur_from = Column(String(3), primary_key=True)
    cur_to = Column(String(3), primary_key=True)
    rate = Column(Numeric(18, 4), nullable=False)
    comments = Column(String(255), nullable=False, default="")
    created_at = Column(DateTime, nullable=False)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(slots=True)
class PersistenceResult:
    """Represents how many rows were inserted, updated or rejected in a batch."""

    inserted: int = 0
    updated: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        """Return the total number of affected rows."""

        return self.inserted + self.updated


class SQLiteManager:
    """Store currency rates in SQLite through the SQLAlchemy ORM."""

    def __init__(self, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine: Engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            future=True,
        )
        Base.metadata.create_all(self.engine)
        self._SessionFactory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, expire_on_commit=False, future=True
        )

    def _write(self, session: Session, row: RateRecord) -> bool:
        """Upsert ``row`` and return ``True`` when a new row was created."""

        pk = {"cur_from": row.from_currency, "cur_to": row.to_currency}
        existing = session.get(_CurrencyRate, pk)
        if existing is None:
            session.add(
                _CurrencyRate(
                    cur_from=row.from_currency,
                    cur_to=row.to_currency,
                    rate=row.rate,
                    comments=row.comment,
                    created_at=utc_now(),
                )
            )
            return True
        setattr(existing, "rate", row.rate)
        setattr(existing, "comments", row.comment)
        setattr(existing, "created_at", utc_now())
        return False

    def insert_rates(self, rows: Sequence[RateRecord]) -> PersistenceResult:
        result = PersistenceResult()
        for row in rows:
            with self._SessionFactory() as session:
                try:
                    created = self._write(session, row)
                    session.commit()
                except SQLAlchemyError as exc:
                    session.rollback()
                    result.failed += 1
                    LOGGER.error(
                        "Failed to save rate %s -> %s: %s",
                        row.from_currency,
                        row.to_currency,
                        exc,
                    )
                    continue
            if created:
                result.inserted += 1
            else:
                result.updated += 1
        LOGGER.info(
            "Inserted %s rows, updated %s rows, failed %s rows (total %s)",
            result.inserted,
            result.updated,
            result.failed,
            result.total,
        )
        return result

    def fetch_all(self) -> list[RateRecord]:
        with self._SessionFactory() as session:
            stmt = select(_CurrencyRate).order_by(_CurrencyRate.cur_from, _CurrencyRate.cur_to)
            records: list[RateRecord] = []
            for row in session.execute(stmt).scalars():
                model = cast(_CurrencyRate, row)
                records.append(
                    RateRecord(
                        from_currency=cast(str, model.cur_from),
                        to_currency=cast(str, model.cur_to),
                        rate=Decimal(str(model.rate)),
                        comment=cast(str, model.comments),
                    )
                )
            return records

    def close(self) -> None:  # pragma: no cover - trivial
        self.engine.dispose()

    def __enter__(self) -> "SQLiteManager":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        self.close()


__all__ = ["PersistenceResult", "SQLiteManager"]
