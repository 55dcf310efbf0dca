"""Project resolved rates onto the records handed to sinks and reporters."""

from __future__ import annotations

from typing import Iterable

from fx_cyprus.ingestion.models import Rate, RateRecord


def to_record(rate: Rate) -> RateRecord:
    return RateRecord(
        from_currency=rate.from_currency,
        to_currency=rate.to_currency,
        rate=rate.value,
        comment=rate.note,
    )


def build_records(rates: Iterable[Rate]) -> list[RateRecord]:
    """Return one record per rate, preserving accumulation order."""

    return [to_record(rate) for rate in rates]


__all__ = ["build_records", "to_record"]
