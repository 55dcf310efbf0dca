"""Data models shared across ingestion, engine and persistence modules."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class RateKind(str, Enum):
    """Provenance of a resolved rate."""

    DIRECT = "direct"
    TRIANGULATED = "triangulated"
    REVERSED = "reversed"


@dataclass(slots=True)
class Quote:
    """One bank's published selling/buying price for a currency against the base."""

    currency: str
    sell: Decimal | None
    buy: Decimal | None
    source: str


@dataclass(slots=True, frozen=True)
class Rate:
    """A directed, fully resolved exchange rate quantized to four places."""

    from_currency: str
    to_currency: str
    value: Decimal
    note: str
    kind: RateKind = RateKind.DIRECT

    def __post_init__(self) -> None:
        if self.from_currency == self.to_currency:
            raise ValueError(f"Rate must connect two currencies, got {self.from_currency} twice")

    @property
    def pair(self) -> tuple[str, str]:
        return (self.from_currency, self.to_currency)


@dataclass(slots=True)
class RateRecord:
    """Row handed to sinks and reporters: ``(from, to, rate, comment)``."""

    from_currency: str
    to_currency: str
    rate: Decimal
    comment: str


__all__ = ["RateKind", "Quote", "Rate", "RateRecord"]
