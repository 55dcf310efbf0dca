"""Cross-check two independently published quote sets."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from fx_cyprus.context import RunContext
from fx_cyprus.exceptions import ToleranceExceededError
from fx_cyprus.ingestion.models import Quote
from fx_cyprus.utils.fixed_point import round2

HUNDRED = Decimal(100)


@dataclass(slots=True)
class QuoteComparison:
    """Percentage divergence between two sources for one currency."""

    currency: str
    selling_diff: Decimal
    buying_diff: Decimal

    def exceeds(self, threshold: Decimal) -> bool:
        return self.selling_diff > threshold or self.buying_diff > threshold


def percent_difference(reference: Decimal, other: Decimal) -> Decimal:
    """``|reference - other| * 100 / reference`` rounded to two places."""

    return round2(abs(reference - other) * HUNDRED / reference)


def _compare(primary: Quote, secondary: Quote) -> QuoteComparison | None:
    """Return the divergence of both prices, or ``None`` when they cannot be compared."""

    if primary.sell is None or primary.buy is None:
        return None
    if secondary.sell is None or secondary.buy is None:
        return None
    if primary.sell == 0 or primary.buy == 0:
        return None
    return QuoteComparison(
        currency=primary.currency,
        selling_diff=percent_difference(primary.sell, secondary.sell),
        buying_diff=percent_difference(primary.buy, secondary.buy),
    )


def validate_quotes(
    primary: Sequence[Quote],
    secondary: Sequence[Quote],
    threshold: Decimal,
    context: RunContext,
) -> list[QuoteComparison]:
    """Compare every currency quoted by both sources.

    Raises :class:`ToleranceExceededError` on the first currency whose selling or
    buying price diverges by more than ``threshold`` percent. Currencies quoted by
    only one source are not compared.
    """

    log = context.logger
    comparisons: list[QuoteComparison] = []
    for quote in primary:
        for other in secondary:
            if other.currency != quote.currency:
                continue
            comparison = _compare(quote, other)
            if comparison is None:
                log.warning(
                    "Cannot compare %s between %s and %s: missing prices",
                    quote.currency,
                    quote.source,
                    other.source,
                )
                continue
            log.debug(
                "Selling: %s=%s; %s=%s --> %s; buying: %s=%s; %s=%s --> %s",
                quote.source,
                quote.sell,
                other.source,
                other.sell,
                comparison.selling_diff,
                quote.source,
                quote.buy,
                other.source,
                other.buy,
                comparison.buying_diff,
            )
            if comparison.exceeds(threshold):
                raise ToleranceExceededError(
                    quote.currency,
                    context.base_currency,
                    comparison.selling_diff,
                    comparison.buying_diff,
                    threshold,
                )
            comparisons.append(comparison)
    return comparisons


__all__ = ["QuoteComparison", "percent_difference", "validate_quotes"]
