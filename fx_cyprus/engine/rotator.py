"""Add the inverse of every rate quoted against the base currency."""

from __future__ import annotations

from typing import Iterable

from fx_cyprus.context import RunContext
from fx_cyprus.ingestion.models import Rate, RateKind
from fx_cyprus.utils.fixed_point import round4


def reverse_rate(rate: Rate) -> Rate:
    return Rate(
        from_currency=rate.to_currency,
        to_currency=rate.from_currency,
        value=round4(1 / rate.value),
        note=f"Reversed automatically (original={rate.value})",
        kind=RateKind.REVERSED,
    )


def rotate_rates(rates: Iterable[Rate], context: RunContext) -> list[Rate]:
    """Return ``rates`` with each ``X -> base`` followed by its ``base -> X`` inverse.

    Inverses already present in the input are not emitted again, so rotating a
    rotated table returns it unchanged.
    """

    base = context.base_currency
    rates = list(rates)
    covered = {rate.pair for rate in rates}
    results: list[Rate] = []
    for rate in rates:
        results.append(rate)
        if rate.to_currency != base or rate.value == 0:
            continue
        if (base, rate.from_currency) in covered:
            continue
        reversed_rate = reverse_rate(rate)
        covered.add(reversed_rate.pair)
        results.append(reversed_rate)
    context.logger.debug("Rotated %s rates into %s", len(rates), len(results))
    return results


__all__ = ["reverse_rate", "rotate_rates"]
