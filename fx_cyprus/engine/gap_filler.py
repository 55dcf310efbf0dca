"""Fill in missing currency pairs by triangulating through the base currency."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from fx_cyprus.context import RunContext
from fx_cyprus.ingestion.models import Rate, RateKind
from fx_cyprus.utils.fixed_point import round4


def required_pairs(required: Iterable[str], base: str) -> list[tuple[str, str]]:
    """Every ordered pair of distinct non-base required currencies."""

    codes = [code for code in required if code != base]
    return [(source, target) for source in codes for target in codes if source != target]


def direct_legs(rates: Iterable[Rate], base: str) -> dict[str, Decimal]:
    """Map each currency to its first known ``currency -> base`` rate."""

    legs: dict[str, Decimal] = {}
    for rate in rates:
        if rate.to_currency == base and rate.kind is RateKind.DIRECT:
            legs.setdefault(rate.from_currency, rate.value)
    return legs


def triangulate(from_rate: Decimal, to_rate: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(base -> to, from -> to)`` given both legs quoted against the base."""

    inverse = round4(1 / to_rate)
    return inverse, round4(from_rate * inverse)


def fill_missing_rates(
    rates: Sequence[Rate],
    required: Iterable[str],
    context: RunContext,
) -> list[Rate]:
    """Append a triangulated rate for every required pair the input does not cover.

    Only one hop through the base currency is attempted. Pairs with a missing or
    zero leg are logged and left out of the result.
    """

    base = context.base_currency
    log = context.logger
    required = tuple(required)
    legs = direct_legs(rates, base)
    covered = {rate.pair for rate in rates}

    for code in required:
        if code != base and code not in legs:
            log.warning(
                "No direct %s -> %s rate; pairs involving %s cannot be resolved", code, base, code
            )

    results = list(rates)
    for source, target in required_pairs(required, base):
        if (source, target) in covered:
            continue
        log.debug("Calculating rate: %s --> %s", source, target)
        from_rate = legs.get(source)
        to_rate = legs.get(target)
        if not from_rate or not to_rate:
            log.error("Something went wrong while calculating %s => %s!", source, target)
            continue
        inverse, value = triangulate(from_rate, to_rate)
        results.append(
            Rate(
                from_currency=source,
                to_currency=target,
                value=value,
                note=f"Automatically calculated (from={from_rate},to={inverse})",
                kind=RateKind.TRIANGULATED,
            )
        )
        log.debug("RESULT: %s --> %s: %s", source, target, value)
    return results


__all__ = ["direct_legs", "fill_missing_rates", "required_pairs", "triangulate"]
