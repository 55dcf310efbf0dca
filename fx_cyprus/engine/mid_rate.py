"""Convert published sell/buy quotes into direct rates against the base currency."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from fx_cyprus.context import RunContext
from fx_cyprus.ingestion.models import Quote, Rate, RateKind
from fx_cyprus.utils.fixed_point import round4

TWO = Decimal(2)


def _text(value: Decimal | None) -> str:
    return "" if value is None else str(value)


def direct_note(quote: Quote) -> str:
    return f"{quote.source} (sell={_text(quote.sell)},buy={_text(quote.buy)})"


def compute_mid_rate(quote: Quote, base: str) -> Rate | None:
    """Return ``currency -> base`` at ``1 / mid`` or ``None`` for a degenerate quote."""

    if quote.sell is None or quote.buy is None:
        return None
    total = quote.sell + quote.buy
    if total <= 0:
        return None
    return Rate(
        from_currency=quote.currency,
        to_currency=base,
        value=round4(1 / (total / TWO)),
        note=direct_note(quote),
        kind=RateKind.DIRECT,
    )


def compute_direct_rates(quotes: Iterable[Quote], context: RunContext) -> list[Rate]:
    """Compute one direct rate per quoted currency, in quote order.

    Degenerate quotes and quotes for the base currency itself are dropped. When a
    source lists a currency twice only the first row is used.
    """

    base = context.base_currency
    log = context.logger
    rates: list[Rate] = []
    seen: set[str] = set()
    for quote in quotes:
        if quote.currency == base:
            log.debug("Ignoring %s quote for the base currency %s", quote.source, base)
            continue
        if quote.currency in seen:
            log.warning("Duplicate %s quote for %s ignored", quote.source, quote.currency)
            continue
        rate = compute_mid_rate(quote, base)
        if rate is None:
            log.error(
                "No usable %s rate for %s (sell=%s, buy=%s); dropping it",
                quote.source,
                quote.currency,
                quote.sell,
                quote.buy,
            )
            continue
        seen.add(quote.currency)
        rates.append(rate)
    return rates


__all__ = ["compute_direct_rates", "compute_mid_rate", "direct_note"]
