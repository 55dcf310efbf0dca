from __future__ import annotations

from decimal import Decimal

from fx_cyprus.engine.mid_rate import compute_direct_rates, compute_mid_rate
from fx_cyprus.ingestion.models import Quote, RateKind


def _quote(currency: str, sell: str | None, buy: str | None, source: str = "Hellenic Bank") -> Quote:
    return Quote(
        currency=currency,
        sell=Decimal(sell) if sell is not None else None,
        buy=Decimal(buy) if buy is not None else None,
        source=source,
    )


def test_compute_mid_rate_inverts_average_price() -> None:
    rate = compute_mid_rate(_quote("USD", "1.1000", "1.0900"), "EUR")

    assert rate is not None
    assert rate.pair == ("USD", "EUR")
    assert rate.value == Decimal("0.9132")
    assert rate.kind is RateKind.DIRECT
    assert rate.note == "Hellenic Bank (sell=1.1000,buy=1.0900)"


def test_compute_mid_rate_rejects_degenerate_quotes() -> None:
    assert compute_mid_rate(_quote("USD", "0", "0"), "EUR") is None
    assert compute_mid_rate(_quote("USD", None, "1.09"), "EUR") is None
    assert compute_mid_rate(_quote("USD", "1.10", None), "EUR") is None


def test_compute_direct_rates_drops_unusable_and_duplicate_quotes(context) -> None:
    quotes = [
        _quote("USD", "1.1000", "1.0900"),
        _quote("GBP", None, None),
        _quote("EUR", "1", "1"),
        _quote("CHF", "0.9500", "0.9300"),
        _quote("USD", "2.0000", "2.0000"),
    ]

    rates = compute_direct_rates(quotes, context)

    assert [rate.pair for rate in rates] == [("USD", "EUR"), ("CHF", "EUR")]
    assert rates[0].value == Decimal("0.9132")
    assert rates[1].value == Decimal("1.0638")
