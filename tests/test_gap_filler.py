from __future__ import annotations

from decimal import Decimal

from fx_cyprus.engine.gap_filler import fill_missing_rates, required_pairs, triangulate
from fx_cyprus.ingestion.models import Rate, RateKind


def _direct(currency: str, value: str) -> Rate:
    return Rate(currency, "EUR", Decimal(value), f"direct {currency}")


def test_required_pairs_excludes_base_and_identity() -> None:
    assert required_pairs(["EUR", "USD", "GBP"], "EUR") == [("USD", "GBP"), ("GBP", "USD")]


def test_triangulate_uses_rounded_inverse_leg() -> None:
    assert triangulate(Decimal("0.9000"), Decimal("0.8500")) == (
        Decimal("1.1765"),
        Decimal("1.0588"),
    )


def test_fill_missing_rates_triangulates_through_base(context) -> None:
    direct = [_direct("USD", "0.9000"), _direct("GBP", "0.8500")]

    rates = fill_missing_rates(direct, ["EUR", "USD", "GBP"], context)

    assert rates[:2] == direct
    usd_gbp, gbp_usd = rates[2:]
    assert usd_gbp.pair == ("USD", "GBP")
    assert usd_gbp.value == Decimal("1.0588")
    assert usd_gbp.kind is RateKind.TRIANGULATED
    assert usd_gbp.note == "Automatically calculated (from=0.9000,to=1.1765)"
    assert gbp_usd.pair == ("GBP", "USD")
    assert gbp_usd.value == Decimal("0.9444")


def test_fill_missing_rates_keeps_existing_pairs(context) -> None:
    published = Rate("USD", "GBP", Decimal("1.0500"), "published")
    direct = [_direct("USD", "0.9000"), _direct("GBP", "0.8500"), published]

    rates = fill_missing_rates(direct, ["USD", "GBP"], context)

    assert [rate.pair for rate in rates].count(("USD", "GBP")) == 1
    assert [rate.pair for rate in rates[3:]] == [("GBP", "USD")]


def test_fill_missing_rates_skips_pairs_with_missing_leg(context) -> None:
    direct = [_direct("USD", "0.9000"), _direct("GBP", "0.8500")]

    rates = fill_missing_rates(direct, ["USD", "GBP", "JPY"], context)

    assert all("JPY" not in rate.pair for rate in rates)
    assert len(rates) == 4


def test_fill_missing_rates_is_order_independent(context) -> None:
    direct = [_direct("USD", "0.9000"), _direct("GBP", "0.8500"), _direct("CHF", "1.0638")]

    forward = fill_missing_rates(direct, ["USD", "GBP", "CHF"], context)
    backward = fill_missing_rates(list(reversed(direct)), ["CHF", "GBP", "USD"], context)

    assert {(rate.pair, rate.value) for rate in forward} == {
        (rate.pair, rate.value) for rate in backward
    }
