"""Fixed-point helpers shared by the rate engine."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Final

RATE_QUANTUM: Final[Decimal] = Decimal("0.0001")
PERCENT_QUANTUM: Final[Decimal] = Decimal("0.01")


def round4(value: Decimal) -> Decimal:
    """Quantize ``value`` to the four decimal places used for every rate."""

    return value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_EVEN)


def round2(value: Decimal) -> Decimal:
    return value.quantize(PERCENT_QUANTUM, rounding=ROUND_HALF_EVEN)


def parse_decimal(value: object | None) -> Decimal | None:
    """Parse a scraped numeric cell, returning ``None`` for empty or malformed input."""

    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    cleaned = re.sub(r"[^0-9,.-]", "", str(value))
    if "," in cleaned:
        if "." not in cleaned:
            if cleaned.count(",") != 1:
                return None
            cleaned = cleaned.replace(",", ".")
        elif cleaned.rfind(",") > cleaned.find("."):
            return None
        else:
            cleaned = cleaned.replace(",", "")
    if not cleaned:
        return None
    try:
        parsed = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


__all__ = ["RATE_QUANTUM", "PERCENT_QUANTUM", "round4", "round2", "parse_decimal"]
