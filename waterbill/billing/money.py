from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal | None:
    """Best-effort numeric coercion for tariff data; ``None`` when not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # repr round-trips, so 0.1 stays 0.1 rather than its binary expansion.
        return Decimal(repr(value))
    if isinstance(value, int):
        return Decimal(value)
    s = str(value).strip().replace(",", "")
    if not s:
        return None
    try:
        d = Decimal(s)
    except InvalidOperation:
        return None
    return d if d.is_finite() else None


def rate_or_zero(value: Any) -> Decimal:
    d = to_decimal(value)
    return ZERO if d is None else d


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
