"""Meter-rental lookup against a hand-authored price table.

Keys are written by people, so the same size may appear as ``"0.5"``, ``"1/2"``
or ``'1/2"'``. An exact textual hit wins; otherwise every key is normalized to a
number and the first one within ``SIZE_TOLERANCE`` of the meter size is used.
When several keys normalize to the same size, table order decides.
"""

from __future__ import annotations

import re
from decimal import Decimal, DivisionByZero, InvalidOperation

from waterbill.domain.models.bill import RentalMatch
from waterbill.domain.models.tariff import RentalPriceTable

from .money import to_decimal

SIZE_TOLERANCE = Decimal("0.000001")
_KEY_NOISE_RE = re.compile(r"[^0-9./-]")
_FRACTION_RE = re.compile(r"^(\d+)/(\d+)$")


def size_label(meter_size: Decimal) -> str:
    """Decimal text form of a size with no exponent or trailing zeros (``0.50`` -> ``"0.5"``)."""
    return format(meter_size.normalize(), "f")


def normalize_size_key(key: str) -> Decimal | None:
    cleaned = _KEY_NOISE_RE.sub("", str(key or "")).strip()
    if not cleaned:
        return None
    m = _FRACTION_RE.fullmatch(cleaned)
    if m:
        numerator, denominator = int(m.group(1)), int(m.group(2))
        if denominator == 0:
            return None
        try:
            return Decimal(numerator) / Decimal(denominator)
        except (DivisionByZero, InvalidOperation):
            return None
    return to_decimal(cleaned)


def resolve_rental_price(table: RentalPriceTable, meter_size: Decimal) -> RentalMatch:
    exact_key = size_label(meter_size)
    exact = table.get(exact_key)
    if exact is not None:
        return RentalMatch(key=exact_key, price=exact)

    for key in table:
        value = normalize_size_key(key)
        if value is None:
            continue
        if abs(value - meter_size) <= SIZE_TOLERANCE:
            return RentalMatch(key=key, price=table.get(key))
    return RentalMatch()
