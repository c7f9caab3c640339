"""Decoding of the free-form JSON columns on a tariff row.

Tariff rows are maintained by hand and arrive from the store as either native
structures or JSON text. ``decode_field`` never raises: a broken column decodes
to an empty container of the requested shape and the problem is logged (and,
when the caller passes an ``issues`` list, recorded there for diagnostics).
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Literal

from waterbill.domain.errors import TariffConfigurationError
from waterbill.domain.models.tariff import (
    RentalPriceTable,
    Tariff,
    TariffRow,
    UsageTier,
    UsageTierTable,
)
from waterbill.logger import get_logger

from .money import rate_or_zero, to_decimal

Shape = Literal["object", "array"]

DEFAULT_DOMESTIC_VAT_THRESHOLD_M3 = Decimal("15")
_UNBOUNDED_LIMITS = {"infinity", "inf", "+infinity", "unbounded", ""}
_LIMIT_KEYS = ("limit", "upTo", "up_to")


def _empty(expected_shape: Shape) -> dict[str, Any] | list[Any]:
    return [] if expected_shape == "array" else {}


def _matches(value: Any, expected_shape: Shape) -> bool:
    if expected_shape == "array":
        return isinstance(value, list)
    return isinstance(value, dict)


def _note(issues: list[str] | None, message: str) -> None:
    if issues is not None:
        issues.append(message)


def decode_field(
    raw: Any,
    field_name: str,
    expected_shape: Shape,
    *,
    issues: list[str] | None = None,
) -> dict[str, Any] | list[Any]:
    logger = get_logger()
    if raw is None:
        logger.warning(f"tariff field '{field_name}' is missing; using empty {expected_shape}")
        _note(issues, f"{field_name}: missing")
        return _empty(expected_shape)

    if isinstance(raw, (dict, list)):
        if _matches(raw, expected_shape):
            return raw
        logger.error(f"tariff field '{field_name}' expected {expected_shape}, got {type(raw).__name__}")
        _note(issues, f"{field_name}: expected {expected_shape}, got {type(raw).__name__}")
        return _empty(expected_shape)

    if isinstance(raw, (str, bytes)):
        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            logger.error(f"tariff field '{field_name}' is not valid JSON: {exc}")
            _note(issues, f"{field_name}: invalid JSON")
            return _empty(expected_shape)
        if _matches(parsed, expected_shape):
            return parsed
        logger.error(f"tariff field '{field_name}' JSON decoded to {type(parsed).__name__}, expected {expected_shape}")
        _note(issues, f"{field_name}: JSON is not an {expected_shape}")
        return _empty(expected_shape)

    logger.error(f"tariff field '{field_name}' has unexpected type {type(raw).__name__}")
    _note(issues, f"{field_name}: unexpected type {type(raw).__name__}")
    return _empty(expected_shape)


def _parse_limit(value: Any, index: int) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in _UNBOUNDED_LIMITS:
        return None
    if isinstance(value, float) and value == float("inf"):
        return None
    limit = to_decimal(value)
    if limit is None:
        raise TariffConfigurationError(
            "tier limit is not a number",
            details={"tier_index": index, "limit": repr(value)},
        )
    return limit


def decode_tier_table(raw: Any, *, issues: list[str] | None = None) -> UsageTierTable:
    """Decode the ``tiers`` column. Structural problems are fatal, unlike other columns."""
    items = decode_field(raw, "tiers", "array", issues=issues)
    tiers: list[UsageTier] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise TariffConfigurationError(
                "tier entry is not an object",
                details={"tier_index": index},
            )
        raw_limit = next((item[k] for k in _LIMIT_KEYS if k in item), None)
        rate = to_decimal(item.get("rate"))
        if rate is None:
            raise TariffConfigurationError(
                "tier rate is not a number",
                details={"tier_index": index, "rate": repr(item.get("rate"))},
            )
        tiers.append(UsageTier(limit=_parse_limit(raw_limit, index), rate=rate))
    return UsageTierTable(tuple(tiers))


def decode_rental_table(raw: Any, *, issues: list[str] | None = None) -> RentalPriceTable:
    decoded = decode_field(raw, "meter_rent_prices", "object", issues=issues)
    prices: dict[str, Decimal] = {}
    for key, value in decoded.items():
        price = to_decimal(value)
        if price is None or price < 0:
            get_logger().warning(f"meter rent price for size '{key}' is not a usable number: {value!r}")
            _note(issues, f"meter_rent_prices: dropped size '{key}'")
            continue
        prices[str(key)] = price
    return RentalPriceTable(prices)


def decode_tariff(row: TariffRow, *, issues: list[str] | None = None) -> Tariff:
    threshold = to_decimal(row.domestic_vat_threshold_m3)
    if threshold is None or threshold < 0:
        threshold = DEFAULT_DOMESTIC_VAT_THRESHOLD_M3
    return Tariff(
        customer_type=row.customer_type,
        year=int(row.year),
        tiers=decode_tier_table(row.tiers, issues=issues),
        meter_rent_prices=decode_rental_table(row.meter_rent_prices, issues=issues),
        sewerage_rate=rate_or_zero(row.sewerage_rate),
        maintenance_percentage=rate_or_zero(row.maintenance_percentage),
        sanitation_percentage=rate_or_zero(row.sanitation_percentage),
        vat_rate=rate_or_zero(row.vat_rate),
        domestic_vat_threshold_m3=threshold,
    )
