from __future__ import annotations

import json
from typing import Any

from sqlalchemy.engine import Row

from waterbill.domain.models.tariff import TariffRow


def row_to_dict(row: Row[Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return dict(row._mapping)


def row_to_tariff(row: Row[Any] | None) -> TariffRow | None:
    data = row_to_dict(row)
    if data is None:
        return None
    return TariffRow(
        customer_type=str(data["customer_type"]),
        year=int(data["year"]),
        tiers=data.get("tiers"),
        meter_rent_prices=data.get("meter_rent_prices"),
        sewerage_rate=data.get("sewerage_rate"),
        maintenance_percentage=data.get("maintenance_percentage"),
        sanitation_percentage=data.get("sanitation_percentage"),
        vat_rate=data.get("vat_rate"),
        domestic_vat_threshold_m3=data.get("domestic_vat_threshold_m3"),
    )


def _json_text(value: Any) -> str | None:
    # Strings are stored verbatim so malformed JSON survives a round trip.
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def tariff_to_values(tariff: TariffRow) -> dict[str, Any]:
    return {
        "customer_type": tariff.customer_type,
        "year": int(tariff.year),
        "tiers": _json_text(tariff.tiers),
        "meter_rent_prices": _json_text(tariff.meter_rent_prices),
        "sewerage_rate": tariff.sewerage_rate,
        "maintenance_percentage": tariff.maintenance_percentage,
        "sanitation_percentage": tariff.sanitation_percentage,
        "vat_rate": tariff.vat_rate,
        "domestic_vat_threshold_m3": tariff.domestic_vat_threshold_m3,
    }


def tariff_to_payload(tariff: TariffRow) -> dict[str, Any]:
    return {
        "customer_type": tariff.customer_type,
        "year": tariff.year,
        "tiers": tariff.tiers,
        "meter_rent_prices": tariff.meter_rent_prices,
        "sewerage_rate": tariff.sewerage_rate,
        "maintenance_percentage": tariff.maintenance_percentage,
        "sanitation_percentage": tariff.sanitation_percentage,
        "vat_rate": tariff.vat_rate,
        "domestic_vat_threshold_m3": tariff.domestic_vat_threshold_m3,
    }
