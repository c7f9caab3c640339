from __future__ import annotations

from typing import Any, Protocol

from waterbill.billing import decode_tier_table
from waterbill.domain.errors import NotFoundError, TariffConfigurationError, ValidationError
from waterbill.domain.models.tariff import TariffRow
from waterbill.infrastructure.persistence.sqla.mappers import tariff_to_payload
from waterbill.logger import get_logger


class TariffAdminStore(Protocol):
    def fetch_tariff(self, customer_type: str, year: int) -> TariffRow | None: ...

    def list_tariffs(self) -> list[TariffRow]: ...

    def upsert_tariff(self, tariff: TariffRow) -> TariffRow: ...


def list_tariffs_payload(store: TariffAdminStore) -> dict[str, Any]:
    return {"tariffs": [tariff_to_payload(t) for t in store.list_tariffs()]}


def get_tariff_payload(store: TariffAdminStore, customer_type: str, year: int) -> dict[str, Any]:
    row = store.fetch_tariff(customer_type, year)
    if row is None:
        raise NotFoundError(
            "tariff not found",
            details={"customer_type": customer_type, "year": year},
        )
    return tariff_to_payload(row)


def upsert_tariff_payload(store: TariffAdminStore, tariff: TariffRow) -> dict[str, Any]:
    # Rental prices may stay messy, but a tier table that cannot price usage is refused.
    try:
        decode_tier_table(tariff.tiers)
    except TariffConfigurationError as exc:
        raise ValidationError(f"invalid tiers: {exc.message}", details=exc.details) from exc
    stored = store.upsert_tariff(tariff)
    get_logger().bind(customer_type=stored.customer_type, year=str(stored.year)).info("tariff saved")
    return tariff_to_payload(stored)
