from __future__ import annotations

from typing import Any

from pydantic import Field

from waterbill.api.schemas.common import RequestModel
from waterbill.domain.enums import CustomerType
from waterbill.domain.models.tariff import TariffRow


class UpsertTariffPayload(RequestModel):
    tiers: list[dict[str, Any]] | str
    meter_rent_prices: dict[str, Any] | str | None = None
    sewerage_rate: float | None = Field(default=None, ge=0)
    maintenance_percentage: float | None = Field(default=None, ge=0)
    sanitation_percentage: float | None = Field(default=None, ge=0)
    vat_rate: float | None = Field(default=None, ge=0)
    domestic_vat_threshold_m3: float | None = Field(default=None, ge=0)

    def to_row(self, customer_type: CustomerType, year: int) -> TariffRow:
        return TariffRow(
            customer_type=str(customer_type),
            year=year,
            tiers=self.tiers,
            meter_rent_prices=self.meter_rent_prices,
            sewerage_rate=self.sewerage_rate,
            maintenance_percentage=self.maintenance_percentage,
            sanitation_percentage=self.sanitation_percentage,
            vat_rate=self.vat_rate,
            domestic_vat_threshold_m3=self.domestic_vat_threshold_m3,
        )
