from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from waterbill.api.schemas.common import RequestModel
from waterbill.domain.enums import CustomerType, SewerageConnection
from waterbill.domain.models.bill import BillComputationInput, BillingMonth

# Upper bounds keep cent-quantized totals inside the default decimal context.
MAX_USAGE_M3 = Decimal("1000000000")
MAX_METER_SIZE = Decimal("1000")
MAX_BALANCE = Decimal("1000000000000")


class CalculateBillPayload(RequestModel):
    usage_m3: Decimal = Field(alias="usageM3", ge=0, le=MAX_USAGE_M3)
    customer_type: CustomerType = Field(alias="customerType")
    sewerage_connection: SewerageConnection = Field(alias="sewerageConnection")
    meter_size: Decimal = Field(alias="meterSize", ge=0, le=MAX_METER_SIZE)
    billing_month: str = Field(alias="billingMonth", pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    prior_balance: Decimal = Field(default=Decimal("0"), alias="priorBalance", ge=-MAX_BALANCE, le=MAX_BALANCE)

    def to_input(self) -> BillComputationInput:
        return BillComputationInput(
            usage_m3=self.usage_m3,
            customer_type=self.customer_type,
            sewerage_connection=self.sewerage_connection,
            meter_size=self.meter_size,
            billing_month=BillingMonth.parse(self.billing_month),
        )
