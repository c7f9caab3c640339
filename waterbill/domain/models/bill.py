from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from waterbill.domain.enums import CustomerType, PaymentStatus, SewerageConnection
from waterbill.domain.errors import ValidationError

BILLING_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, slots=True)
class BillingMonth:
    year: int
    month: int

    @classmethod
    def parse(cls, value: str) -> "BillingMonth":
        m = BILLING_MONTH_RE.fullmatch(str(value or "").strip())
        if not m:
            raise ValidationError("billing month must look like YYYY-MM", details={"value": value})
        year, month = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            raise ValidationError("billing month is out of range", details={"value": value})
        return cls(year=year, month=month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True, slots=True)
class BillComputationInput:
    usage_m3: Decimal
    customer_type: CustomerType
    sewerage_connection: SewerageConnection
    meter_size: Decimal
    billing_month: BillingMonth


@dataclass(frozen=True, slots=True)
class RentalMatch:
    key: str | None = None
    price: Decimal | None = None

    @property
    def resolved(self) -> bool:
        return self.key is not None


@dataclass(frozen=True, slots=True)
class TierCharge:
    start: Decimal
    end: Decimal | None
    usage: Decimal
    rate: Decimal
    charge: Decimal


@dataclass(frozen=True, slots=True)
class ComputedBill:
    month_year: str
    usage_m3: Decimal
    usage_charge: Decimal
    rental_charge: Decimal
    sewerage_charge: Decimal
    maintenance_fee: Decimal
    sanitation_fee: Decimal
    vat_amount: Decimal
    balance_carried_forward: Decimal
    total_amount_due: Decimal
    grand_total: Decimal
    bill_period_start: date
    bill_period_end: date
    due_date: date
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    tier_breakdown: tuple[TierCharge, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        return {
            "month_year": self.month_year,
            "usage_m3": float(self.usage_m3),
            "usage_charge": float(self.usage_charge),
            "rental_charge": float(self.rental_charge),
            "sewerage_charge": float(self.sewerage_charge),
            "maintenance_fee": float(self.maintenance_fee),
            "sanitation_fee": float(self.sanitation_fee),
            "vat_amount": float(self.vat_amount),
            "balance_carried_forward": float(self.balance_carried_forward),
            "total_amount_due": float(self.total_amount_due),
            "grand_total": float(self.grand_total),
            "bill_period_start": self.bill_period_start.isoformat(),
            "bill_period_end": self.bill_period_end.isoformat(),
            "due_date": self.due_date.isoformat(),
            "payment_status": str(self.payment_status),
            "tier_breakdown": [
                {
                    "start": float(line.start),
                    "end": None if line.end is None else float(line.end),
                    "usage": float(line.usage),
                    "rate": float(line.rate),
                    "charge": float(line.charge),
                }
                for line in self.tier_breakdown
            ],
        }


@dataclass(slots=True)
class BillDiagnostics:
    year: int
    tariff_found: bool = False
    meter_rent_prices: dict[str, Decimal] = field(default_factory=dict)
    matched_key: str | None = None
    matched_value: Decimal | None = None
    issues: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "tariff_found": self.tariff_found,
            "meter_rent_prices": {k: float(v) for k, v in self.meter_rent_prices.items()},
            "matched_key": self.matched_key,
            "matched_value": None if self.matched_value is None else float(self.matched_value),
            "issues": list(self.issues),
        }


@dataclass(frozen=True, slots=True)
class BillOutcome:
    bill: ComputedBill
    diagnostics: BillDiagnostics
