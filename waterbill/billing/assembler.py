from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from waterbill.domain.enums import PaymentStatus
from waterbill.domain.models.bill import (
    BillComputationInput,
    BillingMonth,
    ComputedBill,
    RentalMatch,
)
from waterbill.domain.models.tariff import Tariff

from .money import ZERO, quantize_money
from .rental import resolve_rental_price
from .tiers import charge_above, usage_tier_breakdown

DEFAULT_DUE_DAYS = 15


def due_date_for(billing_month: BillingMonth, due_days: int = DEFAULT_DUE_DAYS) -> date:
    return billing_month.last_day + timedelta(days=due_days)


def _vat_amount(bill_input: BillComputationInput, tariff: Tariff, usage_charge: Decimal) -> Decimal:
    # Domestic classes are taxed only on the volume past the threshold.
    if bill_input.customer_type.is_domestic:
        threshold = tariff.domestic_vat_threshold_m3
        if bill_input.usage_m3 > threshold:
            return charge_above(bill_input.usage_m3, tariff.tiers, threshold) * tariff.vat_rate
        return ZERO
    return usage_charge * tariff.vat_rate


def assemble_bill(
    bill_input: BillComputationInput,
    tariff: Tariff | None,
    prior_balance: Decimal = ZERO,
    *,
    rental_match: RentalMatch | None = None,
    due_days: int = DEFAULT_DUE_DAYS,
) -> ComputedBill:
    """
    Combine the charge components into a bill.

    Without a tariff every charge is zero and only the carried balance remains;
    callers that must not bill without a tariff check for that before calling.
    The prior balance is added to the grand total and never offsets new charges.
    """
    usage_charge = ZERO
    rental_charge = ZERO
    sewerage_charge = ZERO
    maintenance_fee = ZERO
    sanitation_fee = ZERO
    vat_amount = ZERO
    breakdown = ()

    if tariff is not None:
        lines = usage_tier_breakdown(bill_input.usage_m3, tariff.tiers)
        breakdown = tuple(lines)
        usage_charge = sum((line.charge for line in lines), ZERO)

        if rental_match is None:
            rental_match = resolve_rental_price(tariff.meter_rent_prices, bill_input.meter_size)
        if rental_match.price is not None:
            rental_charge = rental_match.price

        if bill_input.sewerage_connection.is_connected:
            sewerage_charge = usage_charge * tariff.sewerage_rate
        maintenance_fee = usage_charge * tariff.maintenance_percentage
        sanitation_fee = usage_charge * tariff.sanitation_percentage
        vat_amount = _vat_amount(bill_input, tariff, usage_charge)

    total = usage_charge + rental_charge + sewerage_charge + maintenance_fee + sanitation_fee + vat_amount
    month = bill_input.billing_month
    return ComputedBill(
        month_year=str(month),
        usage_m3=bill_input.usage_m3,
        usage_charge=quantize_money(usage_charge),
        rental_charge=quantize_money(rental_charge),
        sewerage_charge=quantize_money(sewerage_charge),
        maintenance_fee=quantize_money(maintenance_fee),
        sanitation_fee=quantize_money(sanitation_fee),
        vat_amount=quantize_money(vat_amount),
        balance_carried_forward=quantize_money(prior_balance),
        total_amount_due=quantize_money(total),
        grand_total=quantize_money(total + prior_balance),
        bill_period_start=month.first_day,
        bill_period_end=month.last_day,
        due_date=due_date_for(month, due_days),
        payment_status=PaymentStatus.UNPAID,
        tier_breakdown=breakdown,
    )
