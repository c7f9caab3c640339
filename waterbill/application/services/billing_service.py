from __future__ import annotations

from decimal import Decimal

from waterbill.billing import (
    assemble_bill,
    decode_tariff,
    resolve_rental_price,
    select_tariff,
)
from waterbill.billing.assembler import DEFAULT_DUE_DAYS
from waterbill.billing.money import ZERO
from waterbill.domain.models.bill import BillComputationInput, BillDiagnostics, BillOutcome
from waterbill.domain.ports.tariff_repository import TariffRepositoryPort
from waterbill.logger import get_logger


def calculate_bill(
    store: TariffRepositoryPort,
    bill_input: BillComputationInput,
    *,
    prior_balance: Decimal = ZERO,
    due_days: int = DEFAULT_DUE_DAYS,
) -> BillOutcome:
    """
    Select, decode and price one bill.

    A missing tariff is not an exception: the outcome carries a zero-charge bill
    and ``diagnostics.tariff_found`` is False. A structurally broken tier table
    raises ``TariffConfigurationError``.
    """
    year = bill_input.billing_month.year
    logger = get_logger().bind(customer_type=str(bill_input.customer_type), year=str(year))
    diagnostics = BillDiagnostics(year=year)

    row = select_tariff(store, bill_input.customer_type, bill_input.billing_month)
    if row is None:
        diagnostics.issues.append(f"no tariff for {bill_input.customer_type}/{year}")
        bill = assemble_bill(bill_input, None, prior_balance, due_days=due_days)
        return BillOutcome(bill=bill, diagnostics=diagnostics)

    diagnostics.tariff_found = True
    tariff = decode_tariff(row, issues=diagnostics.issues)
    diagnostics.meter_rent_prices = dict(tariff.meter_rent_prices.prices)

    match = resolve_rental_price(tariff.meter_rent_prices, bill_input.meter_size)
    diagnostics.matched_key = match.key
    diagnostics.matched_value = match.price
    if not match.resolved:
        diagnostics.issues.append(f"no meter rent price for size {bill_input.meter_size}")
        logger.warning(f"meter size {bill_input.meter_size} has no rent price; rental charge is 0")

    bill = assemble_bill(
        bill_input,
        tariff,
        prior_balance,
        rental_match=match,
        due_days=due_days,
    )
    logger.debug(
        f"bill computed month={bill.month_year} usage={bill.usage_m3} total={bill.total_amount_due}"
    )
    return BillOutcome(bill=bill, diagnostics=diagnostics)
