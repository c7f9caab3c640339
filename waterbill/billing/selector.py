from __future__ import annotations

from waterbill.domain.enums import CustomerType
from waterbill.domain.models.bill import BillingMonth
from waterbill.domain.models.tariff import TariffRow
from waterbill.domain.ports.tariff_repository import TariffRepositoryPort
from waterbill.logger import get_logger


def effective_year(billing_month: BillingMonth | str) -> int:
    if isinstance(billing_month, str):
        billing_month = BillingMonth.parse(billing_month)
    return billing_month.year


def select_tariff(
    store: TariffRepositoryPort,
    customer_type: CustomerType,
    billing_month: BillingMonth | str,
) -> TariffRow | None:
    """
    Fetch the tariff row in force for ``customer_type`` in the month's year.

    There is no fallback to earlier years; a missing row is reported and ``None``
    is returned so the caller decides what to do.
    """
    year = effective_year(billing_month)
    row = store.fetch_tariff(str(customer_type), year)
    if row is None:
        get_logger().bind(customer_type=str(customer_type), year=str(year)).warning(
            "no tariff row configured for this customer type and year"
        )
    return row
