import unittest
from decimal import Decimal

from waterbill.application.services.billing_service import calculate_bill
from waterbill.billing.selector import effective_year, select_tariff
from waterbill.domain.enums import CustomerType, SewerageConnection
from waterbill.domain.errors import TariffConfigurationError, ValidationError
from waterbill.domain.models.bill import BillComputationInput, BillingMonth, ComputedBill
from waterbill.domain.models.tariff import TariffRow


class StubTariffStore:
    def __init__(self, *rows: TariffRow) -> None:
        self.rows = {(r.customer_type, r.year): r for r in rows}
        self.calls: list[tuple[str, int]] = []

    def fetch_tariff(self, customer_type: str, year: int) -> TariffRow | None:
        self.calls.append((customer_type, year))
        return self.rows.get((customer_type, year))


DOMESTIC_2024 = TariffRow(
    customer_type="Domestic",
    year=2024,
    tiers='[{"limit": 7, "rate": 10}, {"limit": "Infinity", "rate": 15}]',
    meter_rent_prices='{"1/2": 50, "3/4": 75}',
    sewerage_rate=0.5,
)


def _input(month: str = "2024-05", meter_size: str = "0.5", usage: str = "15") -> BillComputationInput:
    return BillComputationInput(
        usage_m3=Decimal(usage),
        customer_type=CustomerType.DOMESTIC,
        sewerage_connection=SewerageConnection.NO,
        meter_size=Decimal(meter_size),
        billing_month=BillingMonth.parse(month),
    )


class TariffSelectorTests(unittest.TestCase):
    def test_effective_year_from_month(self) -> None:
        self.assertEqual(effective_year("2024-11"), 2024)
        self.assertEqual(effective_year(BillingMonth(2031, 1)), 2031)
        with self.assertRaises(ValidationError):
            effective_year("24-11")
        with self.assertRaises(ValidationError):
            effective_year("2024-13")

    def test_selects_by_type_and_year(self) -> None:
        store = StubTariffStore(DOMESTIC_2024)
        row = select_tariff(store, CustomerType.DOMESTIC, "2024-03")
        self.assertIs(row, DOMESTIC_2024)
        self.assertEqual(store.calls, [("Domestic", 2024)])

    def test_no_fallback_to_previous_year(self) -> None:
        store = StubTariffStore(DOMESTIC_2024)
        self.assertIsNone(select_tariff(store, CustomerType.DOMESTIC, "2025-01"))
        self.assertEqual(store.calls, [("Domestic", 2025)])


class CalculateBillTests(unittest.TestCase):
    def test_end_to_end(self) -> None:
        outcome = calculate_bill(StubTariffStore(DOMESTIC_2024), _input())
        self.assertIsNotNone(outcome.bill)
        self.assertEqual(outcome.bill.usage_charge, Decimal("190.00"))
        self.assertEqual(outcome.bill.rental_charge, Decimal("50.00"))
        self.assertEqual(outcome.bill.total_amount_due, Decimal("240.00"))
        diag = outcome.diagnostics
        self.assertTrue(diag.tariff_found)
        self.assertEqual(diag.year, 2024)
        self.assertEqual(diag.matched_key, "1/2")
        self.assertEqual(diag.matched_value, Decimal("50"))
        self.assertEqual(list(diag.meter_rent_prices), ["1/2", "3/4"])
        self.assertEqual(diag.issues, [])

    def test_missing_tariff_is_not_an_exception(self) -> None:
        outcome = calculate_bill(StubTariffStore(), _input(), prior_balance=Decimal("5"))
        self.assertFalse(outcome.diagnostics.tariff_found)
        self.assertIsInstance(outcome.bill, ComputedBill)
        self.assertEqual(outcome.bill.total_amount_due, Decimal("0"))
        self.assertEqual(outcome.bill.grand_total, Decimal("5.00"))
        self.assertIn("no tariff for Domestic/2024", outcome.diagnostics.issues)

    def test_unresolved_meter_size_is_reported(self) -> None:
        outcome = calculate_bill(StubTariffStore(DOMESTIC_2024), _input(meter_size="0.9"))
        self.assertEqual(outcome.bill.rental_charge, Decimal("0"))
        self.assertIsNone(outcome.diagnostics.matched_key)
        self.assertTrue(any("meter rent" in issue for issue in outcome.diagnostics.issues))

    def test_malformed_rent_prices_degrade(self) -> None:
        row = TariffRow(
            customer_type="Domestic",
            year=2024,
            tiers=DOMESTIC_2024.tiers,
            meter_rent_prices="{not json",
        )
        outcome = calculate_bill(StubTariffStore(row), _input())
        self.assertEqual(outcome.bill.usage_charge, Decimal("190.00"))
        self.assertEqual(outcome.bill.rental_charge, Decimal("0"))
        self.assertEqual(outcome.diagnostics.meter_rent_prices, {})
        self.assertIn("meter_rent_prices: invalid JSON", outcome.diagnostics.issues)

    def test_corrupt_tiers_are_fatal(self) -> None:
        row = TariffRow(
            customer_type="Domestic",
            year=2024,
            tiers=[{"limit": 10, "rate": 1}, {"limit": 3, "rate": 2}, {"limit": "Infinity", "rate": 3}],
        )
        with self.assertRaises(TariffConfigurationError):
            calculate_bill(StubTariffStore(row), _input())

    def test_due_days_is_configurable(self) -> None:
        outcome = calculate_bill(StubTariffStore(DOMESTIC_2024), _input(month="2024-04"), due_days=10)
        self.assertEqual(outcome.bill.due_date.isoformat(), "2024-05-10")


if __name__ == "__main__":
    unittest.main()
