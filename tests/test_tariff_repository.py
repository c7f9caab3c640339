import tempfile
import unittest
from pathlib import Path

from waterbill.domain.models.tariff import TariffRow
from waterbill.infrastructure.persistence.sqla import SqlTariffRepository, get_engine
from waterbill.infrastructure.persistence.sqla.engine import dispose_engine


class SqlTariffRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "tariffs.sqlite3"
        self.repo = SqlTariffRepository(get_engine(self.db_path))

    def tearDown(self) -> None:
        dispose_engine(self.db_path)
        self._tmp.cleanup()

    def test_upsert_then_fetch(self) -> None:
        self.repo.upsert_tariff(
            TariffRow(
                customer_type="Domestic",
                year=2024,
                tiers=[{"limit": 7, "rate": 10}, {"limit": "Infinity", "rate": 15}],
                meter_rent_prices={"1/2": 50},
                sewerage_rate=0.5,
            )
        )
        row = self.repo.fetch_tariff("Domestic", 2024)
        self.assertIsNotNone(row)
        self.assertEqual(row.year, 2024)
        self.assertEqual(row.sewerage_rate, 0.5)
        self.assertIsInstance(row.tiers, str)
        self.assertIn('"Infinity"', row.tiers)

    def test_missing_row_is_none(self) -> None:
        self.assertIsNone(self.repo.fetch_tariff("Domestic", 1999))

    def test_upsert_replaces_same_type_and_year(self) -> None:
        base = {"customer_type": "Non-domestic", "year": 2025, "tiers": [{"limit": "Infinity", "rate": 5}]}
        self.repo.upsert_tariff(TariffRow(**base, vat_rate=0.1))
        self.repo.upsert_tariff(TariffRow(**base, vat_rate=0.15))
        rows = self.repo.list_tariffs()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].vat_rate, 0.15)

    def test_malformed_json_text_is_kept_verbatim(self) -> None:
        self.repo.upsert_tariff(
            TariffRow(
                customer_type="rental domestic",
                year=2024,
                tiers='[{"limit": "Infinity", "rate": 9}]',
                meter_rent_prices="{not json",
            )
        )
        row = self.repo.fetch_tariff("rental domestic", 2024)
        self.assertEqual(row.meter_rent_prices, "{not json")

    def test_list_orders_newest_year_first(self) -> None:
        for year in (2023, 2025, 2024):
            self.repo.upsert_tariff(
                TariffRow(customer_type="Domestic", year=year, tiers=[{"limit": "Infinity", "rate": 1}])
            )
        self.assertEqual([r.year for r in self.repo.list_tariffs()], [2025, 2024, 2023])


if __name__ == "__main__":
    unittest.main()
