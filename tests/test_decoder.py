import unittest
from decimal import Decimal

from waterbill.billing.decoder import (
    decode_field,
    decode_rental_table,
    decode_tariff,
    decode_tier_table,
)
from waterbill.domain.errors import TariffConfigurationError
from waterbill.domain.models.tariff import TariffRow


class DecodeFieldTests(unittest.TestCase):
    def test_total_for_messy_inputs(self) -> None:
        native = {"1/2": 50}
        for raw in (None, "{not json", "{}", native, 42, "[1, 2]", ["a"]):
            with self.subTest(raw=raw):
                decoded = decode_field(raw, "meter_rent_prices", "object")
                self.assertIsInstance(decoded, dict)

    def test_native_structure_is_returned_unchanged(self) -> None:
        native = {"1/2": 50, "3/4": 75}
        self.assertIs(decode_field(native, "meter_rent_prices", "object"), native)
        tiers = [{"limit": 7, "rate": 10}]
        self.assertIs(decode_field(tiers, "tiers", "array"), tiers)

    def test_json_text_is_parsed(self) -> None:
        self.assertEqual(decode_field('{"1": 20}', "meter_rent_prices", "object"), {"1": 20})
        self.assertEqual(decode_field("[1, 2]", "tiers", "array"), [1, 2])

    def test_wrong_shape_falls_back_to_empty(self) -> None:
        self.assertEqual(decode_field({"a": 1}, "tiers", "array"), [])
        self.assertEqual(decode_field("[1]", "meter_rent_prices", "object"), {})

    def test_issues_are_recorded(self) -> None:
        issues: list[str] = []
        decode_field("{not json", "meter_rent_prices", "object", issues=issues)
        decode_field(None, "meter_rent_prices", "object", issues=issues)
        self.assertEqual(issues, ["meter_rent_prices: invalid JSON", "meter_rent_prices: missing"])


class DecodeTierTableTests(unittest.TestCase):
    def test_decodes_infinity_limit(self) -> None:
        table = decode_tier_table('[{"limit": 7, "rate": 10}, {"limit": "Infinity", "rate": 15}]')
        self.assertEqual(len(table), 2)
        self.assertEqual(table.tiers[0].limit, Decimal("7"))
        self.assertIsNone(table.tiers[1].limit)
        self.assertEqual(table.tiers[1].rate, Decimal("15"))

    def test_accepts_up_to_key(self) -> None:
        table = decode_tier_table([{"upTo": 5, "rate": 1}, {"upTo": None, "rate": 2}])
        self.assertEqual(table.tiers[0].limit, Decimal("5"))
        self.assertTrue(table.tiers[1].unbounded)

    def test_non_increasing_limits_are_fatal(self) -> None:
        with self.assertRaises(TariffConfigurationError):
            decode_tier_table([{"limit": 10, "rate": 1}, {"limit": 5, "rate": 2}, {"limit": "Infinity", "rate": 3}])
        with self.assertRaises(TariffConfigurationError):
            decode_tier_table([{"limit": 5, "rate": 1}, {"limit": 5, "rate": 2}, {"limit": "Infinity", "rate": 3}])

    def test_last_tier_must_be_unbounded(self) -> None:
        with self.assertRaises(TariffConfigurationError):
            decode_tier_table([{"limit": 5, "rate": 1}, {"limit": 10, "rate": 2}])

    def test_empty_or_malformed_tiers_are_fatal(self) -> None:
        for raw in (None, "{not json", "[]"):
            with self.subTest(raw=raw):
                with self.assertRaises(TariffConfigurationError):
                    decode_tier_table(raw)

    def test_non_numeric_rate_is_fatal(self) -> None:
        with self.assertRaises(TariffConfigurationError):
            decode_tier_table([{"limit": "Infinity", "rate": "cheap"}])


class DecodeRentalTableTests(unittest.TestCase):
    def test_keeps_order_and_drops_unusable_prices(self) -> None:
        issues: list[str] = []
        table = decode_rental_table('{"3/4": "75", "1/2": 50, "1": "n/a", "2": -4}', issues=issues)
        self.assertEqual(list(table), ["3/4", "1/2"])
        self.assertEqual(table.get("3/4"), Decimal("75"))
        self.assertEqual(len(issues), 2)

    def test_malformed_json_means_no_rental_prices(self) -> None:
        self.assertEqual(len(decode_rental_table("{not json")), 0)


class DecodeTariffTests(unittest.TestCase):
    def test_defaults_for_missing_rates(self) -> None:
        tariff = decode_tariff(
            TariffRow(
                customer_type="Domestic",
                year=2024,
                tiers=[{"limit": "Infinity", "rate": 10}],
            )
        )
        self.assertEqual(tariff.sewerage_rate, Decimal("0"))
        self.assertEqual(tariff.vat_rate, Decimal("0"))
        self.assertEqual(tariff.domestic_vat_threshold_m3, Decimal("15"))
        self.assertEqual(len(tariff.meter_rent_prices), 0)

    def test_float_rates_keep_their_decimal_text(self) -> None:
        tariff = decode_tariff(
            TariffRow(
                customer_type="Domestic",
                year=2024,
                tiers=[{"limit": "Infinity", "rate": 10}],
                sewerage_rate=0.1,
                vat_rate="0.15",
            )
        )
        self.assertEqual(tariff.sewerage_rate, Decimal("0.1"))
        self.assertEqual(tariff.vat_rate, Decimal("0.15"))


if __name__ == "__main__":
    unittest.main()
