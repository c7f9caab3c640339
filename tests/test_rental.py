import unittest
from decimal import Decimal

from waterbill.billing.decoder import decode_rental_table
from waterbill.billing.rental import normalize_size_key, resolve_rental_price, size_label


class RentalPriceResolverTests(unittest.TestCase):
    def test_exact_match_beats_fuzzy_equivalent(self) -> None:
        table = decode_rental_table({"1/2": 50, "0.5": 40})
        match = resolve_rental_price(table, Decimal("0.5"))
        self.assertEqual(match.key, "0.5")
        self.assertEqual(match.price, Decimal("40"))

    def test_fraction_key_resolves(self) -> None:
        table = decode_rental_table({"1/2": 50, "3/4": 75})
        match = resolve_rental_price(table, Decimal("0.5"))
        self.assertEqual(match.key, "1/2")
        self.assertEqual(match.price, Decimal("50"))
        self.assertEqual(resolve_rental_price(table, Decimal("0.75")).price, Decimal("75"))

    def test_unknown_size_is_unresolved(self) -> None:
        table = decode_rental_table({"1/2": 50, "3/4": 75})
        match = resolve_rental_price(table, Decimal("0.9"))
        self.assertIsNone(match.key)
        self.assertIsNone(match.price)
        self.assertFalse(match.resolved)

    def test_tolerance_window(self) -> None:
        table = decode_rental_table({"1/2": 50})
        for size in ("0.499999", "0.5000005", "0.500001"):
            with self.subTest(size=size):
                self.assertEqual(resolve_rental_price(table, Decimal(size)).key, "1/2")
        self.assertIsNone(resolve_rental_price(table, Decimal("0.5001")).key)
        self.assertIsNone(resolve_rental_price(table, Decimal("0.4998")).key)

    def test_first_match_in_table_order_wins(self) -> None:
        table = decode_rental_table({"1/2 inch": 55, "0.50": 60})
        match = resolve_rental_price(table, Decimal("0.5"))
        self.assertEqual(match.key, "1/2 inch")
        self.assertEqual(match.price, Decimal("55"))

    def test_integral_size_matches_plain_label(self) -> None:
        table = decode_rental_table({"1": 20, '3/4"': 15})
        self.assertEqual(resolve_rental_price(table, Decimal("1.0")).key, "1")
        self.assertEqual(resolve_rental_price(table, Decimal("0.75")).key, '3/4"')

    def test_empty_table(self) -> None:
        self.assertFalse(resolve_rental_price(decode_rental_table(None), Decimal("1")).resolved)


class SizeKeyTests(unittest.TestCase):
    def test_normalize_size_key(self) -> None:
        self.assertEqual(normalize_size_key("3/4"), Decimal("0.75"))
        self.assertEqual(normalize_size_key('1/2"'), Decimal("0.5"))
        self.assertEqual(normalize_size_key("2 inch"), Decimal("2"))
        self.assertEqual(normalize_size_key("1.5"), Decimal("1.5"))
        self.assertIsNone(normalize_size_key("1/0"))
        self.assertIsNone(normalize_size_key("large"))
        self.assertIsNone(normalize_size_key("-"))

    def test_size_label(self) -> None:
        self.assertEqual(size_label(Decimal("0.50")), "0.5")
        self.assertEqual(size_label(Decimal("2.000")), "2")
        self.assertEqual(size_label(Decimal("1.25")), "1.25")
        self.assertEqual(size_label(Decimal("100")), "100")
        self.assertEqual(size_label(Decimal("0")), "0")

    def test_huge_size_is_unresolved_not_an_error(self) -> None:
        table = decode_rental_table({"1/2": 50})
        huge = Decimal("1E+5000")
        self.assertEqual(len(size_label(huge)), 5001)
        self.assertFalse(resolve_rental_price(table, huge).resolved)


if __name__ == "__main__":
    unittest.main()
