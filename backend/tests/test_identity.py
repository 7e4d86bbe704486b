"""Unit tests for proposal identity derivation."""

import unittest

from cardops.reconciliation.identity import SENTINEL_UNIQUE_ID, derive_unique_id, is_sentinel


class DeriveUniqueIdTests(unittest.TestCase):
    def test_joins_trimmed_cpf_and_registration(self) -> None:
        self.assertEqual(derive_unique_id(" 12345678901 ", "998877 "), "12345678901_998877")

    def test_is_deterministic(self) -> None:
        first = derive_unique_id("01234567890", "55")
        second = derive_unique_id("01234567890", "55")
        self.assertEqual(first, second)

    def test_distinct_pairs_give_distinct_keys(self) -> None:
        pairs = [
            ("1", "23"),
            ("12", "3"),
            ("1_2", "3"),
            ("1", "2_3"),
            ("1\\", "_3"),
            ("1", "\\_3"),
            ("123", "-"),
            ("-", "123"),
        ]
        keys = {derive_unique_id(cpf, registration) for cpf, registration in pairs}
        self.assertEqual(len(keys), len(pairs))

    def test_numeric_cells_are_read_as_text(self) -> None:
        self.assertEqual(derive_unique_id(123, 456), derive_unique_id("123", "456"))

    def test_missing_parts_use_dash_placeholder(self) -> None:
        self.assertEqual(derive_unique_id(None, "77"), "-_77")
        self.assertEqual(derive_unique_id("88", "   "), "88_-")

    def test_both_missing_yield_sentinel(self) -> None:
        unique_id = derive_unique_id("", None)
        self.assertEqual(unique_id, "-_-")
        self.assertEqual(unique_id, SENTINEL_UNIQUE_ID)
        self.assertTrue(is_sentinel(unique_id))
        self.assertFalse(is_sentinel(derive_unique_id("1", "2")))


if __name__ == "__main__":
    unittest.main()
