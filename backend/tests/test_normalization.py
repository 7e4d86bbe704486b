"""Unit tests for spreadsheet field normalization."""

from datetime import date
import unittest

from cardops.reconciliation.normalization import (
    FIELD_ALIASES,
    SENTINEL_DATE,
    extract_row,
    lookup_field,
    normalize,
)


class NormalizeTests(unittest.TestCase):
    def test_missing_values_get_kind_defaults(self) -> None:
        for missing in (None, "", "   ", float("nan")):
            self.assertEqual(normalize(missing, "number"), 0)
            self.assertEqual(normalize(missing, "text"), "-")
            self.assertEqual(normalize(missing, "date"), SENTINEL_DATE)
        self.assertEqual(SENTINEL_DATE, date(1900, 1, 1))

    def test_present_values_pass_through(self) -> None:
        self.assertEqual(normalize("1500,00", "number"), "1500,00")
        self.assertEqual(normalize(0, "number"), 0)
        self.assertEqual(normalize(date(2024, 5, 1), "date"), date(2024, 5, 1))
        self.assertEqual(normalize(12345, "text"), 12345)
        self.assertEqual(normalize(" GOV GOIAS SEG ", "text"), "GOV GOIAS SEG")

    def test_unknown_kind_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            normalize("x", "boolean")


class ExtractRowTests(unittest.TestCase):
    def test_every_alias_has_upper_and_lower_case_header(self) -> None:
        for field_name, (headers, _kind) in FIELD_ALIASES.items():
            self.assertIn(headers[0].lower(), headers, field_name)
            self.assertIn(headers[0].upper(), headers, field_name)

    def test_upper_and_lower_case_headers_are_equivalent(self) -> None:
        upper = extract_row({"CPF": "111", "MATRICULA": "222", "NOME": "Ana", "PRAZO": "24"})
        lower = extract_row({"cpf": "111", "matricula": "222", "nome": "Ana", "prazo": "24"})
        self.assertEqual(upper, lower)

    def test_falls_back_to_lower_case_when_upper_is_blank(self) -> None:
        self.assertEqual(lookup_field({"CPF": "", "cpf": "333"}, "cpf"), "333")

    def test_missing_fields_are_normalized(self) -> None:
        extracted = extract_row({"CPF": "111", "MATRICULA": "222"})
        self.assertEqual(extracted.name, "-")
        self.assertEqual(extracted.employer, "-")
        self.assertEqual(extracted.reference_value, "-")
        self.assertEqual(extracted.contract_value, 0)
        self.assertEqual(extracted.term_months, 0)
        self.assertTrue(extracted.has_identity)
        self.assertFalse(extracted.has_reference)

    def test_missing_cpf_means_no_identity(self) -> None:
        extracted = extract_row({"CPF": "", "MATRICULA": "123"})
        self.assertFalse(extracted.has_identity)


if __name__ == "__main__":
    unittest.main()
