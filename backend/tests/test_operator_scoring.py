"""Unit tests for operator quality scoring."""

import unittest

from cardops.models.operator import Operator
from cardops.services.operators import apply_batch_outcome, compute_score


class ComputeScoreTests(unittest.TestCase):
    def test_two_errors_against_eight_processed(self) -> None:
        self.assertEqual(compute_score(2, 8), 75)

    def test_no_errors_is_perfect(self) -> None:
        self.assertEqual(compute_score(0, 40), 100)

    def test_empty_denominator_counts_as_zero_error_rate(self) -> None:
        self.assertEqual(compute_score(0, 0), 100)
        self.assertEqual(compute_score(3, 0), 100)

    def test_rounds_half_up(self) -> None:
        self.assertEqual(compute_score(1, 8), 88)
        self.assertEqual(compute_score(1, 3), 67)

    def test_score_is_clamped_to_zero(self) -> None:
        self.assertEqual(compute_score(5, 1), 0)

    def test_negative_counts_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            compute_score(-1, 4)


class ApplyBatchOutcomeTests(unittest.TestCase):
    def test_counters_accumulate_and_score_reflects_latest_batch(self) -> None:
        operator = Operator(name="Ana", records_processed=10, records_with_error=5, score=50)

        score = apply_batch_outcome(operator, succeeded=8, failed=2, scored_against=8)

        self.assertEqual(score, 75)
        self.assertEqual(operator.score, 75)
        self.assertEqual(operator.records_processed, 18)
        self.assertEqual(operator.records_with_error, 7)

        apply_batch_outcome(operator, succeeded=4, failed=0, scored_against=4)
        self.assertEqual(operator.score, 100)
        self.assertEqual(operator.records_processed, 22)


if __name__ == "__main__":
    unittest.main()
