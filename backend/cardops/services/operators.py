"""Operator account services and quality scoring."""

from __future__ import annotations

from fractions import Fraction
import math

from sqlalchemy import select
from sqlalchemy.orm import Session

from cardops.errors import NotFoundError
from cardops.models.operator import Operator

MAX_SCORE = 100


def create_operator(db: Session, name: str) -> Operator:
    """Create an operator account with a clean score."""

    operator = Operator(
        name=name.strip(),
        records_processed=0,
        records_with_error=0,
        score=MAX_SCORE,
    )
    db.add(operator)
    db.commit()
    db.refresh(operator)
    return operator


def get_operator(db: Session, operator_id: int, *, for_update: bool = False) -> Operator:
    """Load an operator or raise NotFoundError."""

    stmt = select(Operator).where(Operator.id == operator_id)
    if for_update:
        stmt = stmt.with_for_update()
    operator = db.scalar(stmt)
    if operator is None:
        raise NotFoundError(f"Operator {operator_id} not found")
    return operator


def compute_score(errors: int, processed: int) -> int:
    """Return ``round(100 * (1 - errors / processed))`` rounded half-up and clamped to [0, 100].

    An empty denominator means an error rate of zero.
    """

    if errors < 0 or processed < 0:
        raise ValueError("errors and processed must be non-negative")
    error_rate = Fraction(errors, processed) if processed else Fraction(0)
    raw = MAX_SCORE * (1 - error_rate)
    score = math.floor(raw + Fraction(1, 2))
    return max(0, min(MAX_SCORE, score))


def apply_batch_outcome(
    operator: Operator,
    *,
    succeeded: int,
    failed: int,
    scored_against: int,
) -> int:
    """Fold one batch into the operator's cumulative counters and reset its score.

    The score reflects only this batch. Nothing is committed here; callers apply it
    inside the batch transaction.
    """

    operator.records_processed = (operator.records_processed or 0) + succeeded
    operator.records_with_error = (operator.records_with_error or 0) + failed
    operator.score = compute_score(failed, scored_against)
    return operator.score
