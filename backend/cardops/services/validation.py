"""Standalone validation of a spreadsheet against stored proposals."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from time import perf_counter
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cardops.errors import NotFoundError, TransactionError
from cardops.models.proposal import Proposal
from cardops.reconciliation.identity import derive_unique_id, is_sentinel
from cardops.reconciliation.normalization import extract_row
from cardops.reconciliation.types import (
    DigitizationStatus,
    HistoryAction,
    IssueType,
    RawRow,
    ValidationOutcome,
)
from cardops.schemas.batch import ValidationBatchResult, ValidationStats
from cardops.services.history import record_history
from cardops.services.issues import list_open_issues_for, record_issue
from cardops.services.operators import apply_batch_outcome, get_operator
from cardops.services.reconciliation import STORE_FAILURES

logger = logging.getLogger(__name__)

STATUS_COLUMN = "VALIDATION_STATUS"
MESSAGE_COLUMN = "VALIDATION_MESSAGE"
PROBLEMS_COLUMN = "PROBLEMAS"
# annotation column -> proposal attribute copied from the stored record
RECORD_COLUMNS: dict[str, str] = {
    "PROPOSTA30": "reference_value",
    "DIGITADO": "digitization_status",
    "SITUACAO": "situation",
    "EXTRATOR": "extractor",
    "UTILIZACAO": "utilization",
}


def validate_batch(db: Session, rows: Sequence[RawRow], operator_id: int) -> ValidationBatchResult:
    """Annotate each row with its validation outcome without touching proposals.

    NOT_FOUND rows still record a validation issue. The operator's counters and
    score are updated in the same transaction.
    """

    stats = ValidationStats(total=len(rows))
    validated_rows: list[dict[str, Any]] = []
    seen: set[str] = set()
    total_started = perf_counter()
    try:
        operator = get_operator(db, operator_id, for_update=True)
        for row_number, row in enumerate(rows, start=1):
            annotated = dict(row)
            try:
                outcome = _validate_row(db, annotated, seen, stats)
            except STORE_FAILURES:
                raise
            except Exception as exc:
                logger.warning("validation.row_failed row=%d error=%s", row_number, exc)
                outcome = ValidationOutcome.ERROR
                _annotate(annotated, outcome, f"Error: {exc}", status=DigitizationStatus.ERROR)
            _count(stats, outcome)
            validated_rows.append(annotated)

        score = apply_batch_outcome(
            operator,
            succeeded=stats.validated,
            failed=stats.not_found + stats.errors,
            scored_against=stats.validated + stats.not_found,
        )
        record_history(
            db,
            operator.id,
            HistoryAction.VALIDATION,
            (
                f"Validated spreadsheet with {stats.total} rows. Found: {stats.validated}, "
                f"Not found: {stats.not_found}, Duplicates: {stats.duplicates}, Errors: {stats.errors}"
            ),
        )
        db.commit()
    except NotFoundError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("validation.batch_failed operator_id=%s", operator_id)
        raise TransactionError(f"Validation rolled back: {exc}") from exc
    except Exception:
        db.rollback()
        logger.exception("validation.batch_failed operator_id=%s", operator_id)
        raise

    logger.info(
        (
            "validation.batch_completed operator_id=%d rows=%d validated=%d not_found=%d "
            "duplicates=%d errors=%d total_ms=%.2f"
        ),
        operator_id,
        stats.total,
        stats.validated,
        stats.not_found,
        stats.duplicates,
        stats.errors,
        (perf_counter() - total_started) * 1000.0,
    )
    return ValidationBatchResult(
        operator_id=operator_id,
        validated_rows=validated_rows,
        stats=stats,
        operator_score=score,
    )


def _validate_row(
    db: Session,
    annotated: dict[str, Any],
    seen: set[str],
    stats: ValidationStats,
) -> ValidationOutcome:
    extracted = extract_row(annotated)
    unique_id = derive_unique_id(extracted.cpf, extracted.registration_number)
    if not extracted.has_identity or is_sentinel(unique_id):
        _annotate(
            annotated,
            ValidationOutcome.ERROR,
            "CPF or registration number is missing",
            status=DigitizationStatus.ERROR,
        )
        return ValidationOutcome.ERROR

    if unique_id in seen:
        _annotate(
            annotated,
            ValidationOutcome.DUPLICATE,
            "Duplicate within this file",
            status=DigitizationStatus.DUPLICATE,
            reference=extracted.reference_value,
        )
        _annotate_problems(db, annotated, unique_id)
        return ValidationOutcome.DUPLICATE
    seen.add(unique_id)

    proposal = db.scalar(select(Proposal).where(Proposal.unique_id == unique_id))
    if proposal is None:
        record_issue(db, unique_id, IssueType.NOT_FOUND, "Record not found in database")
        stats.validation_issues_created += 1
        _annotate(
            annotated,
            ValidationOutcome.NOT_FOUND,
            "Not found in database",
            status=DigitizationStatus.NOT_DIGITIZED,
        )
        _annotate_problems(db, annotated, unique_id)
        return ValidationOutcome.NOT_FOUND

    annotated[STATUS_COLUMN] = ValidationOutcome.VALIDATED.value
    annotated[MESSAGE_COLUMN] = "Validated"
    for column, attribute in RECORD_COLUMNS.items():
        annotated[column] = getattr(proposal, attribute)
    _annotate_problems(db, annotated, unique_id)
    return ValidationOutcome.VALIDATED


def _annotate(
    annotated: dict[str, Any],
    outcome: ValidationOutcome,
    message: str,
    *,
    status: DigitizationStatus,
    reference: Any = "-",
) -> None:
    annotated[STATUS_COLUMN] = outcome.value
    annotated[MESSAGE_COLUMN] = message
    for column in RECORD_COLUMNS:
        annotated[column] = "-"
    annotated["PROPOSTA30"] = reference
    annotated["DIGITADO"] = status.value
    annotated[PROBLEMS_COLUMN] = "-"


def _annotate_problems(db: Session, annotated: dict[str, Any], unique_id: str) -> None:
    issues = list_open_issues_for(db, unique_id)
    annotated[PROBLEMS_COLUMN] = (
        "; ".join(f"{issue.issue_type}: {issue.description}" for issue in issues) if issues else "-"
    )


def _count(stats: ValidationStats, outcome: ValidationOutcome) -> None:
    if outcome is ValidationOutcome.VALIDATED:
        stats.validated += 1
    elif outcome is ValidationOutcome.NOT_FOUND:
        stats.not_found += 1
    elif outcome is ValidationOutcome.DUPLICATE:
        stats.duplicates += 1
    else:
        stats.errors += 1
