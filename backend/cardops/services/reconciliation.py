"""Spreadsheet reconciliation engine.

Each uploaded spreadsheet is reconciled in a single transaction. Rows run in
input order, each inside its own SAVEPOINT so a failing row leaves no partial
write behind while the rest of the batch carries on. Store-level failures
abort the whole batch and roll everything back.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import logging
from time import perf_counter
from typing import Any, Literal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from cardops.config import Settings, get_settings
from cardops.errors import DuplicateRecordError, NotFoundError, RowExtractionError, TransactionError
from cardops.models.operator import Operator
from cardops.models.proposal import Proposal
from cardops.reconciliation.identity import derive_unique_id, is_sentinel
from cardops.reconciliation.logo import LogoResolver, get_logo_resolver
from cardops.reconciliation.normalization import extract_row
from cardops.reconciliation.types import (
    DigitizationStatus,
    ExtractedRow,
    HistoryAction,
    IssueType,
    RawRow,
    SourceType,
)
from cardops.schemas.batch import BatchResult
from cardops.services.history import record_history
from cardops.services.issues import record_issue
from cardops.services.operators import apply_batch_outcome, get_operator

logger = logging.getLogger(__name__)

STORE_FAILURES = (OperationalError, InterfaceError)
_MAX_ROW_ATTEMPTS = 2

RowOutcome = Literal["inserted", "updated"]


@dataclass(slots=True)
class _BatchContext:
    source_type: SourceType
    operator: Operator
    logo_resolver: LogoResolver
    settings: Settings
    result: BatchResult
    flagged_duplicates: set[str] = field(default_factory=set)


def process_batch(
    db: Session,
    rows: Sequence[RawRow],
    source_type: SourceType | str,
    operator_id: int,
    *,
    logo_resolver: LogoResolver | None = None,
) -> BatchResult:
    """Reconcile one uploaded spreadsheet against the proposal store.

    Returns insert/update/duplicate/error counts. Row-level problems are counted
    and skipped; any store failure rolls back the entire batch and surfaces as
    TransactionError.
    """

    source = SourceType(source_type)
    settings = get_settings()
    result = BatchResult(source_type=source.value, operator_id=operator_id, total=len(rows))
    total_started = perf_counter()
    try:
        operator = get_operator(db, operator_id, for_update=True)
        context = _BatchContext(
            source_type=source,
            operator=operator,
            logo_resolver=logo_resolver or get_logo_resolver(),
            settings=settings,
            result=result,
        )
        for row_number, row in enumerate(rows, start=1):
            _process_row(db, context, row_number, row)

        processed = result.inserted + result.updated
        result.operator_score = apply_batch_outcome(
            operator,
            succeeded=processed,
            failed=result.errors,
            scored_against=processed,
        )
        record_history(
            db,
            operator.id,
            HistoryAction.UPLOAD,
            (
                f"Uploaded {source.value} with {result.total} rows. Inserted: {result.inserted}, "
                f"Updated: {result.updated}, Duplicates: {result.duplicates}, Errors: {result.errors}"
            ),
        )
        db.commit()
    except NotFoundError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "reconciliation.batch_failed source_type=%s operator_id=%s elapsed_ms=%.2f",
            source.value,
            operator_id,
            (perf_counter() - total_started) * 1000.0,
        )
        raise TransactionError(f"Batch rolled back: {exc}") from exc
    except Exception:
        db.rollback()
        logger.exception(
            "reconciliation.batch_failed source_type=%s operator_id=%s elapsed_ms=%.2f",
            source.value,
            operator_id,
            (perf_counter() - total_started) * 1000.0,
        )
        raise

    logger.info(
        (
            "reconciliation.batch_completed source_type=%s operator_id=%d rows=%d "
            "inserted=%d updated=%d duplicates=%d errors=%d issues=%d score=%s total_ms=%.2f"
        ),
        source.value,
        operator_id,
        result.total,
        result.inserted,
        result.updated,
        result.duplicates,
        result.errors,
        result.validation_issues_created,
        result.operator_score,
        (perf_counter() - total_started) * 1000.0,
    )
    return result


def _process_row(db: Session, context: _BatchContext, row_number: int, row: RawRow) -> None:
    result = context.result
    try:
        extracted, unique_id = _extract_identity(row)
    except (RowExtractionError, AttributeError, TypeError) as exc:
        result.errors += 1
        logger.warning("reconciliation.row_rejected row=%d reason=%s", row_number, exc)
        return

    for attempt in range(1, _MAX_ROW_ATTEMPTS + 1):
        try:
            with db.begin_nested():
                outcome = _reconcile_row(db, context, unique_id, extracted)
        except DuplicateRecordError as exc:
            result.duplicates += 1
            _flag_duplicate(db, context, unique_id, str(exc))
            return
        except IntegrityError:
            # Another batch committed the same identity after our lookup.
            if attempt < _MAX_ROW_ATTEMPTS:
                logger.info("reconciliation.row_retry row=%d unique_id=%s", row_number, unique_id)
                continue
            result.duplicates += 1
            _flag_duplicate(db, context, unique_id, f"Concurrent insert collision for {unique_id}")
            return
        except STORE_FAILURES:
            raise
        except Exception as exc:
            result.errors += 1
            logger.warning(
                "reconciliation.row_failed row=%d unique_id=%s error=%s",
                row_number,
                unique_id,
                exc,
            )
            record_issue(
                db,
                unique_id,
                IssueType.SYSTEM_ERROR,
                f"Row {row_number} from {context.source_type.value} failed: {exc}",
            )
            result.validation_issues_created += 1
            return

        if outcome == "inserted":
            result.inserted += 1
        else:
            result.updated += 1
        return


def _extract_identity(row: RawRow) -> tuple[ExtractedRow, str]:
    extracted = extract_row(row)
    if not extracted.has_identity:
        raise RowExtractionError("CPF or registration number is missing")
    unique_id = derive_unique_id(extracted.cpf, extracted.registration_number)
    if is_sentinel(unique_id):
        raise RowExtractionError("Row has no usable identity")
    return extracted, unique_id


def _find_proposal(db: Session, unique_id: str) -> Proposal | None:
    return db.scalar(select(Proposal).where(Proposal.unique_id == unique_id))


def _reconcile_row(
    db: Session,
    context: _BatchContext,
    unique_id: str,
    extracted: ExtractedRow,
) -> RowOutcome:
    existing = _find_proposal(db, unique_id)
    logo_code = context.logo_resolver.resolve(_as_text(extracted.employer))

    if existing is None:
        db.add(_build_proposal(context, unique_id, extracted, logo_code))
        db.flush()
        _log_row_history(
            db,
            context,
            HistoryAction.INSERT,
            f"Inserted new proposal {unique_id} from {context.source_type.value}",
        )
        return "inserted"

    if context.source_type is SourceType.PROD_PROM:
        # Operator-owned fields (situation, extractor, utilization) are never touched.
        if extracted.has_reference:
            existing.reference_value = _as_text(extracted.reference_value)
            existing.digitization_status = DigitizationStatus.DIGITIZED.value
        db.flush()
        _log_row_history(
            db,
            context,
            HistoryAction.UPDATE,
            f"Updated proposal {unique_id} from {context.source_type.value}",
        )
        return "updated"

    raise DuplicateRecordError(
        unique_id,
        f"Duplicate record found in {context.source_type.value} (stored from {existing.source_type})",
    )


def _build_proposal(
    context: _BatchContext,
    unique_id: str,
    extracted: ExtractedRow,
    logo_code: int,
) -> Proposal:
    status = DigitizationStatus.DIGITIZED if extracted.has_reference else DigitizationStatus.NOT_DIGITIZED
    return Proposal(
        unique_id=unique_id,
        cpf=_as_text(extracted.cpf),
        registration_number=_as_text(extracted.registration_number),
        name=_as_text(extracted.name),
        employer=_as_text(extracted.employer),
        logo_code=logo_code,
        reference_value=_as_text(extracted.reference_value),
        digitization_status=status.value,
        situation="-",
        extractor="-",
        utilization="-",
        contract_value=parse_decimal(extracted.contract_value, "contract_value"),
        installment_value=parse_decimal(extracted.installment_value, "installment_value"),
        term_months=parse_whole_number(extracted.term_months, "term_months"),
        source_type=context.source_type.value,
        importing_operator=context.operator.name,
    )


def _flag_duplicate(db: Session, context: _BatchContext, unique_id: str, description: str) -> None:
    if not context.settings.emit_duplicate_issues or unique_id in context.flagged_duplicates:
        return
    record_issue(db, unique_id, IssueType.DUPLICATE, description)
    context.flagged_duplicates.add(unique_id)
    context.result.validation_issues_created += 1


def _log_row_history(db: Session, context: _BatchContext, action: HistoryAction, description: str) -> None:
    if context.settings.record_row_history:
        record_history(db, context.operator.id, action, description)


def _as_text(value: Any) -> str:
    return str(value).strip()


def parse_decimal(value: Any, field_name: str) -> Decimal:
    """Parse a spreadsheet money/number cell, accepting ``1.234,56`` and ``R$`` prefixes."""

    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value {value!r} for {field_name}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    text = str(value).strip().replace("R$", "").replace(" ", "")
    if "," in text and "." in text:
        text = text.replace(".", "").replace(",", ".")
    elif "," in text:
        text = text.replace(",", ".")
    try:
        parsed = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value {value!r} for {field_name}") from exc
    if not parsed.is_finite():
        raise ValueError(f"Invalid numeric value {value!r} for {field_name}")
    return parsed


def parse_whole_number(value: Any, field_name: str) -> int:
    """Parse a count cell such as a term in months; fractional values are rejected."""

    parsed = parse_decimal(value, field_name)
    if parsed != parsed.to_integral_value():
        raise ValueError(f"Expected a whole number for {field_name}, got {value!r}")
    return int(parsed)
