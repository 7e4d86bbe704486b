"""Proposal lookup, operator edits and completeness audit services."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from cardops.errors import NotFoundError
from cardops.models.proposal import Proposal
from cardops.models.validation_issue import ValidationIssue
from cardops.reconciliation.types import HistoryAction, IssueType
from cardops.services.history import record_history
from cardops.services.issues import record_issue
from cardops.services.operators import get_operator

logger = logging.getLogger(__name__)

# proposal attribute -> human label used in issue descriptions
REQUIRED_ATTRIBUTES: dict[str, str] = {
    "name": "Name",
    "employer": "Employer",
}


def get_proposal(db: Session, unique_id: str) -> Proposal:
    """Load a proposal by unique id or raise NotFoundError."""

    proposal = db.scalar(select(Proposal).where(Proposal.unique_id == unique_id))
    if proposal is None:
        raise NotFoundError(f"Proposal {unique_id} not found")
    return proposal


def list_issues_for_proposal(db: Session, unique_id: str) -> list[ValidationIssue]:
    stmt = (
        select(ValidationIssue)
        .where(ValidationIssue.unique_id == unique_id)
        .order_by(ValidationIssue.id.desc())
    )
    return list(db.scalars(stmt).all())


def audit_proposal(db: Session, unique_id: str, operator_id: int) -> list[ValidationIssue]:
    """Record INCOMPLETE_DATA issues for required attributes a stored proposal lacks."""

    try:
        proposal = get_proposal(db, unique_id)
        operator = get_operator(db, operator_id)
        created: list[ValidationIssue] = []
        for attribute, label in REQUIRED_ATTRIBUTES.items():
            value = (getattr(proposal, attribute) or "").strip()
            if value and value != "-":
                continue
            created.append(
                record_issue(db, unique_id, IssueType.INCOMPLETE_DATA, f"{label} is missing")
            )
        record_history(
            db,
            operator.id,
            HistoryAction.AUDIT,
            f"Audited proposal {unique_id}: {len(created)} issue(s) found",
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("proposals.audited unique_id=%s issues=%d", unique_id, len(created))
    return created


def _operator_text(value: str | None) -> str:
    text = (value or "").strip()
    return text or "-"


def update_operator_fields(
    db: Session,
    unique_id: str,
    operator_id: int,
    situation: str | None,
    extractor: str | None,
    utilization: str | None,
) -> Proposal:
    """Set the operator-owned fields of a stored proposal.

    Spreadsheet batches never write these fields, so this is the only way they
    change.
    """

    try:
        proposal = get_proposal(db, unique_id)
        operator = get_operator(db, operator_id)
        proposal.situation = _operator_text(situation)
        proposal.extractor = _operator_text(extractor)
        proposal.utilization = _operator_text(utilization)
        record_history(
            db,
            operator.id,
            HistoryAction.UPDATE_PROPOSAL,
            f"Operator {operator.name} updated proposal {unique_id}",
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(proposal)
    logger.info("proposals.updated unique_id=%s operator_id=%d", unique_id, operator_id)
    return proposal
