"""Validation issue recording, querying and resolution."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from cardops.errors import AlreadyResolvedError, NotFoundError
from cardops.models.validation_issue import ValidationIssue
from cardops.reconciliation.types import HistoryAction, IssueType
from cardops.schemas.validation_issue import IssueCount, IssueSummary
from cardops.services.history import record_history
from cardops.services.operators import get_operator

logger = logging.getLogger(__name__)


def record_issue(
    db: Session,
    unique_id: str,
    issue_type: IssueType | str,
    description: str,
) -> ValidationIssue:
    """Add an open issue inside the caller's transaction and flush it for an id."""

    issue = ValidationIssue(
        unique_id=unique_id,
        issue_type=IssueType(issue_type).value,
        description=description,
        resolved=False,
    )
    db.add(issue)
    db.flush()
    return issue


def create_issue(
    db: Session,
    unique_id: str,
    issue_type: IssueType | str,
    description: str,
) -> int:
    """Persist a standalone issue and return its id."""

    issue = record_issue(db, unique_id, issue_type, description)
    db.commit()
    logger.info(
        "issues.created issue_id=%d unique_id=%s issue_type=%s",
        issue.id,
        issue.unique_id,
        issue.issue_type,
    )
    return issue.id


def get_issue(db: Session, issue_id: int, *, for_update: bool = False) -> ValidationIssue:
    """Load an issue or raise NotFoundError."""

    stmt = select(ValidationIssue).where(ValidationIssue.id == issue_id)
    if for_update:
        stmt = stmt.with_for_update()
    issue = db.scalar(stmt)
    if issue is None:
        raise NotFoundError(f"Validation issue {issue_id} not found")
    return issue


def resolve_issue(db: Session, issue_id: int, resolving_operator_id: int) -> ValidationIssue:
    """Mark an open issue resolved exactly once.

    A second resolution is rejected with AlreadyResolvedError so the recorded
    ``resolved_at``/``resolved_by`` always describe the single resolution event.
    """

    try:
        issue = get_issue(db, issue_id, for_update=True)
        if issue.resolved:
            raise AlreadyResolvedError(f"Validation issue {issue_id} is already resolved")
        operator = get_operator(db, resolving_operator_id)
        issue.resolved = True
        issue.resolved_at = datetime.now(timezone.utc)
        issue.resolved_by = operator.id
        record_history(
            db,
            operator.id,
            HistoryAction.RESOLVE_VALIDATION,
            f"Operator {operator.name} resolved validation issue {issue.id} ({issue.issue_type} {issue.unique_id})",
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(issue)
    logger.info("issues.resolved issue_id=%d resolved_by=%d", issue.id, resolving_operator_id)
    return issue


def list_issues(
    db: Session,
    *,
    issue_type: IssueType | str | None = None,
    resolved: bool | None = None,
    unique_id: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[ValidationIssue]:
    """List issues newest first with optional filters."""

    stmt = select(ValidationIssue)
    if issue_type is not None:
        stmt = stmt.where(ValidationIssue.issue_type == IssueType(issue_type).value)
    if resolved is not None:
        stmt = stmt.where(ValidationIssue.resolved.is_(resolved))
    if unique_id:
        stmt = stmt.where(ValidationIssue.unique_id == unique_id)
    stmt = stmt.order_by(ValidationIssue.id.desc()).limit(limit).offset(offset)
    return list(db.scalars(stmt).all())


def list_open_issues_for(db: Session, unique_id: str) -> list[ValidationIssue]:
    stmt = (
        select(ValidationIssue)
        .where(ValidationIssue.unique_id == unique_id, ValidationIssue.resolved.is_(False))
        .order_by(ValidationIssue.id.asc())
    )
    return list(db.scalars(stmt).all())


def summarize_issues(db: Session) -> IssueSummary:
    """Aggregate issue counts by type, resolution state and resolver."""

    total = db.scalar(select(func.count(ValidationIssue.id))) or 0
    by_type = db.execute(
        select(ValidationIssue.issue_type, func.count(ValidationIssue.id))
        .group_by(ValidationIssue.issue_type)
        .order_by(ValidationIssue.issue_type.asc())
    ).all()
    by_resolution = db.execute(
        select(ValidationIssue.resolved, func.count(ValidationIssue.id))
        .group_by(ValidationIssue.resolved)
        .order_by(ValidationIssue.resolved.asc())
    ).all()
    by_resolver = db.execute(
        select(ValidationIssue.resolved_by, func.count(ValidationIssue.id))
        .where(ValidationIssue.resolved.is_(True))
        .group_by(ValidationIssue.resolved_by)
        .order_by(ValidationIssue.resolved_by.asc())
    ).all()
    return IssueSummary(
        total=total,
        by_type=[IssueCount(key=issue_type, count=count) for issue_type, count in by_type],
        by_resolution=[
            IssueCount(key="resolved" if resolved else "open", count=count)
            for resolved, count in by_resolution
        ],
        by_resolver=[IssueCount(key=str(resolver), count=count) for resolver, count in by_resolver],
    )
