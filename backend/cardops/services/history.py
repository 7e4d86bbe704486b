"""Operator action history services."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from cardops.models.history_entry import HistoryEntry
from cardops.reconciliation.types import HistoryAction


def record_history(
    db: Session,
    operator_id: int,
    action: HistoryAction | str,
    description: str,
) -> HistoryEntry:
    """Add a history entry to the caller's transaction."""

    entry = HistoryEntry(
        operator_id=operator_id,
        action=HistoryAction(action).value,
        description=description,
    )
    db.add(entry)
    return entry


def list_history(db: Session, operator_id: int, limit: int = 100) -> list[HistoryEntry]:
    """List the most recent history entries for an operator."""

    stmt = (
        select(HistoryEntry)
        .where(HistoryEntry.operator_id == operator_id)
        .order_by(HistoryEntry.id.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt).all())
