"""ORM models package exports."""

from cardops.models.history_entry import HistoryEntry
from cardops.models.operator import Operator
from cardops.models.proposal import Proposal
from cardops.models.validation_issue import ValidationIssue

__all__ = [
    "HistoryEntry",
    "Operator",
    "Proposal",
    "ValidationIssue",
]
