"""SQLAlchemy metadata registry import for Alembic."""

from cardops.models import HistoryEntry, Operator, Proposal, ValidationIssue
from cardops.models.base import Base

__all__ = ["Base", "HistoryEntry", "Operator", "Proposal", "ValidationIssue"]
