"""Validation issue ORM model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cardops.models.base import Base, CreatedAtMixin, IdMixin


class ValidationIssue(Base, IdMixin, CreatedAtMixin):
    """Anomaly detected during reconciliation or standalone validation."""

    __tablename__ = "validation_issues"

    # Plain reference: issues may point at identities that were never stored.
    unique_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    issue_type: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    resolved: Mapped[bool] = mapped_column(Boolean, default=False, index=True, nullable=False)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
