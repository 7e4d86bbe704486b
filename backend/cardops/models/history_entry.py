"""Operator action history model."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cardops.models.base import Base, CreatedAtMixin, IdMixin


class HistoryEntry(Base, IdMixin, CreatedAtMixin):
    """Append-only audit trail of operator actions."""

    __tablename__ = "history"

    operator_id: Mapped[int] = mapped_column(
        ForeignKey("operators.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    action: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
