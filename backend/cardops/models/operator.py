"""Operator account ORM model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cardops.models.base import Base, CreatedAtMixin, IdMixin


class Operator(Base, IdMixin, CreatedAtMixin):
    """Back-office operator driving uploads, with cumulative quality counters."""

    __tablename__ = "operators"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    records_processed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    records_with_error: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=100, nullable=False)
