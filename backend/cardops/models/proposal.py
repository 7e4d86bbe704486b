"""Proposal ORM model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from cardops.models.base import Base, IdMixin, UpdatedAtMixin


class Proposal(Base, IdMixin, UpdatedAtMixin):
    """One reconciled card proposal, keyed by its derived unique id."""

    __tablename__ = "proposals"

    unique_id: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    cpf: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    registration_number: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="-", nullable=False)
    employer: Mapped[str] = mapped_column(String(255), default="-", nullable=False)
    logo_code: Mapped[int] = mapped_column(Integer, nullable=False)
    reference_value: Mapped[str] = mapped_column(String(255), default="-", nullable=False)
    digitization_status: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    situation: Mapped[str] = mapped_column(String(255), default="-", nullable=False)
    extractor: Mapped[str] = mapped_column(String(255), default="-", nullable=False)
    utilization: Mapped[str] = mapped_column(String(255), default="-", nullable=False)
    contract_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    installment_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    term_months: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    source_type: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    importing_operator: Mapped[str] = mapped_column(String(255), nullable=False)
    imported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
