"""Proposal response schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ProposalRead(BaseModel):
    """Serialized proposal record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    unique_id: str
    cpf: str
    registration_number: str
    name: str
    employer: str
    logo_code: int
    reference_value: str
    digitization_status: str
    situation: str
    extractor: str
    utilization: str
    contract_value: Decimal
    installment_value: Decimal
    term_months: int
    source_type: str
    importing_operator: str
    imported_at: datetime
    updated_at: datetime


class ProposalOperatorUpdate(BaseModel):
    """Operator-owned fields edited by hand."""

    operator_id: int = Field(ge=1)
    situation: str | None = Field(default=None, max_length=255)
    extractor: str | None = Field(default=None, max_length=255)
    utilization: str | None = Field(default=None, max_length=255)
