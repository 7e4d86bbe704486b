"""Validation issue schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cardops.reconciliation.types import IssueType


class ValidationIssueRead(BaseModel):
    """Serialized validation issue."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    unique_id: str
    issue_type: str
    description: str
    resolved: bool
    resolved_at: datetime | None
    resolved_by: int | None
    created_at: datetime


class ValidationIssueCreate(BaseModel):
    """Manual validation issue payload."""

    unique_id: str = Field(min_length=1)
    issue_type: IssueType
    description: str = Field(min_length=1)


class ResolveIssueRequest(BaseModel):
    """Operator resolving an issue."""

    operator_id: int = Field(ge=1)


class IssueCount(BaseModel):
    key: str
    count: int


class IssueSummary(BaseModel):
    """Aggregate counts over all validation issues."""

    total: int
    by_type: list[IssueCount]
    by_resolution: list[IssueCount]
    by_resolver: list[IssueCount]
