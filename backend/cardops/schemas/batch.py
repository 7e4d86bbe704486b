"""Batch processing result schemas."""

from typing import Any

from pydantic import BaseModel, Field


class BatchResult(BaseModel):
    """Reconciliation summary for one uploaded spreadsheet."""

    source_type: str
    operator_id: int
    total: int = 0
    inserted: int = 0
    updated: int = 0
    duplicates: int = 0
    errors: int = 0
    validation_issues_created: int = 0
    operator_score: int | None = None


class ValidationStats(BaseModel):
    """Counters for a standalone validation run."""

    total: int = 0
    validated: int = 0
    not_found: int = 0
    duplicates: int = 0
    errors: int = 0
    validation_issues_created: int = 0


class ValidationBatchResult(BaseModel):
    """Annotated rows ready for re-export plus run statistics."""

    operator_id: int
    validated_rows: list[dict[str, Any]] = Field(default_factory=list)
    stats: ValidationStats
    operator_score: int | None = None
