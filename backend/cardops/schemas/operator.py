"""Operator schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class OperatorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class OperatorRead(BaseModel):
    """Serialized operator account with quality counters."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    records_processed: int
    records_with_error: int
    score: int
    created_at: datetime


class HistoryEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    operator_id: int
    action: str
    description: str
    created_at: datetime
