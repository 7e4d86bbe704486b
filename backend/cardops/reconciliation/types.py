"""Closed vocabularies and row containers used by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SourceType(str, Enum):
    """Spreadsheet feeds accepted for upload."""

    PROD_PROM = "PROD_PROM"
    ESTEIRA = "ESTEIRA"
    OP_REALIZADAS = "OP_REALIZADAS"
    SEGUROS = "SEGUROS"
    FACE_SHEET = "FACE_SHEET"


class DigitizationStatus(str, Enum):
    DIGITIZED = "DIGITIZED"
    NOT_DIGITIZED = "NOT_DIGITIZED"
    ERROR = "ERROR"
    DUPLICATE = "DUPLICATE"


class IssueType(str, Enum):
    DUPLICATE = "DUPLICATE"
    NOT_FOUND = "NOT_FOUND"
    INCOMPLETE_DATA = "INCOMPLETE_DATA"
    SYSTEM_ERROR = "SYSTEM_ERROR"


class ValidationOutcome(str, Enum):
    """Per-row annotation produced by standalone validation."""

    VALIDATED = "VALIDATED"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE = "DUPLICATE"
    ERROR = "ERROR"


class HistoryAction(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    UPLOAD = "UPLOAD"
    VALIDATION = "VALIDATION"
    RESOLVE_VALIDATION = "RESOLVE_VALIDATION"
    UPDATE_PROPOSAL = "UPDATE_PROPOSAL"
    AUDIT = "AUDIT"


RawRow = dict[str, Any]


@dataclass(slots=True)
class ExtractedRow:
    """Normalized business fields pulled out of one spreadsheet row."""

    cpf: str
    registration_number: str
    name: str
    employer: str
    reference_value: str
    contract_value: Any
    installment_value: Any
    term_months: Any

    @property
    def has_identity(self) -> bool:
        return self.cpf != "-" and self.registration_number != "-"

    @property
    def has_reference(self) -> bool:
        return self.reference_value != "-"
