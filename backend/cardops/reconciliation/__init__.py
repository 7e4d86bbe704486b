"""Pure reconciliation helpers: identity, normalization, logo resolution."""

from cardops.reconciliation.identity import SENTINEL_UNIQUE_ID, derive_unique_id, is_sentinel
from cardops.reconciliation.logo import LogoResolver, get_logo_resolver, resolve_logo
from cardops.reconciliation.normalization import FIELD_ALIASES, extract_row, normalize
from cardops.reconciliation.types import (
    DigitizationStatus,
    ExtractedRow,
    HistoryAction,
    IssueType,
    RawRow,
    SourceType,
    ValidationOutcome,
)

__all__ = [
    "FIELD_ALIASES",
    "SENTINEL_UNIQUE_ID",
    "DigitizationStatus",
    "ExtractedRow",
    "HistoryAction",
    "IssueType",
    "LogoResolver",
    "RawRow",
    "SourceType",
    "ValidationOutcome",
    "derive_unique_id",
    "extract_row",
    "get_logo_resolver",
    "is_sentinel",
    "normalize",
    "resolve_logo",
]
