"""Spreadsheet cell normalization and header alias resolution."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date
from typing import Any, Literal

from cardops.reconciliation.types import ExtractedRow

FieldKind = Literal["number", "text", "date"]

SENTINEL_DATE = date(1900, 1, 1)
_DEFAULTS: dict[str, Any] = {"number": 0, "text": "-", "date": SENTINEL_DATE}

# logical field -> (accepted headers in lookup order, kind)
FIELD_ALIASES: dict[str, tuple[tuple[str, ...], FieldKind]] = {
    "cpf": (("CPF", "cpf"), "text"),
    "registration_number": (("MATRICULA", "matricula"), "text"),
    "name": (("NOME", "nome"), "text"),
    "employer": (("EMPREGADOR", "empregador"), "text"),
    "reference_value": (("PROPOSTA30", "proposta30"), "text"),
    "contract_value": (("VALOR_CONTRATO", "valor_contrato"), "number"),
    "installment_value": (("VALOR_PARCELA", "valor_parcela"), "number"),
    "term_months": (("PRAZO", "prazo"), "number"),
}


def is_missing(value: Any) -> bool:
    """Return True for empty spreadsheet cells (None, blank text, NaN)."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def normalize(value: Any, kind: FieldKind) -> Any:
    """Replace a missing cell with the business default for ``kind``; pass present values through."""

    if kind not in _DEFAULTS:
        raise ValueError(f"Unknown field kind: {kind}")
    if is_missing(value):
        return _DEFAULTS[kind]
    if kind == "text" and isinstance(value, str):
        return value.strip()
    return value


def lookup_field(row: Mapping[str, Any], field_name: str) -> Any:
    """Return the first present value among the header aliases of ``field_name``."""

    headers, kind = FIELD_ALIASES[field_name]
    for header in headers:
        value = row.get(header)
        if not is_missing(value):
            return normalize(value, kind)
    return normalize(None, kind)


def extract_row(row: Mapping[str, Any]) -> ExtractedRow:
    """Apply the normalizer uniformly to every logical field of a raw row."""

    return ExtractedRow(**{field_name: lookup_field(row, field_name) for field_name in FIELD_ALIASES})
