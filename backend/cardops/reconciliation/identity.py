"""Natural-key derivation for proposal records."""

from __future__ import annotations

from typing import Any

SEPARATOR = "_"
MISSING = "-"
SENTINEL_UNIQUE_ID = f"{MISSING}{SEPARATOR}{MISSING}"


def _clean_component(value: Any) -> str:
    if value is None:
        return MISSING
    text = str(value).strip()
    if not text:
        return MISSING
    # Escape so the joined key stays injective over (cpf, registration) pairs.
    return text.replace("\\", "\\\\").replace(SEPARATOR, "\\" + SEPARATOR)


def derive_unique_id(raw_cpf: Any, raw_registration_number: Any) -> str:
    """Build the canonical unique key for a proposal from CPF and registration number.

    Both parts are trimmed; missing parts become ``"-"``. A row with neither part
    yields ``SENTINEL_UNIQUE_ID``, which callers must treat as invalid input.
    """

    return f"{_clean_component(raw_cpf)}{SEPARATOR}{_clean_component(raw_registration_number)}"


def is_sentinel(unique_id: str) -> bool:
    return unique_id == SENTINEL_UNIQUE_ID
