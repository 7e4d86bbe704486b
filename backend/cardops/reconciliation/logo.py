"""Employer name to logo classification code resolution."""

from __future__ import annotations

import hashlib
import random
from collections.abc import Mapping, Sequence
from typing import Literal

from cardops.config import get_settings

FallbackStrategy = Literal["random", "fixed", "hash"]

# Historical exceptions kept ahead of the fallback.
EXCEPTION_LOGO_CODES: dict[str, int] = {
    "GOV GOIAS SEG": 31,
    "INSS BENEF SEG": 61,
    "INSS RMC SEG": 71,
}
DEFAULT_FALLBACK_CODES: tuple[int, ...] = (3, 6, 7)


def _employer_key(employer_name: str | None) -> str:
    return (employer_name or "").strip().upper()


class LogoResolver:
    """Resolve employers against a known-employer table, the exception list, then a fallback."""

    def __init__(
        self,
        known_codes: Mapping[str, int] | None = None,
        *,
        fallback_strategy: FallbackStrategy = "random",
        fallback_codes: Sequence[int] = DEFAULT_FALLBACK_CODES,
        default_code: int = 3,
        rng: random.Random | None = None,
    ) -> None:
        if not fallback_codes:
            raise ValueError("fallback_codes must not be empty")
        self.known_codes = {_employer_key(name): code for name, code in (known_codes or {}).items()}
        self.fallback_strategy = fallback_strategy
        self.fallback_codes = tuple(fallback_codes)
        self.default_code = default_code
        self._rng = rng or random.Random()

    def resolve(self, employer_name: str | None) -> int:
        key = _employer_key(employer_name)
        if key in self.known_codes:
            return self.known_codes[key]
        if key in EXCEPTION_LOGO_CODES:
            return EXCEPTION_LOGO_CODES[key]
        return self._fallback(key)

    def _fallback(self, key: str) -> int:
        if self.fallback_strategy == "fixed":
            return self.default_code
        if self.fallback_strategy == "hash":
            digest = hashlib.sha256(key.encode("utf-8")).digest()
            return self.fallback_codes[int.from_bytes(digest[:8], "big") % len(self.fallback_codes)]
        # NOTE: the same unmapped employer may get different codes across calls.
        return self._rng.choice(self.fallback_codes)


def get_logo_resolver() -> LogoResolver:
    """Build a resolver from application settings."""

    settings = get_settings()
    return LogoResolver(
        settings.employer_logo_codes,
        fallback_strategy=settings.logo_fallback_strategy,
        fallback_codes=settings.fallback_logo_codes,
        default_code=settings.default_logo_code,
    )


def resolve_logo(employer_name: str | None) -> int:
    """Map an employer name to its integer logo code using configured policy."""

    return get_logo_resolver().resolve(employer_name)
