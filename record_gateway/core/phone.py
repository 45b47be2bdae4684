"""Phone Normalizer — canonical digit form, display formatting, and match variants.

Invariants:
    - Pure functions: no IO, no async
    - normalize() keeps digits only; an empty result means the input is unusable
    - format_phone() only reformats 10 digits or 11 digits starting with "1";
      anything else is returned unmodified (best effort, never raises)
    - exact_variants() yields exactly five surface forms for a usable number

Design Decisions:
    - Matching is built on the canonical form, formatting on the way out:
      the record store holds phones in whatever shape users typed them
    - 7 digits is the shortest string treated as phone-like in free-text search
      (a local number without area code)
"""

import re

from record_gateway.core.domain_types import CanonicalPhone
from record_gateway.core.errors import ToolValidationError

_NON_DIGITS = re.compile(r"\D")

PHONE_LIKE_MIN_DIGITS = 7
_NATIONAL_LENGTH = 10
_COUNTRY_CODE = "1"


def normalize(raw: str | None) -> CanonicalPhone:
    """Strip every non-digit character."""
    return CanonicalPhone(_NON_DIGITS.sub("", raw or ""))


def require_phone(raw: str | None, field: str) -> CanonicalPhone:
    """normalize() for tools that need a usable number."""
    digits = normalize(raw)
    if not digits:
        raise ToolValidationError(
            f"{field} must contain at least one digit", field,
        )
    return digits


def _national_part(digits: str) -> str | None:
    """10-digit national number, stripping a leading country code; None otherwise."""
    if len(digits) == _NATIONAL_LENGTH:
        return digits
    if len(digits) == _NATIONAL_LENGTH + 1 and digits.startswith(_COUNTRY_CODE):
        return digits[1:]
    return None


def format_phone(raw: str | None) -> str | None:
    """(AAA) BBB-CCCC for 10 digits, +1 (AAA) BBB-CCCC for 1 + 10 digits."""
    if raw is None:
        return None
    digits = normalize(raw)
    if len(digits) == _NATIONAL_LENGTH:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == _NATIONAL_LENGTH + 1 and digits.startswith(_COUNTRY_CODE):
        rest = digits[1:]
        return f"+1 ({rest[:3]}) {rest[3:6]}-{rest[6:]}"
    return raw


def exact_variants(canonical: str) -> list[str]:
    """Surface forms a stored phone may take for the same number.

    Returns an empty list when the number is not a (1-prefixed) 10-digit
    number; callers fall back to partial matching.
    """
    national = _national_part(normalize(canonical))
    if national is None:
        return []
    area, exchange, line = national[:3], national[3:6], national[6:]
    return [
        national,
        f"{_COUNTRY_CODE}{national}",
        f"{area}-{exchange}-{line}",
        f"({area}) {exchange}-{line}",
        f"+1 ({area}) {exchange}-{line}",
    ]


def is_phone_like(term: str | None) -> bool:
    """Free-text search term that should also be tried as a phone number."""
    return len(normalize(term)) >= PHONE_LIKE_MIN_DIGITS
