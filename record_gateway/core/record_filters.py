"""Record Filters — predicates shared by tools that look clients up by name or phone.

Invariants:
    - Pure: builds query_builder nodes, never query text
    - Phone clauses always test both the main and the mobile phone field
    - Exact matching needs a 10-digit (or 1 + 10-digit) number; shorter or longer
      input falls back to partial matching on the canonical digits
    - Name and phone alternatives for one client lookup form a single OR group

Design Decisions:
    - Client filters are expressed as "parent IN (SELECT Id FROM Account ...)":
      the record store supports semi-join subqueries but not arbitrary joins
"""

from record_gateway.core import phone as phone_normalizer
from record_gateway.core.query_builder import (
    Predicate, Select, any_of, contains, in_subquery, is_in,
)

ACCOUNT = "Account"
PHONE_FIELDS = ("Phone", "PersonMobilePhone")


def phone_match(raw_phone: str, exact: bool = False) -> Predicate | None:
    """OR over the account phone fields for one phone number.

    Returns None when the input holds no digits.
    """
    digits = phone_normalizer.normalize(raw_phone)
    if not digits:
        return None
    variants = phone_normalizer.exact_variants(digits) if exact else []
    if variants:
        return any_of(*(is_in(f, variants) for f in PHONE_FIELDS))
    return any_of(*(contains(f, digits) for f in PHONE_FIELDS))


def name_or_phone(
    name: str | None, raw_phone: str | None, exact_phone: bool = False,
) -> Predicate | None:
    """Single OR group matching an account by name substring or phone."""
    return any_of(
        contains("Name", name) if name else None,
        phone_match(raw_phone, exact_phone) if raw_phone else None,
    )


def search_term_match(term: str) -> Predicate:
    """Free-text client search: literal name/phone substring, plus phone-style
    matching when the term looks like a phone number."""
    literal = (contains("Name", term), contains("Phone", term))
    if phone_normalizer.is_phone_like(term):
        return any_of(*literal, phone_match(term))
    return any_of(*literal)


def accounts_matching(predicate: Predicate) -> Select:
    """SELECT Id FROM Account WHERE <predicate> — for IN (subquery) filters."""
    return Select(fields=("Id",), sobject=ACCOUNT, where=predicate)


def client_in(field_name: str, predicate: Predicate | None) -> Predicate | None:
    """field IN (matching accounts), or None when there is nothing to match."""
    if predicate is None:
        return None
    return in_subquery(field_name, accounts_matching(predicate))
