"""Query Builder — predicate AST and the single renderer for record-store queries.

Invariants:
    - Pure: no IO, no async
    - render() is the ONLY place literals are turned into query text; every string
      literal passes through escape_literal() (LIKE patterns through escape_like())
    - Field and object names are validated identifiers, never caller text
    - AND/OR groups with more than one clause are always parenthesized
    - LIMIT renders a validated positive integer, never a string

Design Decisions:
    - Frozen dataclasses + match in render(): adding a node type means adding one case
    - all_of()/any_of() drop None clauses so optional filters compose without
      "WHERE 1=1" scaffolding
    - Escaping covers the record store's full escape-sequence set (backslash, quotes,
      control characters) rather than quotes alone. The store offers no parameter
      binding over its query endpoint, so escaping + identifier validation is the
      whole defense
"""

import re
from dataclasses import dataclass
from typing import Union

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_OPERATORS = frozenset({"=", "!=", "<", "<=", ">", ">="})

# Order matters for escaping: backslash first so later escapes are not doubled.
_ESCAPES = (
    ("\\", "\\\\"),
    ("'", "\\'"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
    ("\b", "\\b"),
    ("\f", "\\f"),
)
_LIKE_ESCAPES = (("%", "\\%"), ("_", "\\_"))
_UNESCAPES = {
    "\\": "\\", "'": "'", '"': '"', "n": "\n", "r": "\r",
    "t": "\t", "b": "\b", "f": "\f", "%": "%", "_": "_",
}

Value = Union[str, int, float, bool, None]


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid field or object name: {name!r}")
    return name


# ─── Escaping ────────────────────────────────────────────────────

def escape_literal(value: str) -> str:
    """Escape a string for embedding between single quotes."""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def escape_like(value: str) -> str:
    """escape_literal() plus the LIKE wildcards, so caller text matches literally."""
    value = escape_literal(value)
    for raw, escaped in _LIKE_ESCAPES:
        value = value.replace(raw, escaped)
    return value


def unescape_literal(value: str) -> str:
    """Inverse of escape_literal() / escape_like()."""
    out: list[str] = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt is None:
            raise ValueError("Dangling escape at end of literal")
        if nxt not in _UNESCAPES:
            raise ValueError(f"Unknown escape sequence: \\{nxt}")
        out.append(_UNESCAPES[nxt])
    return "".join(out)


# ─── AST ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Comparison:
    field: str
    op: str
    value: Value

    def __post_init__(self):
        _check_identifier(self.field)
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {self.op!r}")


@dataclass(frozen=True)
class Contains:
    """field LIKE '%text%' with text matched literally."""
    field: str
    text: str

    def __post_init__(self):
        _check_identifier(self.field)


@dataclass(frozen=True)
class InList:
    field: str
    values: tuple[Value, ...]

    def __post_init__(self):
        _check_identifier(self.field)
        if not self.values:
            raise ValueError("IN list cannot be empty")


@dataclass(frozen=True)
class InSubquery:
    """field IN (SELECT ...) — the store's way of filtering by a related record."""
    field: str
    query: "Select"

    def __post_init__(self):
        _check_identifier(self.field)


@dataclass(frozen=True)
class And:
    clauses: tuple["Predicate", ...]


@dataclass(frozen=True)
class Or:
    clauses: tuple["Predicate", ...]


Predicate = Union[Comparison, Contains, InList, InSubquery, And, Or]


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = True

    def __post_init__(self):
        _check_identifier(self.field)


@dataclass(frozen=True)
class Select:
    fields: tuple[str, ...]
    sobject: str
    where: Predicate | None = None
    order_by: tuple[OrderBy, ...] = ()
    limit: int | None = None

    def __post_init__(self):
        for name in (*self.fields, self.sobject):
            _check_identifier(name)
        if self.limit is not None and (
            isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1
        ):
            raise ValueError(f"LIMIT must be a positive integer, got {self.limit!r}")


# ─── Builders ────────────────────────────────────────────────────

def eq(field_name: str, value: Value) -> Comparison:
    return Comparison(field_name, "=", value)


def contains(field_name: str, text: str) -> Contains:
    return Contains(field_name, text)


def is_in(field_name: str, values) -> InList:
    return InList(field_name, tuple(values))


def in_subquery(field_name: str, query: Select) -> InSubquery:
    return InSubquery(field_name, query)


def _flatten(clauses, group_type) -> tuple:
    kept: list = []
    for c in clauses:
        if c is None:
            continue
        kept.extend(c.clauses if isinstance(c, group_type) else (c,))
    return tuple(kept)


def all_of(*clauses: Predicate | None) -> Predicate | None:
    """AND of the non-None clauses (nested ANDs flattened); None when there are none."""
    kept = _flatten(clauses, And)
    if not kept:
        return None
    return kept[0] if len(kept) == 1 else And(kept)


def any_of(*clauses: Predicate | None) -> Predicate | None:
    """OR of the non-None clauses (nested ORs flattened); None when there are none."""
    kept = _flatten(clauses, Or)
    if not kept:
        return None
    return kept[0] if len(kept) == 1 else Or(kept)


def newest_first(field_name: str = "CreatedDate") -> tuple[OrderBy, ...]:
    return (OrderBy(field_name, descending=True),)


# ─── Rendering ───────────────────────────────────────────────────

def render_value(value: Value) -> str:
    """Render a literal. bool is checked before int (bool is an int subclass)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return f"'{escape_literal(value)}'"
    raise TypeError(f"Unsupported literal type: {type(value).__name__}")


def _render_group(clauses: tuple[Predicate, ...], joiner: str) -> str:
    parts = [render_predicate(c) for c in clauses]
    if len(parts) == 1:
        return parts[0]
    return "(" + f" {joiner} ".join(parts) + ")"


def render_predicate(node: Predicate) -> str:
    match node:
        case Comparison(field=f, op=op, value=v):
            return f"{f} {op} {render_value(v)}"
        case Contains(field=f, text=text):
            return f"{f} LIKE '%{escape_like(text)}%'"
        case InList(field=f, values=values):
            return f"{f} IN (" + ", ".join(render_value(v) for v in values) + ")"
        case InSubquery(field=f, query=q):
            return f"{f} IN ({render(q)})"
        case And(clauses=clauses):
            return _render_group(clauses, "AND")
        case Or(clauses=clauses):
            return _render_group(clauses, "OR")
    raise TypeError(f"Unsupported predicate node: {type(node).__name__}")


def _render_where(where: Predicate) -> str:
    # Top-level AND needs no outer parentheses.
    if isinstance(where, And):
        return " AND ".join(render_predicate(c) for c in where.clauses)
    return render_predicate(where)


def render(query: Select) -> str:
    """Render a Select to the record store's query language."""
    parts = [f"SELECT {', '.join(query.fields)} FROM {query.sobject}"]
    if query.where is not None:
        parts.append(f"WHERE {_render_where(query.where)}")
    if query.order_by:
        parts.append("ORDER BY " + ", ".join(
            f"{o.field} {'DESC' if o.descending else 'ASC'}" for o in query.order_by
        ))
    if query.limit is not None:
        parts.append(f"LIMIT {query.limit}")
    return " ".join(parts)
