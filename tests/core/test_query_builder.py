"""Query Builder tests — escaping, predicate composition, and rendering.

Tests cover:
    - escape_literal() covers backslash, quotes, and control characters
    - escape_like() additionally neutralizes % and _
    - Escaped literals unescape back to the original text
    - Injection attempts stay inside one quoted literal
    - all_of()/any_of() drop None, flatten, and collapse single clauses
    - Groups of more than one clause are parenthesized; top-level AND is not
    - Identifier, operator, and LIMIT validation

Design Decisions:
    - Assertions on exact rendered text: the query string IS the contract
      with the record store
"""

import pytest

from record_gateway.core.query_builder import (
    And, Comparison, Contains, InList, Or, OrderBy, Select,
    all_of, any_of, contains, eq, escape_like, escape_literal, in_subquery,
    is_in, newest_first, render, render_predicate, render_value, unescape_literal,
)


# ─── Escaping ────────────────────────────────────────────────────

def test_escape_single_quote():
    assert escape_literal("O'Brien") == "O\\'Brien"


def test_escape_backslash_first():
    assert escape_literal("a\\'b") == "a\\\\\\'b"


def test_escape_control_characters():
    assert escape_literal("a\nb\rc\td") == "a\\nb\\rc\\td"
    assert escape_literal('say "hi"') == 'say \\"hi\\"'


def test_escape_like_wildcards():
    assert escape_like("100%_done") == "100\\%\\_done"


@pytest.mark.parametrize("text", [
    "O'Brien", "back\\slash", "' OR Name != '", "tab\tand\nnewline", "50% off_now", "",
])
def test_unescape_reverses_escaping(text):
    assert unescape_literal(escape_literal(text)) == text
    assert unescape_literal(escape_like(text)) == text


def test_unescape_rejects_dangling_escape():
    with pytest.raises(ValueError):
        unescape_literal("abc\\")


def test_unescape_rejects_unknown_escape():
    with pytest.raises(ValueError):
        unescape_literal("\\q")


def test_injection_stays_inside_literal():
    rendered = render_predicate(eq("Name", "x' OR Name != 'y"))
    assert rendered == "Name = 'x\\' OR Name != \\'y'"


# ─── Values ──────────────────────────────────────────────────────

def test_render_values():
    assert render_value(None) == "null"
    assert render_value(True) == "true"
    assert render_value(False) == "false"
    assert render_value(20) == "20"
    assert render_value("a") == "'a'"


def test_render_value_rejects_other_types():
    with pytest.raises(TypeError):
        render_value(["a"])


# ─── Composition ─────────────────────────────────────────────────

def test_all_of_drops_none_and_collapses_single():
    clause = eq("Id", "a")
    assert all_of(None, clause, None) == clause
    assert all_of(None, None) is None
    assert all_of() is None


def test_all_of_flattens_nested_and():
    a, b, c = eq("A", 1), eq("B", 2), eq("C", 3)
    assert all_of(all_of(a, b), c) == And((a, b, c))


def test_any_of_flattens_nested_or():
    a, b, c = eq("A", 1), eq("B", 2), eq("C", 3)
    assert any_of(a, any_of(b, c)) == Or((a, b, c))


def test_or_inside_and_is_parenthesized():
    where = all_of(any_of(eq("A", 1), eq("B", 2)), eq("C", 3))
    query = Select(fields=("Id",), sobject="Thing__c", where=where)
    assert render(query) == "SELECT Id FROM Thing__c WHERE (A = 1 OR B = 2) AND C = 3"


def test_single_clause_has_no_parentheses():
    assert render_predicate(Or((eq("A", 1),))) == "A = 1"


def test_contains_renders_like():
    assert render_predicate(contains("Name", "Smith")) == "Name LIKE '%Smith%'"
    assert render_predicate(contains("Name", "50%")) == "Name LIKE '%50\\%%'"


def test_in_list_renders_every_value():
    assert render_predicate(is_in("Phone", ["1", "2"])) == "Phone IN ('1', '2')"


def test_in_subquery_renders_nested_select():
    sub = Select(fields=("Id",), sobject="Account", where=contains("Name", "Ann"))
    assert render_predicate(in_subquery("Client__c", sub)) == (
        "Client__c IN (SELECT Id FROM Account WHERE Name LIKE '%Ann%')"
    )


def test_full_select_with_order_and_limit():
    query = Select(
        fields=("Id", "Name"),
        sobject="Client_Request__c",
        where=eq("Responded__c", False),
        order_by=newest_first(),
        limit=5,
    )
    assert render(query) == (
        "SELECT Id, Name FROM Client_Request__c WHERE Responded__c = false "
        "ORDER BY CreatedDate DESC LIMIT 5"
    )


def test_ascending_order():
    query = Select(fields=("Id",), sobject="Account", order_by=(OrderBy("Name", False),))
    assert render(query) == "SELECT Id FROM Account ORDER BY Name ASC"


# ─── Validation ──────────────────────────────────────────────────

@pytest.mark.parametrize("name", ["Name; DELETE", "1Name", "Name'", "", "Client__r..Name"])
def test_invalid_identifiers_rejected(name):
    with pytest.raises(ValueError):
        Comparison(name, "=", 1)


def test_relationship_path_is_valid_identifier():
    assert render_predicate(Contains("Case__r.Client__c", "x")) == "Case__r.Client__c LIKE '%x%'"


def test_unknown_operator_rejected():
    with pytest.raises(ValueError):
        Comparison("Name", "LIKE", "x")


def test_empty_in_list_rejected():
    with pytest.raises(ValueError):
        InList("Phone", ())


@pytest.mark.parametrize("limit", [0, -1, True, "5", 2.5])
def test_invalid_limit_rejected(limit):
    with pytest.raises(ValueError):
        Select(fields=("Id",), sobject="Account", limit=limit)
