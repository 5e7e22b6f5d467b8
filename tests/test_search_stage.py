"""Unit tests for the free-text search stage."""

from listquery.search.engine import is_blank_term, search_records


def test_search_listed_fields_only(people):
    """Only the listed fields are examined."""
    result = search_records(people, "b", ["name"])
    assert [r["id"] for r in result] == [2]


def test_search_is_case_insensitive(people):
    result = search_records(people, "ANN", ["name"])
    assert [r["id"] for r in result] == [1]


def test_search_or_across_listed_fields(people):
    """A match in any listed field keeps the record."""
    result = search_records(people, "admin", ["name", "role"])
    assert [r["id"] for r in result] == [1]

    result = search_records(people, "c", ["name", "role"])
    assert [r["id"] for r in result] == [2, 3]


def test_blank_term_returns_input_unchanged(people):
    """Empty and whitespace-only terms are no-ops."""
    assert search_records(people, "", ["name"]) is people
    assert search_records(people, "   ", ["name"]) is people
    assert search_records(people, None) is people


def test_search_all_scalar_fields_when_no_fields_given(people):
    """Without a field list, every string/number field is searched."""
    assert [r["id"] for r in search_records(people, "client")] == [2, 3]
    # Numbers are searched as text
    assert [r["id"] for r in search_records(people, "3")] == [3]


def test_search_all_fields_skips_nested_values(appointments):
    """Nested objects are ignored in whole-record search."""
    result = search_records(appointments, "ann")
    assert result == []


def test_search_all_fields_skips_booleans():
    records = [{"id": "x", "active": True}]
    assert search_records(records, "true") == []


def test_search_missing_or_none_listed_field_is_empty_text(appointments):
    """A None or absent listed field never matches a non-blank term."""
    result = search_records(appointments, "2024", ["appointmentTime", "missing"])
    assert [r["id"] for r in result] == ["a1", "a2", "a3"]


def test_search_does_not_mutate_input(people):
    snapshot = [dict(p) for p in people]
    search_records(people, "b", ["name"])
    assert people == snapshot


def test_search_result_is_subset_of_input(appointments):
    """Any term yields a subset of the full collection, in input order."""
    for term in ["", "a", "call", "zzz", "60"]:
        result = search_records(appointments, term)
        assert all(r in appointments for r in result)
        assert [appointments.index(r) for r in result] == sorted(appointments.index(r) for r in result)


def test_is_blank_term():
    assert is_blank_term("") is True
    assert is_blank_term("  \t") is True
    assert is_blank_term(None) is True
    assert is_blank_term(" a ") is False
