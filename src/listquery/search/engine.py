"""Free-text search stage."""

import numbers
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence, TypeVar

R = TypeVar("R", bound=Mapping[str, Any])


def is_blank_term(term: Optional[str]) -> bool:
    """True when the term imposes no constraint (empty or whitespace-only)."""
    return not term or not term.strip()


def _is_scalar(value: Any) -> bool:
    # bool is an int subclass but is not searched as a number
    return isinstance(value, (str, numbers.Real, Decimal)) and not isinstance(value, bool)


def _field_text(item: Mapping[str, Any], field: str) -> str:
    value = item.get(field)
    if value is None:
        return ""
    return str(value)


def _matches(item: Mapping[str, Any], needle: str, fields: Sequence[str]) -> bool:
    if fields:
        return any(needle in _field_text(item, field).lower() for field in fields)

    for value in item.values():
        if _is_scalar(value) and needle in str(value).lower():
            return True
    return False


def search_records(
    records: Sequence[R],
    term: Optional[str],
    searchable_fields: Sequence[str] = (),
) -> Sequence[R]:
    """
    Narrow records to those containing the term as a case-insensitive substring.

    Args:
        records: Input collection (never mutated)
        term: Search term; blank terms return `records` unchanged
        searchable_fields: Fields to examine. When empty, every str/number
            field of each record is examined and nested values are skipped.

    Returns:
        The input sequence itself for blank terms, else a new list in input order
    """
    if is_blank_term(term):
        return records

    needle = term.lower()
    fields = tuple(searchable_fields)
    result: List[R] = [item for item in records if _matches(item, needle, fields)]
    return result
