"""Sort stage: single-key, type-aware, nulls-last, stable ordering."""

import locale
import numbers
from datetime import date
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, List, Mapping, Optional, Sequence, TypeVar

from ..config.models import SortDirection, SortSpec
from ..utils.time import parse_timestamp

R = TypeVar("R", bound=Mapping[str, Any])


def _is_number(value: Any) -> bool:
    return isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool)


def _sign(delta: float) -> int:
    # NaN compares as equal
    return (delta > 0) - (delta < 0)


def _compare_defined(a: Any, b: Any) -> int:
    if isinstance(a, date) and isinstance(b, date):
        return _sign((parse_timestamp(a) - parse_timestamp(b)).total_seconds())
    if _is_number(a) and _is_number(b):
        return _sign(float(a) - float(b))
    left, right = str(a).lower(), str(b).lower()
    try:
        return _sign(locale.strcoll(left, right))
    except ValueError:
        # strcoll rejects embedded NUL characters
        return (left > right) - (left < right)


def compare_values(a: Any, b: Any, direction: SortDirection = SortDirection.ASC) -> int:
    """
    Three-way comparison of two field values.

    None sorts after every defined value in both directions. Dates compare by
    timestamp, numbers numerically, anything else as lower-cased strings
    with locale collation. Descending negates only the defined-value result.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1

    result = _compare_defined(a, b)
    return -result if direction == SortDirection.DESC else result


def sort_records(records: Sequence[R], spec: Optional[SortSpec]) -> Sequence[R]:
    """
    Order records by the active sort spec.

    Returns:
        The input sequence itself when `spec` is None, else a new stably sorted list
    """
    if spec is None:
        return records

    key, direction = spec.key, spec.direction

    def _cmp(left: R, right: R) -> int:
        return compare_values(left.get(key), right.get(key), direction)

    result: List[R] = sorted(records, key=cmp_to_key(_cmp))
    return result


def toggle_sort(current: Optional[SortSpec], key: str) -> SortSpec:
    """Same key flips direction; a different key starts ascending."""
    if current is not None and current.key == key:
        flipped = SortDirection.DESC if current.direction == SortDirection.ASC else SortDirection.ASC
        return SortSpec(key=key, direction=flipped)
    return SortSpec(key=key, direction=SortDirection.ASC)
