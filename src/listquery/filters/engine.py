"""Filter stage: AND-combined, kind-specific predicates over records."""

import math
import numbers
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from ..config.models import FilterDefinition, FilterKind
from ..utils.logging import get_logger
from ..utils.time import calendar_day, parse_timestamp

logger = get_logger(__name__)

R = TypeVar("R", bound=Mapping[str, Any])

_MISSING = object()


def is_empty_filter_value(value: Any) -> bool:
    """A filter value of None or "" imposes no constraint."""
    return value is None or (isinstance(value, str) and value == "")


def _to_number(value: Any) -> Optional[float]:
    """Coerce to float; None for missing, boolean or unparseable input."""
    if value is None or value is _MISSING or isinstance(value, bool):
        return None
    if isinstance(value, (numbers.Real, Decimal)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def _date_range_bounds(value: Any) -> Optional[Tuple[Any, Any]]:
    """Return parsed (start, end) or None when the pair is malformed."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) != 2:
        return None
    start = parse_timestamp(value[0])
    end = parse_timestamp(value[1])
    if start is None or end is None:
        return None
    return start, end


def _match_select(item_value: Any, filter_value: Any) -> bool:
    if item_value is _MISSING:
        return False
    # True == 1 in Python; keep booleans and numbers distinct
    if isinstance(item_value, bool) != isinstance(filter_value, bool):
        return False
    return item_value == filter_value


def _match_text(item_value: Any, filter_value: Any) -> bool:
    text = "" if item_value is _MISSING or item_value is None else str(item_value)
    return str(filter_value).lower() in text.lower()


def _match_number(item_value: Any, filter_value: Any) -> bool:
    left = _to_number(item_value)
    right = _to_number(filter_value)
    if left is None or right is None or math.isnan(left) or math.isnan(right):
        return False
    return left == right


def _match_date(item_value: Any, filter_value: Any) -> bool:
    if item_value is _MISSING:
        return False
    item_day = calendar_day(item_value)
    filter_day = calendar_day(filter_value)
    if item_day is None or filter_day is None:
        return False
    return item_day == filter_day


def _match_date_range(item_value: Any, filter_value: Any) -> bool:
    bounds = _date_range_bounds(filter_value)
    if bounds is None:
        # Malformed pair: no constraint
        return True
    if item_value is _MISSING:
        return False
    item_ts = parse_timestamp(item_value)
    if item_ts is None:
        return False
    start, end = bounds
    return start <= item_ts <= end


_MATCHERS = {
    FilterKind.SELECT.value: _match_select,
    FilterKind.TEXT.value: _match_text,
    FilterKind.NUMBER.value: _match_number,
    FilterKind.DATE.value: _match_date,
    FilterKind.DATE_RANGE.value: _match_date_range,
}


def evaluate_filter(definition: FilterDefinition, item: Mapping[str, Any], filter_value: Any) -> bool:
    """
    Evaluate one filter against one record.

    Args:
        definition: Filter definition (key + kind)
        item: Record mapping
        filter_value: Current value for this filter

    Returns:
        True if the record passes. Empty values and unknown kinds always pass.
    """
    if is_empty_filter_value(filter_value):
        return True

    matcher = _MATCHERS.get(definition.kind)
    if matcher is None:
        # Unknown kind - pass everything
        return True

    return matcher(item.get(definition.key, _MISSING), filter_value)


def matches_all_filters(
    item: Mapping[str, Any],
    definitions: Sequence[FilterDefinition],
    values: Mapping[str, Any],
) -> bool:
    """True if the record passes every configured filter (logical AND)."""
    return all(evaluate_filter(definition, item, values.get(definition.key)) for definition in definitions)


def filter_records(
    records: Sequence[R],
    definitions: Sequence[FilterDefinition],
    values: Mapping[str, Any],
) -> Sequence[R]:
    """
    Narrow records to those satisfying every active filter.

    Values keyed by something that is not a configured filter are ignored.

    Returns:
        The input sequence itself when no filter is active, else a new list in input order
    """
    active: List[FilterDefinition] = [
        definition for definition in definitions if not is_empty_filter_value(values.get(definition.key))
    ]
    if not active:
        return records

    unknown = [d.kind for d in active if d.kind not in _MATCHERS]
    if unknown:
        logger.debug(f"Ignoring filters with unknown kinds: {unknown}")

    active_values: Dict[str, Any] = {d.key: values.get(d.key) for d in active}
    result: List[R] = [item for item in records if matches_all_filters(item, active, active_values)]
    return result
