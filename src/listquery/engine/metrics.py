"""Derived counts and flags for list view affordances."""

from typing import Any, Mapping

from pydantic import BaseModel


class ViewMetrics(BaseModel):
    active_filters_count: int
    is_filtered: bool  # any active filter or a non-empty raw search term
    has_data: bool  # rows left after search and filters
    is_empty: bool  # the raw collection itself is empty


def count_active_filters(filters: Mapping[str, Any]) -> int:
    """Entries whose value is neither None nor an empty string."""
    return sum(1 for value in filters.values() if value is not None and value != "")


def compute_metrics(
    filters: Mapping[str, Any],
    search_term: str,
    total_items: int,
    raw_count: int,
) -> ViewMetrics:
    active = count_active_filters(filters)
    return ViewMetrics(
        active_filters_count=active,
        is_filtered=active > 0 or len(search_term) > 0,
        has_data=total_items > 0,
        is_empty=raw_count == 0,
    )
