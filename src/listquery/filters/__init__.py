from .engine import evaluate_filter, filter_records, is_empty_filter_value, matches_all_filters

__all__ = [
    "evaluate_filter",
    "filter_records",
    "is_empty_filter_value",
    "matches_all_filters",
]
