from .engine import compare_values, sort_records, toggle_sort

__all__ = ["compare_values", "sort_records", "toggle_sort"]
