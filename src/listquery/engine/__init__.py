from .memo import StageMemo
from .metrics import ViewMetrics, compute_metrics, count_active_filters
from .query_engine import ListQueryEngine, ViewResult

__all__ = [
    "ListQueryEngine",
    "StageMemo",
    "ViewMetrics",
    "ViewResult",
    "compute_metrics",
    "count_active_filters",
]
