"""listquery: search, filter, sort and paginate in-memory record collections."""

from .config.models import FilterDefinition, FilterKind, FilterOption, SortDirection, SortSpec, ViewConfig
from .engine.metrics import ViewMetrics
from .engine.query_engine import ListQueryEngine, ViewResult
from .pagination.engine import PageWindow
from .search.debounce import AsyncioScheduler, Debouncer, ManualScheduler, ThreadingScheduler

__version__ = "0.1.0"

__all__ = [
    "AsyncioScheduler",
    "Debouncer",
    "FilterDefinition",
    "FilterKind",
    "FilterOption",
    "ListQueryEngine",
    "ManualScheduler",
    "PageWindow",
    "SortDirection",
    "SortSpec",
    "ThreadingScheduler",
    "ViewConfig",
    "ViewMetrics",
    "ViewResult",
]
