from .debounce import AsyncioScheduler, Debouncer, ManualScheduler, Scheduler, ThreadingScheduler
from .engine import is_blank_term, search_records

__all__ = [
    "AsyncioScheduler",
    "Debouncer",
    "ManualScheduler",
    "Scheduler",
    "ThreadingScheduler",
    "is_blank_term",
    "search_records",
]
