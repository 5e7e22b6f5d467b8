"""List query engine: owns view state and recomputes the pipeline on demand.

Pipeline (each stage memoized against its own inputs):

    records -> search -> filter -> sort -> paginate

Setters mutate state only; stages run lazily when an output is read, so a
page-size change never re-runs search or filtering.
"""

from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from pydantic import BaseModel

from ..config.models import FilterDefinition, SortSpec, ViewConfig
from ..filters.engine import filter_records
from ..pagination.engine import Page, PageWindow, clamp_page, paginate, total_pages_for
from ..search.debounce import DEFAULT_DEBOUNCE_SECONDS, Debouncer, Scheduler
from ..search.engine import search_records
from ..sorting.engine import sort_records, toggle_sort
from ..sources.base import FetchParams
from ..utils.logging import get_logger
from .memo import StageMemo
from .metrics import ViewMetrics, compute_metrics

logger = get_logger(__name__)

R = TypeVar("R", bound=Mapping[str, Any])

DEFAULT_PAGE_SIZE = 10

FilterConfigInput = Union[FilterDefinition, Mapping[str, Any]]


class ViewResult(BaseModel):
    """Immutable snapshot of everything a list view renders."""

    model_config = {"frozen": True}

    items: List[Dict[str, Any]]
    window: PageWindow
    search_term: str
    effective_search_term: str
    filters: Dict[str, Any]
    sort_config: Optional[SortSpec] = None
    metrics: ViewMetrics


class ListQueryEngine(Generic[R]):
    """Search, filter, sort and paginate one list view's records."""

    def __init__(
        self,
        records: Sequence[R] = (),
        *,
        searchable_fields: Optional[Sequence[str]] = None,
        filter_configs: Optional[Sequence[FilterConfigInput]] = None,
        initial_filters: Optional[Mapping[str, Any]] = None,
        initial_sort: Optional[SortSpec] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        scheduler: Optional[Scheduler] = None,
        fields: Optional[Sequence[str]] = None,
    ):
        # Validates key uniqueness and declared fields up front
        config = ViewConfig(
            searchable_fields=list(searchable_fields or []),
            filters=[
                c if isinstance(c, FilterDefinition) else FilterDefinition.model_validate(c)
                for c in (filter_configs or [])
            ],
            fields=list(fields) if fields is not None else None,
            page_size=page_size,
            initial_filters=dict(initial_filters or {}),
            initial_sort=initial_sort,
            debounce_seconds=debounce_seconds,
        )
        self._searchable_fields: Tuple[str, ...] = tuple(config.searchable_fields)
        self._filter_configs: Tuple[FilterDefinition, ...] = tuple(config.filters)
        self._fields = frozenset(config.fields) if config.fields is not None else None

        self._records: Tuple[R, ...] = tuple(records)
        self._records_version = 0
        self._filters: Dict[str, Any] = dict(config.initial_filters)
        self._filters_version = 0
        self._sort: Optional[SortSpec] = config.initial_sort
        self._page = 1
        self._page_size = config.page_size

        self._search_term = ""
        self._search = Debouncer(
            "",
            self._on_search_settled,
            delay=config.debounce_seconds,
            scheduler=scheduler,
        )

        self._listeners: List[Callable[["ListQueryEngine[R]"], None]] = []

        self._search_memo: StageMemo[Sequence[R]] = StageMemo("search")
        self._filter_memo: StageMemo[Sequence[R]] = StageMemo("filter")
        self._sort_memo: StageMemo[Sequence[R]] = StageMemo("sort")
        self._page_memo: StageMemo[Page[R]] = StageMemo("paginate")

    @classmethod
    def from_config(
        cls,
        config: ViewConfig,
        records: Sequence[R] = (),
        *,
        scheduler: Optional[Scheduler] = None,
    ) -> "ListQueryEngine[R]":
        """Build an engine from a loaded ViewConfig."""
        return cls(
            records,
            searchable_fields=config.searchable_fields,
            filter_configs=config.filters,
            initial_filters=config.initial_filters,
            initial_sort=config.initial_sort,
            page_size=config.page_size,
            debounce_seconds=config.debounce_seconds,
            scheduler=scheduler,
            fields=config.fields,
        )

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Callable[["ListQueryEngine[R]"], None]) -> Callable[[], None]:
        """
        Register a callback invoked after every state change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def set_records(self, records: Sequence[R]) -> None:
        """Replace the raw collection wholesale (e.g. after a refresh)."""
        self._records = tuple(records)
        self._records_version += 1
        logger.debug(f"Records replaced ({len(self._records)} rows)")
        self._notify()

    def set_search_term(self, term: str) -> None:
        """Set the raw search term; the pipeline sees it after the debounce delay."""
        self._search_term = term or ""
        self._page = 1
        self._search.submit(self._search_term)
        self._notify()

    def flush_search(self) -> None:
        """Apply the pending search term without waiting for the debounce delay."""
        self._search.flush()

    def _on_search_settled(self, term: str) -> None:
        self._page = 1
        self._notify()

    def update_filter(self, key: str, value: Any) -> None:
        """Set (or with None/"" unset) one filter value and return to page 1."""
        self._filters[key] = value
        self._filters_version += 1
        self._page = 1
        self._notify()

    def clear_filters(self) -> None:
        """Reset filters and the search term, and return to page 1."""
        self._filters = {}
        self._filters_version += 1
        self._search_term = ""
        self._search.reset("")
        self._page = 1
        self._notify()

    def update_sort(self, key: str) -> None:
        """Sort by `key`, flipping direction when it is already the active key."""
        if self._fields is not None and key not in self._fields:
            raise ValueError(f"Unknown sort key '{key}' (not in declared fields)")
        self._sort = toggle_sort(self._sort, key)
        self._page = 1
        self._notify()

    def clear_sort(self) -> None:
        self._sort = None
        self._page = 1
        self._notify()

    def go_to_page(self, page: int) -> None:
        """Navigate to `page`, clamped into [1, max(1, total_pages)]."""
        self._page = clamp_page(int(page), self.total_pages)
        self._notify()

    def first_page(self) -> None:
        self.go_to_page(1)

    def last_page(self) -> None:
        self.go_to_page(self.total_pages)

    def previous_page(self) -> None:
        self.go_to_page(self.current_page - 1)

    def next_page(self) -> None:
        self.go_to_page(self.current_page + 1)

    def set_page_size(self, page_size: int) -> None:
        """
        Change the page size.

        The stored page is left alone and is clamped against the new
        page count on the next read. Sizes below 1 are clamped to 1.
        """
        if page_size < 1:
            logger.warning(f"Invalid page size {page_size}, using 1")
            page_size = 1
        self._page_size = int(page_size)
        self._notify()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _search_key(self) -> tuple:
        return (self._records_version, self._search.value, self._searchable_fields)

    def _filter_key(self) -> tuple:
        return (self._search_key(), self._filters_version)

    def _sort_key(self) -> tuple:
        return (self._filter_key(), self._sort)

    def _searched(self) -> Sequence[R]:
        return self._search_memo.get(
            self._search_key(),
            lambda: search_records(self._records, self._search.value, self._searchable_fields),
        )

    def _filtered(self) -> Sequence[R]:
        searched = self._searched()
        return self._filter_memo.get(
            self._filter_key(),
            lambda: filter_records(searched, self._filter_configs, self._filters),
        )

    def _sorted(self) -> Sequence[R]:
        filtered = self._filtered()
        return self._sort_memo.get(self._sort_key(), lambda: sort_records(filtered, self._sort))

    def _page_result(self) -> Page[R]:
        sorted_records = self._sorted()
        page = clamp_page(self._page, total_pages_for(len(sorted_records), self._page_size))
        return self._page_memo.get(
            (self._sort_key(), page, self._page_size),
            lambda: paginate(sorted_records, page, self._page_size),
        )

    @property
    def stage_runs(self) -> Dict[str, int]:
        """How many times each stage has actually been computed."""
        return {
            memo.name: memo.runs
            for memo in (self._search_memo, self._filter_memo, self._sort_memo, self._page_memo)
        }

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    @property
    def records(self) -> Tuple[R, ...]:
        return self._records

    @property
    def page_items(self) -> List[R]:
        return self._page_result().items

    @property
    def window(self) -> PageWindow:
        return self._page_result().window

    @property
    def total_items(self) -> int:
        return len(self._sorted())

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total_items, self._page_size)

    @property
    def current_page(self) -> int:
        return clamp_page(self._page, self.total_pages)

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def start_item(self) -> int:
        return self.window.start_item

    @property
    def end_item(self) -> int:
        return self.window.end_item

    @property
    def search_term(self) -> str:
        """Raw search term as last set (not yet debounced)."""
        return self._search_term

    @property
    def effective_search_term(self) -> str:
        """Search term the pipeline is currently using."""
        return self._search.value

    @property
    def search_pending(self) -> bool:
        return self._search.is_pending

    @property
    def filters(self) -> Dict[str, Any]:
        return dict(self._filters)

    @property
    def filter_configs(self) -> Tuple[FilterDefinition, ...]:
        return self._filter_configs

    @property
    def searchable_fields(self) -> Tuple[str, ...]:
        return self._searchable_fields

    @property
    def sort_config(self) -> Optional[SortSpec]:
        return self._sort

    @property
    def metrics(self) -> ViewMetrics:
        return compute_metrics(self._filters, self._search_term, self.total_items, len(self._records))

    @property
    def active_filters_count(self) -> int:
        return self.metrics.active_filters_count

    @property
    def is_filtered(self) -> bool:
        return self.metrics.is_filtered

    @property
    def has_data(self) -> bool:
        return self.total_items > 0

    @property
    def is_empty(self) -> bool:
        return len(self._records) == 0

    def snapshot(self) -> ViewResult:
        """Current page plus every derived value, as one immutable model."""
        result = self._page_result()
        return ViewResult(
            items=[dict(item) for item in result.items],
            window=result.window,
            search_term=self._search_term,
            effective_search_term=self._search.value,
            filters=dict(self._filters),
            sort_config=self._sort,
            metrics=self.metrics,
        )

    def fetch_params(self) -> FetchParams:
        """
        Express the current state as listing parameters for a remote source.

        Uses the settled search term so a remote source is queried at most
        once per debounce window.
        """
        return FetchParams(
            page=self.current_page,
            limit=self._page_size,
            search=self._search.value or None,
            sort_by=self._sort.key if self._sort else None,
            sort_order=self._sort.direction if self._sort else None,
            filters=dict(self._filters),
        )
