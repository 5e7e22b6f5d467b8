"""Pagination stage: page-sized windows over the sorted result."""

from typing import Any, Generic, List, Mapping, Sequence, TypeVar

from pydantic import BaseModel

R = TypeVar("R", bound=Mapping[str, Any])


class PageWindow(BaseModel):
    """Display bounds of one page (startItem/endItem are 1-based and inclusive)."""

    current_page: int
    page_size: int
    total_items: int
    total_pages: int
    start_item: int
    end_item: int

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def total_pages_for(total_items: int, page_size: int) -> int:
    """ceil(total_items / page_size); 0 for an empty result."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return -(-total_items // page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a requested page into [1, max(1, total_pages)]."""
    return max(1, min(page, max(1, total_pages)))


def page_window(current_page: int, page_size: int, total_items: int) -> PageWindow:
    """Compute display bounds for the clamped current page."""
    total_pages = total_pages_for(total_items, page_size)
    page = clamp_page(current_page, total_pages)
    if total_items == 0:
        start_item = end_item = 0
    else:
        start_item = (page - 1) * page_size + 1
        end_item = min(page * page_size, total_items)
    return PageWindow(
        current_page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
        start_item=start_item,
        end_item=end_item,
    )


class Page(Generic[R]):
    """Items of one page plus its window."""

    def __init__(self, items: List[R], window: PageWindow):
        self.items = items
        self.window = window

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def paginate(records: Sequence[R], current_page: int, page_size: int) -> Page[R]:
    """
    Slice records to [(page-1)*size, page*size) after clamping the page.

    Args:
        records: Sorted records
        current_page: Requested 1-based page (clamped, never an error)
        page_size: Positive page size

    Returns:
        Page with the sliced items and its window
    """
    window = page_window(current_page, page_size, len(records))
    items = list(records[window.offset:window.offset + page_size])
    return Page(items, window)
