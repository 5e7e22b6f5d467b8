from .engine import Page, PageWindow, clamp_page, page_window, paginate, total_pages_for

__all__ = ["Page", "PageWindow", "clamp_page", "page_window", "paginate", "total_pages_for"]
