from .loader import get_view_config, list_view_names, load_views_config
from .models import FilterDefinition, FilterKind, FilterOption, SortDirection, SortSpec, ViewConfig

__all__ = [
    "FilterDefinition",
    "FilterKind",
    "FilterOption",
    "SortDirection",
    "SortSpec",
    "ViewConfig",
    "get_view_config",
    "list_view_names",
    "load_views_config",
]
