"""Record source protocol and the listing parameters sent to remote sources."""

from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from ..config.models import SortDirection
from ..filters.engine import is_empty_filter_value
from ..utils.time import parse_timestamp, to_utc_z


class RecordSourceError(RuntimeError):
    """Raised when a record source cannot deliver its collection."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FetchParams(BaseModel):
    """Listing parameters understood by the CRUD API's list endpoints."""

    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[SortDirection] = None
    filters: Dict[str, Any] = Field(default_factory=dict)

    def to_query_params(self) -> Dict[str, str]:
        """
        Render as query-string parameters.

        Names follow the API (page, limit, search, sortBy, sortOrder); filters
        are appended by key and empty filter values are skipped.
        """
        params: Dict[str, str] = {}
        if self.page:
            params["page"] = str(self.page)
        if self.limit:
            params["limit"] = str(self.limit)
        if self.search:
            params["search"] = self.search
        if self.sort_by:
            params["sortBy"] = self.sort_by
        if self.sort_order:
            params["sortOrder"] = self.sort_order.value
        for key, value in self.filters.items():
            if is_empty_filter_value(value):
                continue
            params[key] = _format_param(value)
        return params


def _format_param(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(_format_param(v) for v in value)
    if isinstance(value, date):
        return to_utc_z(parse_timestamp(value))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class RecordSource(Protocol):
    """Supplies the raw record collection a list view queries."""

    def fetch_records(self, params: Optional[FetchParams] = None) -> List[Dict[str, Any]]:
        ...
