"""Record source backed by a JSON list endpoint of the CRUD API."""

import time
from typing import Any, Dict, List, Optional

import requests

from ..utils.logging import get_logger
from .base import FetchParams, RecordSourceError

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10
USER_AGENT = "listquery/0.1"


def _extract_records(payload: Any) -> List[Dict[str, Any]]:
    """Accept a bare JSON list or an envelope with a `data` list."""
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        raise RecordSourceError("Response does not contain a record list")
    return [row for row in payload if isinstance(row, dict)]


class ApiRecordSource:
    """Fetches records from `{base_url}{endpoint}` with optional bearer auth."""

    def __init__(
        self,
        base_url: str,
        endpoint: str,
        *,
        token: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.endpoint = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        self.token = token
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.endpoint}"

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def fetch_records(self, params: Optional[FetchParams] = None) -> List[Dict[str, Any]]:
        """
        GET the endpoint and return its records.

        Args:
            params: Optional listing parameters sent as the query string

        Returns:
            List of record dicts

        Raises:
            RecordSourceError: On transport failure, non-2xx status or a
                response that is not a record list
        """
        query = params.to_query_params() if params else {}
        start = time.monotonic()
        try:
            response = self.session.get(
                self.url,
                params=query,
                headers=self._headers(),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"API request failed for {self.endpoint}: {e}")
            raise RecordSourceError(f"Request to {self.url} failed: {e}") from e

        if not response.ok:
            message = f"HTTP {response.status_code}: {response.reason}"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("message"):
                    message = str(body["message"])
            except ValueError:
                pass
            logger.error(f"API request failed for {self.endpoint}: {message}")
            raise RecordSourceError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise RecordSourceError(f"Invalid JSON from {self.url}") from e

        records = _extract_records(payload)
        logger.info(f"Fetched {len(records)} records from {self.endpoint} in {time.monotonic() - start:.2f}s")
        return records
