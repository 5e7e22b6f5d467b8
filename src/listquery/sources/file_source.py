"""Record source reading a JSON, YAML or CSV file."""

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..utils.logging import get_logger
from .base import FetchParams, RecordSourceError

logger = get_logger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml", ".csv")


def _as_record_list(payload: Any, path: Path) -> List[Dict[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        raise RecordSourceError(f"{path} does not contain a record list")
    return [row for row in payload if isinstance(row, dict)]


class FileRecordSource:
    """Loads a record collection from a local file; listing params are ignored."""

    def __init__(self, path: Path):
        self.path = Path(path)
        if self.path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise ValueError(f"Unsupported record file type: {self.path.suffix}")

    def fetch_records(self, params: Optional[FetchParams] = None) -> List[Dict[str, Any]]:
        if not self.path.exists():
            raise FileNotFoundError(f"Record file not found: {self.path}")

        suffix = self.path.suffix.lower()
        with self.path.open("r", encoding="utf-8", newline="") as f:
            if suffix == ".csv":
                records = [dict(row) for row in csv.DictReader(f)]
            elif suffix == ".json":
                try:
                    records = _as_record_list(json.load(f), self.path)
                except json.JSONDecodeError as e:
                    raise RecordSourceError(f"Invalid JSON in {self.path}: {e}") from e
            else:
                records = _as_record_list(yaml.safe_load(f), self.path)

        logger.debug(f"Loaded {len(records)} records from {self.path}")
        return records
