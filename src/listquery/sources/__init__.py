from .base import FetchParams, RecordSource, RecordSourceError
from .file_source import FileRecordSource
from .http_source import ApiRecordSource
from .sql_source import SqlRecordSource

__all__ = [
    "ApiRecordSource",
    "FetchParams",
    "FileRecordSource",
    "RecordSource",
    "RecordSourceError",
    "SqlRecordSource",
]
