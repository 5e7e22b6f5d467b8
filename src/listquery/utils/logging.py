"""Logging helpers shared by every listquery module."""

import logging
import os
from typing import Dict, Optional

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_LOGGER_CACHE: Dict[str, logging.Logger] = {}


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once for CLI runs.

    Args:
        level: Level name (DEBUG, INFO, ...). Defaults to $LISTQUERY_LOG_LEVEL or WARNING.
    """
    level_name = (level or os.environ.get("LISTQUERY_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.WARNING), format=LOG_FORMAT)


def get_logger(name: str = "listquery") -> logging.Logger:
    """Return a cached :class:`logging.Logger` instance."""
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = logging.getLogger(name)
    return _LOGGER_CACHE[name]
