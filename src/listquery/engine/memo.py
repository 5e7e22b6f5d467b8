"""One-slot memo for pipeline stages."""

from typing import Callable, Generic, Hashable, Optional, TypeVar

from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_UNSET = object()


class StageMemo(Generic[T]):
    """
    Caches the last output of a pure stage against the tuple of its inputs.

    The stage recomputes only when the key differs from the previous one.
    """

    def __init__(self, name: str):
        self.name = name
        self.runs = 0
        self._key: object = _UNSET
        self._value: Optional[T] = None

    def get(self, key: Hashable, compute: Callable[[], T]) -> T:
        if self._key is not _UNSET and self._key == key:
            return self._value  # type: ignore[return-value]
        self._value = compute()
        self._key = key
        self.runs += 1
        logger.debug(f"Recomputed {self.name} stage (run {self.runs})")
        return self._value
