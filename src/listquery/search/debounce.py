"""Debounced input with pluggable schedulers.

A Debouncer holds the most recent raw value and a handle to one scheduled
callback. Every submit cancels that handle and arms a new one, so the settled
value only advances once input has been stable for the full delay.
"""

import asyncio
import heapq
import itertools
import threading
from typing import Any, Callable, Generic, List, Optional, Protocol, Tuple, TypeVar

from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_DEBOUNCE_SECONDS = 0.3


class CancelHandle(Protocol):
    def cancel(self) -> Any:
        ...


class Scheduler(Protocol):
    """Anything that can run a callback once after a delay and cancel it."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> CancelHandle:
        ...


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Virtual-clock scheduler: callbacks fire only when `advance` moves time past them.

    Used by tests and by synchronous drivers that want deterministic timing.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: List[Tuple[float, int, _ManualHandle, Callable[[], None]]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle()
        heapq.heappush(self._queue, (self.now + max(delay, 0.0), next(self._counter), handle, callback))
        return handle

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire every callback that became due.

        Returns:
            Number of callbacks fired
        """
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.now = due
            if handle.cancelled:
                continue
            callback()
            fired += 1
        self.now = target
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)


class ThreadingScheduler:
    """Scheduler backed by daemon threading.Timer objects."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class Debouncer(Generic[T]):
    """Delays a value until it has been held stably for `delay` seconds."""

    def __init__(
        self,
        initial: T,
        on_settle: Optional[Callable[[T], None]] = None,
        *,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        scheduler: Optional[Scheduler] = None,
    ):
        self.delay = delay
        self.value: T = initial
        self.pending: T = initial
        self._on_settle = on_settle
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._handle: Optional[CancelHandle] = None
        # Bumped on every submit/cancel; a callback armed for an older generation is stale
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def is_pending(self) -> bool:
        return self._handle is not None

    def submit(self, value: T) -> None:
        """Replace the pending value and restart the delay."""
        with self._lock:
            self._drop_handle()
            self.pending = value
            generation = self._generation
            self._handle = self._scheduler.call_later(self.delay, lambda: self._fire(generation))

    def flush(self) -> None:
        """Settle the pending value now."""
        with self._lock:
            self._drop_handle()
        self._settle()

    def cancel(self) -> None:
        """Drop the pending value; the settled value is unchanged."""
        with self._lock:
            self._drop_handle()
            self.pending = self.value

    def reset(self, value: T) -> None:
        """Cancel any pending update and settle `value` immediately."""
        with self._lock:
            self._drop_handle()
            self.pending = value
        self._settle()

    def _drop_handle(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
            changed, settled = self._apply_pending()
        self._notify(changed, settled)

    def _settle(self) -> None:
        with self._lock:
            changed, settled = self._apply_pending()
        self._notify(changed, settled)

    def _apply_pending(self) -> Tuple[bool, T]:
        # Caller holds the lock
        changed = self.value != self.pending
        self.value = self.pending
        return changed, self.value

    def _notify(self, changed: bool, settled: T) -> None:
        if changed:
            logger.debug(f"Debounced value settled: {settled!r}")
            if self._on_settle is not None:
                self._on_settle(settled)
