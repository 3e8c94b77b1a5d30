"""
Interval timers - schedule(interval_ms, callback) -> CancelHandle.

AsyncioScheduler runs on a real event loop. ManualScheduler keeps a
virtual clock that the caller advances, so ticks are deterministic
(tests, offline GIF export).

Neither scheduler ever runs two ticks at once, and neither cancels an
interval because its callback raised.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple


logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]
ErrorHandler = Callable[[BaseException], None]


class CancelHandle:
    """Deregisters a scheduled interval. Idempotent; also a context manager."""

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None):
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()

    def __call__(self) -> None:
        self.cancel()

    def __enter__(self) -> "CancelHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()


def _log_tick_error(error: BaseException) -> None:
    logger.error("[Timer] Tick failed: %s", error, exc_info=error)


def _check_interval(interval_ms: float) -> None:
    if interval_ms <= 0:
        raise ValueError(f"interval_ms must be positive, got {interval_ms}")


class _AsyncioInterval:
    """One repeating interval on an asyncio loop (setInterval semantics)."""

    def __init__(self, loop, interval_ms: float, callback: TickCallback, on_error: ErrorHandler):
        self._loop = loop
        self._delay = interval_ms / 1000.0
        self._callback = callback
        self._on_error = on_error
        self._timer: Optional[asyncio.TimerHandle] = None
        self._cancelled = False

    def arm(self) -> None:
        self._timer = self._loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Re-arm first so a failing tick keeps the interval alive
        self.arm()
        try:
            self._callback()
        except Exception as e:
            self._on_error(e)


class AsyncioScheduler:
    """
    Interval timers on an asyncio event loop.

    Tick exceptions go to on_error (default: logged with traceback).
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        on_error: Optional[ErrorHandler] = None,
    ):
        self._loop = loop
        self._on_error = on_error or _log_tick_error

    def schedule(self, interval_ms: float, callback: TickCallback) -> CancelHandle:
        _check_interval(interval_ms)
        loop = self._loop or asyncio.get_running_loop()
        interval = _AsyncioInterval(loop, interval_ms, callback, self._on_error)
        interval.arm()
        logger.debug("[Timer] Scheduled %s every %sms", getattr(callback, "__name__", callback), interval_ms)
        return CancelHandle(interval.cancel)


class ManualScheduler:
    """
    Virtual-clock scheduler. Nothing fires until advance() is called.

    Tick exceptions propagate out of advance(); the interval stays
    registered and fires again on later advances. The clock stops at
    the failing tick.
    """

    def __init__(self):
        self.now_ms: float = 0.0
        self._seq = itertools.count()
        # (due_ms, seq, interval_id)
        self._queue: List[Tuple[float, int, int]] = []
        self._intervals = {}

    @property
    def active(self) -> int:
        """Number of intervals still registered."""
        return len(self._intervals)

    def schedule(self, interval_ms: float, callback: TickCallback) -> CancelHandle:
        _check_interval(interval_ms)
        interval_id = next(self._seq)
        self._intervals[interval_id] = (interval_ms, callback)
        heapq.heappush(self._queue, (self.now_ms + interval_ms, interval_id, interval_id))
        return CancelHandle(lambda: self._intervals.pop(interval_id, None))

    def next_due(self) -> Optional[float]:
        """Virtual time of the next live tick, or None."""
        while self._queue and self._queue[0][2] not in self._intervals:
            heapq.heappop(self._queue)
        return self._queue[0][0] if self._queue else None

    def advance(self, ms: float) -> int:
        """Move the clock forward ms, firing due ticks in order. Returns ticks fired."""
        target = self.now_ms + ms
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            _, _, interval_id = heapq.heappop(self._queue)
            interval_ms, callback = self._intervals[interval_id]
            self.now_ms = due
            heapq.heappush(self._queue, (due + interval_ms, next(self._seq), interval_id))
            fired += 1
            callback()
        self.now_ms = target
        return fired
