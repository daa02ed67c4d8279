"""Delayed-callback primitives a DebounceController arms its timer with.

Every scheduler implements the same two calls:

    handle = scheduler.schedule(callback, delay_ms)
    scheduler.cancel(handle)    # idempotent, also fine after the callback ran

ThreadScheduler runs timers on daemon threads. Call set_dispatcher() once from
the main/UI thread (e.g. set_dispatcher(app.call_from_thread)) and fires are
marshalled back onto that thread, so controllers only ever run on one thread.
AsyncioScheduler uses the running event loop. ManualScheduler keeps a virtual
clock that only moves when advance() is called.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger("debouncedmemo.scheduler")

Callback = Callable[[], None]


class TimerHandle:
    """A single armed callback. Returned by schedule(), accepted by cancel()."""

    __slots__ = ("callback", "delay_ms", "cancelled", "fired", "_native")

    def __init__(self, callback: Callback, delay_ms: float) -> None:
        self.callback = callback
        self.delay_ms = delay_ms
        self.cancelled = False
        self.fired = False
        self._native = None

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "fired" if self.fired else "armed"
        return f"TimerHandle({self.delay_ms}ms, {state})"


class Scheduler(Protocol):
    def schedule(self, callback: Callback, delay_ms: float) -> TimerHandle: ...

    def cancel(self, handle: TimerHandle) -> None: ...


def run_handle(handle: TimerHandle) -> None:
    """Invoke handle's callback unless it was cancelled in the meantime."""
    if not handle.active:
        return
    handle.fired = True
    logger.debug("Timer fired after %sms", handle.delay_ms)
    handle.callback()


# ─── Thread timers ───────────────────────────────────────────────────────────
_dispatcher = None
_dispatcher_thread = None


def set_dispatcher(dispatcher: Callable[[Callback], object] | None) -> None:
    """Route ThreadScheduler fires through dispatcher, called from the host thread.

    Call once from the main/UI thread:
        debouncedmemo.set_dispatcher(app.call_from_thread)

    Pass None to go back to firing directly on the timer thread.
    """
    global _dispatcher, _dispatcher_thread
    _dispatcher = dispatcher
    _dispatcher_thread = threading.current_thread() if dispatcher is not None else None


class ThreadScheduler:
    """threading.Timer based scheduler (daemon threads)."""

    def schedule(self, callback: Callback, delay_ms: float) -> TimerHandle:
        handle = TimerHandle(callback, delay_ms)
        timer = threading.Timer(delay_ms / 1000.0, self._fire, args=[handle])
        timer.daemon = True
        handle._native = timer
        timer.start()
        logger.debug("Armed thread timer for %sms", delay_ms)
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        if not handle.active:
            return
        handle.cancelled = True
        handle._native.cancel()
        logger.debug("Cancelled thread timer (%sms)", handle.delay_ms)

    def _fire(self, handle: TimerHandle) -> None:
        dispatcher = _dispatcher
        if dispatcher is not None and threading.current_thread() is not _dispatcher_thread:
            # Re-checked on the host thread: a cancel may land before the dispatch runs.
            dispatcher(lambda: run_handle(handle))
        else:
            run_handle(handle)


# ─── asyncio ─────────────────────────────────────────────────────────────────
class AsyncioScheduler:
    """loop.call_later based scheduler.

    Without an explicit loop, schedule() must be called while a loop is running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, callback: Callback, delay_ms: float) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        handle = TimerHandle(callback, delay_ms)
        handle._native = loop.call_later(delay_ms / 1000.0, run_handle, handle)
        logger.debug("Armed loop timer for %sms", delay_ms)
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        if not handle.active:
            return
        handle.cancelled = True
        handle._native.cancel()
        logger.debug("Cancelled loop timer (%sms)", handle.delay_ms)


# ─── Virtual clock ───────────────────────────────────────────────────────────
class ManualScheduler:
    """Deterministic scheduler driven by advance(). Times are in milliseconds.

    Callbacks due at the same instant fire in the order they were armed.
    Exceptions raised by a callback propagate out of advance()/run_all(); timers
    that were not yet reached stay armed.

    Usage:
        clock = ManualScheduler()
        ctl = DebounceController(compute, [query], 300, scheduler=clock)
        ctl.notify(compute, [new_query], 300)
        clock.advance(300)   # commit happens here
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._seq = itertools.count()
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self.scheduled_count = 0

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, handle in self._queue if handle.active)

    def schedule(self, callback: Callback, delay_ms: float) -> TimerHandle:
        handle = TimerHandle(callback, delay_ms)
        heapq.heappush(self._queue, (self._now + delay_ms, next(self._seq), handle))
        self.scheduled_count += 1
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        if handle.active:
            handle.cancelled = True

    def advance(self, ms: float) -> None:
        """Move the clock forward by ms, firing every timer that comes due."""
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = due
            run_handle(handle)
        self._now = target

    def run_all(self) -> None:
        """Fire timers until none remain, including ones armed while firing."""
        while self._queue:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = max(self._now, due)
            run_handle(handle)


# ─── Process-wide default ────────────────────────────────────────────────────
_default_scheduler: Scheduler | None = None


def set_default_scheduler(scheduler: Scheduler | None) -> None:
    """Scheduler used by controllers created without one. None restores the default."""
    global _default_scheduler
    _default_scheduler = scheduler


def get_default_scheduler() -> Scheduler:
    global _default_scheduler
    if _default_scheduler is None:
        _default_scheduler = ThreadScheduler()
    return _default_scheduler
