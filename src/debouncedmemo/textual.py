"""Textual integration for debouncedmemo. Opt-in — requires textual.

TextualScheduler arms timers with App.set_timer, so commits run on the app's
event loop alongside its message handlers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable, TypeVar

from textual.timer import Timer

from debouncedmemo.memo import DebouncedMemo, debounced_memo as _debounced_memo
from debouncedmemo.options import DEFAULT_DELAY_MS, OptionsLike
from debouncedmemo.scheduler import Callback, TimerHandle, run_handle

if TYPE_CHECKING:
    from textual.app import App

logger = logging.getLogger("debouncedmemo.textual")

T = TypeVar("T")


class TextualScheduler:
    """Scheduler backed by a Textual app's timers."""

    def __init__(self, app: App) -> None:
        self._app = app

    def schedule(self, callback: Callback, delay_ms: float) -> TimerHandle:
        handle = TimerHandle(callback, delay_ms)
        timer: Timer = self._app.set_timer(delay_ms / 1000.0, lambda: run_handle(handle))
        handle._native = timer
        logger.debug("Armed app timer for %sms", delay_ms)
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        if not handle.active:
            return
        handle.cancelled = True
        handle._native.stop()
        logger.debug("Stopped app timer (%sms)", handle.delay_ms)


def debounced_memo(
    app: App,
    factory: Callable[[], T],
    deps_fn: Callable[[], Iterable[object]],
    options: OptionsLike = DEFAULT_DELAY_MS,
) -> DebouncedMemo[T]:
    """debounced_memo() whose timers run on app's event loop."""
    return _debounced_memo(factory, deps_fn, options, scheduler=TextualScheduler(app))
