"""debounced_memo() — a DebounceController driven by tracked observables.

deps_fn reads the observables the value depends on and returns them as a
snapshot. A reaction over deps_fn calls notify() whenever that snapshot
changes, so callers only ever read .get() and dispose() at teardown.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Iterable, TypeVar

from debouncedmemo._snapshot import freeze
from debouncedmemo._tracking import untracked
from debouncedmemo.controller import DebounceController
from debouncedmemo.options import DEFAULT_DELAY_MS, OptionsLike
from debouncedmemo.reaction import reaction
from debouncedmemo.scheduler import Scheduler

logger = logging.getLogger("debouncedmemo.memo")

T = TypeVar("T")


class DebouncedMemo(Generic[T]):
    """Handle returned by debounced_memo()."""

    __slots__ = ("_factory", "_deps_fn", "_options", "_controller", "_reaction")

    def __init__(
        self,
        factory: Callable[[], T],
        deps_fn: Callable[[], Iterable[object]],
        options: OptionsLike,
        scheduler: Scheduler | None,
    ) -> None:
        self._factory = factory
        self._deps_fn = deps_fn
        self._options = options
        self._controller: DebounceController[T] = untracked(
            lambda: DebounceController(
                factory, freeze(deps_fn()), options, scheduler=scheduler
            )
        )
        self._reaction = reaction(lambda: freeze(self._deps_fn()), self._on_snapshot)
        logger.debug("Created %r", self._controller)

    def _on_snapshot(self, snapshot: tuple) -> None:
        untracked(lambda: self._controller.notify(self._factory, snapshot, self._options))

    @property
    def controller(self) -> DebounceController[T]:
        return self._controller

    @property
    def pending(self) -> bool:
        return self._controller.pending

    def get(self) -> T:
        """The committed value. Inside a reaction, registers the dependency."""
        return self._controller.get()

    def update(
        self,
        factory: Callable[[], T] | None = None,
        options: OptionsLike | None = None,
    ) -> None:
        """Swap in a new factory and/or options.

        A new factory alone never re-arms the timer, but a pending lazy commit
        will call it. A new delay restarts the quiet period. Options are
        validated before anything is stored; rejected options leave the memo
        running with its previous ones.
        """
        if options is not None:
            self._controller.check_options(options)
        if factory is not None:
            self._factory = factory
        if options is not None:
            self._options = options
        snapshot = untracked(lambda: freeze(self._deps_fn()))
        self._on_snapshot(snapshot)

    def dispose(self) -> None:
        """Stop tracking and cancel any pending commit. Idempotent."""
        if self._controller.disposed:
            return
        self._reaction.dispose()
        self._controller.dispose()
        logger.debug("Disposed %r", self._controller)

    def __enter__(self) -> DebouncedMemo[T]:
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return f"DebouncedMemo({self._controller!r})"


def debounced_memo(
    factory: Callable[[], T],
    deps_fn: Callable[[], Iterable[object]],
    options: OptionsLike = DEFAULT_DELAY_MS,
    *,
    scheduler: Scheduler | None = None,
) -> DebouncedMemo[T]:
    """Debounce factory's value behind the observables deps_fn reads.

    Usage:
        query = Observable("")
        results = debounced_memo(
            lambda: search(query.peek()),
            lambda: [query.get()],
            {"delay": 250, "lazy": True},
        )
        autorun(lambda: render(results.get()))   # re-renders once per quiet period
    """
    return DebouncedMemo(factory, deps_fn, options, scheduler)
