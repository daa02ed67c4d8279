"""DebounceController — a value that only updates after a quiet period.

The host calls notify() once per update cycle with the current factory, the
current dependency snapshot and the options. When the snapshot (or the delay)
changed, the pending timer is cancelled and a new one armed; when it fires,
the new value is committed and becomes visible through get().

Eager policy (default) runs the factory at change time and only delays the
commit. Lazy policy runs the factory when the timer fires, using whichever
factory was passed to the most recent notify().

notify(), the timer fire and dispose() serialize on a per-controller lock, so a
timer thread firing while the host is inside notify() cannot commit a value
whose quiet period has not elapsed.

All state lives in _anchor — instances are thin handles holding an _id.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, Iterable, TypeVar

from debouncedmemo import _anchor
from debouncedmemo._snapshot import freeze, snapshot_changed
from debouncedmemo.errors import MisuseError
from debouncedmemo.observable import Observable
from debouncedmemo.options import (
    DEFAULT_DELAY_MS,
    DebounceOptions,
    OptionsLike,
    Policy,
    resolve_options,
)
from debouncedmemo.scheduler import Scheduler, TimerHandle, get_default_scheduler

T = TypeVar("T")

Factory = Callable[[], T]


class _PendingCommit:
    """Identity token for one armed timer; wraps the scheduler's handle."""

    __slots__ = ("handle",)

    def __init__(self) -> None:
        self.handle: TimerHandle | None = None


class DebounceController(Generic[T]):
    """Owns one committed value and at most one pending timer.

    Usage:
        ctl = DebounceController(lambda: search(query), [query], 300)
        ...
        ctl.notify(lambda: search(query), [query], 300)   # every update cycle
        ctl.get()                                           # committed result
        ctl.dispose()                                       # on teardown
    """

    __slots__ = ("_id", "_value", "_scheduler", "_lock")

    def __init__(
        self,
        factory: Factory[T],
        deps: Iterable[object] = (),
        options: OptionsLike = DEFAULT_DELAY_MS,
        *,
        scheduler: Scheduler | None = None,
    ) -> None:
        opts = resolve_options(options)
        snapshot = freeze(deps)
        initial = factory()

        self._id = _anchor.new_id()
        self._value: Observable[T] = Observable(initial)
        self._scheduler = scheduler or get_default_scheduler()
        # Reentrant: a commit may run reactions that notify this controller again.
        self._lock = threading.RLock()
        _anchor.factories[self._id] = factory
        _anchor.eager_values[self._id] = initial
        _anchor.snapshots[self._id] = snapshot
        _anchor.delays[self._id] = opts.delay
        _anchor.lazy_flags[self._id] = opts.lazy
        _anchor.pending[self._id] = None
        _anchor.disposed[self._id] = False

    # --- Reads ---

    def get(self) -> T:
        """The committed value. Inside a reaction, registers the dependency."""
        return self._value.get()

    def peek(self) -> T:
        """The committed value, without dependency tracking."""
        return self._value.peek()

    @property
    def policy(self) -> Policy:
        self._ensure_live()
        return Policy.LAZY if _anchor.lazy_flags[self._id] else Policy.EAGER

    @property
    def delay(self) -> float:
        self._ensure_live()
        return _anchor.delays[self._id]

    @property
    def pending(self) -> bool:
        """True while a timer is armed and has not fired."""
        return _anchor.pending.get(self._id) is not None

    @property
    def disposed(self) -> bool:
        return _anchor.disposed[self._id]

    def _ensure_live(self) -> None:
        if _anchor.disposed[self._id]:
            raise MisuseError("DebounceController is disposed")

    # --- Host update cycle ---

    def check_options(self, options: OptionsLike) -> DebounceOptions:
        """Validate options against this controller without applying them.

        Raises MisuseError when disposed, when options are invalid, or when
        they switch between eager and lazy.
        """
        self._ensure_live()
        opts = resolve_options(options)
        if opts.lazy != _anchor.lazy_flags[self._id]:
            raise MisuseError(
                f"cannot switch policy from {self.policy.value} to {opts.policy.value}"
            )
        return opts

    def notify(
        self,
        factory: Factory[T],
        deps: Iterable[object],
        options: OptionsLike = DEFAULT_DELAY_MS,
    ) -> None:
        """Report the current inputs. Re-arms the timer only when they changed.

        Raises MisuseError as check_options() does. In eager mode, an exception
        from factory propagates and leaves the previous snapshot in place, so
        the next notify retries.
        """
        with self._lock:
            opts = self.check_options(options)
            _anchor.factories[self._id] = factory

            snapshot = freeze(deps)
            deps_changed = snapshot_changed(_anchor.snapshots[self._id], snapshot)
            delay_changed = opts.delay != _anchor.delays[self._id]
            if not deps_changed and not delay_changed:
                return

            self._cancel()
            if deps_changed and not opts.lazy:
                _anchor.eager_values[self._id] = factory()

            _anchor.snapshots[self._id] = snapshot
            _anchor.delays[self._id] = opts.delay
            self._arm(opts.delay)

    # --- Timer ---

    def _arm(self, delay: float) -> None:
        commit = _PendingCommit()
        _anchor.pending[self._id] = commit
        commit.handle = self._scheduler.schedule(lambda: self._fire(commit), delay)

    def _cancel(self) -> None:
        commit = _anchor.pending.get(self._id)
        if commit is not None:
            _anchor.pending[self._id] = None
            if commit.handle is not None:
                self._scheduler.cancel(commit.handle)

    def _fire(self, commit: _PendingCommit) -> None:
        with self._lock:
            # Only the most recently armed timer may commit.
            if _anchor.disposed.get(self._id, True) or _anchor.pending.get(self._id) is not commit:
                return
            _anchor.pending[self._id] = None
            if _anchor.lazy_flags[self._id]:
                value = _anchor.factories[self._id]()
            else:
                value = _anchor.eager_values[self._id]
            self._value.set(value)

    # --- Teardown ---

    def dispose(self) -> None:
        """Cancel the pending timer. No commit happens afterwards. Idempotent.

        The committed value stays readable through get() and peek().
        """
        with self._lock:
            if _anchor.disposed[self._id]:
                return
            self._cancel()
            _anchor.release(self._id)
            _anchor.disposed[self._id] = True
            _anchor.observers[self._value._id].clear()

    def __enter__(self) -> DebounceController[T]:
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()

    def __repr__(self) -> str:
        value = self._value.peek()
        if _anchor.disposed[self._id]:
            return f"DebounceController({value!r}, disposed)"
        state = "pending" if self.pending else "idle"
        return f"DebounceController({value!r}, {self.policy.value}, {state})"
