"""Reactions — the host side that turns observable changes into notify calls.

- autorun(fn): runs fn immediately, re-runs when any observable it read changes.
- reaction(data_fn, effect_fn): tracks data_fn and calls effect_fn with the new
  result only when that result changes.

debounced_memo() builds on reaction(): data_fn produces the dependency
snapshot, effect_fn hands it to DebounceController.notify().
"""

from __future__ import annotations

from typing import Callable, TypeVar

from debouncedmemo import _anchor
from debouncedmemo._tracking import current_derivation

T = TypeVar("T")


class Reaction:
    """A side effect that re-runs when the observables it read change."""

    __slots__ = ("_id",)

    def __init__(self, fn: Callable[[], None]) -> None:
        self._id = _anchor.new_id()
        _anchor.derivation_fns[self._id] = fn
        _anchor.dependencies[self._id] = set()
        _anchor.disposed[self._id] = False

    @property
    def _fn(self) -> Callable:
        return _anchor.derivation_fns[self._id]

    @property
    def _dependencies(self) -> set:
        return _anchor.dependencies[self._id]

    @property
    def disposed(self) -> bool:
        return _anchor.disposed.get(self._id, True)

    def _untrack(self) -> None:
        for dep in _anchor.dependencies[self._id]:
            dep._remove_observer(self)
        _anchor.dependencies[self._id].clear()

    def _evaluate(self):
        """Call the tracked function with this reaction as the current derivation."""
        self._untrack()
        token = current_derivation.set(self)
        try:
            return self._fn()
        finally:
            current_derivation.reset(token)

    def _run(self) -> None:
        if self.disposed:
            return
        self._evaluate()

    def dispose(self) -> None:
        """Stop this reaction. Safe to call more than once."""
        if self.disposed:
            return
        self._untrack()
        _anchor.release(self._id)

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else "active"
        return f"{type(self).__name__}({state})"


class _DataReaction(Reaction):
    """reaction(data_fn, effect_fn): effect fires only when data_fn's result changes."""

    __slots__ = ("_effect_fn", "_last_value")

    def __init__(self, data_fn: Callable[[], T], effect_fn: Callable[[T], None]) -> None:
        super().__init__(data_fn)
        self._effect_fn = effect_fn
        self._last_value = None

    def _run(self) -> None:
        if self.disposed:
            return
        new_value = self._evaluate()
        if new_value != self._last_value:
            self._last_value = new_value
            self._effect_fn(new_value)

    def _prime(self, fire: bool) -> None:
        new_value = self._evaluate()
        self._last_value = new_value
        if fire:
            self._effect_fn(new_value)


def autorun(fn: Callable[[], None]) -> Reaction:
    """Run fn immediately, then again whenever any observable it reads changes.

    Usage:
        query = Observable("")
        r = autorun(lambda: print(query.get()))
        query.set("abc")   # prints "abc"
        r.dispose()
    """
    r = Reaction(fn)
    r._run()
    return r


def reaction(
    data_fn: Callable[[], T],
    effect_fn: Callable[[T], None],
    *,
    fire_immediately: bool = False,
) -> Reaction:
    """Track data_fn's observables; call effect_fn when its result changes.

    data_fn always runs once up front to establish dependencies. effect_fn
    only runs for that first result when fire_immediately is set.
    """
    r = _DataReaction(data_fn, effect_fn)
    r._prime(fire_immediately)
    return r
