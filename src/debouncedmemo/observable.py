"""Observable — the state cell a debounce controller commits into.

Reading an Observable inside a reaction registers the dependency; writing a
different value schedules every reaction that read it. Values compare as
unchanged when they are identical or equal.

All state lives in _anchor — instances are thin handles holding an _id.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from debouncedmemo import _anchor
from debouncedmemo._tracking import current_derivation, schedule

T = TypeVar("T")


class Observable(Generic[T]):
    """A single observable value with automatic dependency tracking."""

    __slots__ = ("_id",)

    def __init__(self, value: T) -> None:
        self._id = _anchor.new_id()
        _anchor.values[self._id] = value
        _anchor.observers[self._id] = set()

    def get(self) -> T:
        """Read the value. If inside a reaction, registers the dependency."""
        derivation = current_derivation.get()
        if derivation is not None:
            _anchor.observers[self._id].add(derivation)
            derivation._dependencies.add(self)
        return _anchor.values[self._id]

    def peek(self) -> T:
        """Read the value without registering a dependency."""
        return _anchor.values[self._id]

    def set(self, value: T) -> None:
        old = _anchor.values[self._id]
        if old is value or old == value:
            return
        _anchor.values[self._id] = value
        for observer in list(_anchor.observers[self._id]):
            schedule(observer)

    def _remove_observer(self, observer) -> None:
        _anchor.observers[self._id].discard(observer)

    def __repr__(self) -> str:
        return f"Observable({_anchor.values[self._id]!r})"
