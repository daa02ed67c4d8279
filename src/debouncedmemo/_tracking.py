"""Dependency tracking and batching for the reactive host layer.

A contextvar holds the reaction currently evaluating; any Observable.get()
made while it is set registers itself as a dependency of that reaction.

Mutations inside `transaction()` accumulate scheduled reactions and flush them
once when the outermost scope exits, so a host update cycle that changes
several inputs produces a single notify.
"""

from __future__ import annotations

import contextvars
from typing import TYPE_CHECKING, Callable, TypeVar

if TYPE_CHECKING:
    from debouncedmemo.reaction import Reaction

T = TypeVar("T")

current_derivation: contextvars.ContextVar[Reaction | None] = contextvars.ContextVar(
    "current_derivation", default=None
)

_batch_depth: int = 0

# Insertion-ordered so reactions flush in the order they were scheduled.
_pending: dict[Reaction, None] = {}


def begin_batch() -> None:
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        _flush_pending()


def schedule(derivation: Reaction) -> None:
    """Run a derivation now, or defer it to the end of the current batch."""
    if _batch_depth > 0:
        _pending[derivation] = None
    else:
        derivation._run()


def _flush_pending() -> None:
    while _pending:
        batch = list(_pending)
        _pending.clear()
        for derivation in batch:
            derivation._run()


def untracked(fn: Callable[[], T]) -> T:
    """Call fn without registering its reads on the current derivation."""
    token = current_derivation.set(None)
    try:
        return fn()
    finally:
        current_derivation.reset(token)


def get_pending_count() -> int:
    """Number of reactions waiting for the current batch to end. Useful for testing."""
    return len(_pending)
