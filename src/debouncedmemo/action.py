"""Actions and transactions — batched observable mutations.

Changing several inputs of a debounced memo inside one transaction produces a
single snapshot change, and so a single notify, when the outermost scope exits.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Callable, ParamSpec, TypeVar

from debouncedmemo._tracking import begin_batch, end_batch

P = ParamSpec("P")
R = TypeVar("R")


def action(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: batch all observable mutations inside fn.

    Usage:
        results = debounced_memo(run_search, lambda: [query.get(), page.get()])

        @action
        def new_search(text):
            query.set(text)
            page.set(0)
            # results sees one snapshot change and arms one timer
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        begin_batch()
        try:
            return fn(*args, **kwargs)
        finally:
            end_batch()

    return wrapper


@contextmanager
def transaction():
    """Context manager for batching mutations.

    Usage:
        with transaction():
            query.set("abc")
            page.set(0)
            # one notify, after both are set
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()
