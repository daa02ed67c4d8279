"""Dependency snapshots and the shallow change-detection rule.

A snapshot is a tuple of opaque tokens. Two snapshots are the same when they
have the same arity and every slot holds an identical or equal token. The
container is irrelevant: [1, "a"] and (1, "a") are the same snapshot.
"""

from __future__ import annotations

from typing import Iterable


def freeze(deps: Iterable[object]) -> tuple:
    if isinstance(deps, (str, bytes)):
        # A bare string would otherwise become one slot per character.
        return (deps,)
    return tuple(deps)


def same_token(a: object, b: object) -> bool:
    return a is b or a == b


def snapshot_changed(prev: tuple | None, cur: tuple) -> bool:
    """True when cur differs from prev. A missing prev always counts as changed."""
    if prev is None or len(prev) != len(cur):
        return True
    return not all(same_token(a, b) for a, b in zip(prev, cur))
