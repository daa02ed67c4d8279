"""Data anchor — plain Python structures that hold all reactive state.

Observables, reactions and debounce controllers are thin handles holding an
_id; everything they own lives here, keyed by that id.
"""

import itertools

# Observable state
values: dict[int, object] = {}
observers: dict[int, set] = {}  # obs_id -> set of derivations

# Reaction state
dependencies: dict[int, set] = {}  # deriv_id -> set of observables
derivation_fns: dict[int, object] = {}  # deriv_id -> callable
disposed: dict[int, bool] = {}  # reactions and controllers

# Debounce controller state
factories: dict[int, object] = {}  # ctl_id -> latest factory
eager_values: dict[int, object] = {}  # ctl_id -> precomputed value (eager only)
snapshots: dict[int, tuple] = {}  # ctl_id -> last observed dependency snapshot
delays: dict[int, float] = {}  # ctl_id -> delay in ms
lazy_flags: dict[int, bool] = {}
pending: dict[int, object] = {}  # ctl_id -> live timer handle or None

_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def release(obj_id: int) -> None:
    """Drop every entry owned by obj_id. Missing keys are ignored."""
    for table in (
        values, observers, dependencies, derivation_fns, disposed,
        factories, eager_values, snapshots, delays, lazy_flags, pending,
    ):
        table.pop(obj_id, None)
