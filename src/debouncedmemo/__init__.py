"""debouncedmemo: values that settle after a quiet period, for reactive UI state."""

from importlib.metadata import version as _version

__version__ = _version("debouncedmemo")

from debouncedmemo._tracking import get_pending_count, untracked
from debouncedmemo.errors import DebounceError, MisuseError
from debouncedmemo.options import DebounceOptions, Policy, resolve_options
from debouncedmemo.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    ThreadScheduler,
    TimerHandle,
    get_default_scheduler,
    set_default_scheduler,
    set_dispatcher,
)
from debouncedmemo.observable import Observable
from debouncedmemo.reaction import Reaction, autorun, reaction
from debouncedmemo.action import action, transaction
from debouncedmemo.controller import DebounceController
from debouncedmemo.memo import DebouncedMemo, debounced_memo
# textual NOT auto-imported — opt-in only

__all__ = [
    "DebounceController",
    "DebouncedMemo",
    "debounced_memo",
    "DebounceOptions",
    "Policy",
    "resolve_options",
    "DebounceError",
    "MisuseError",
    "Scheduler",
    "TimerHandle",
    "ThreadScheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "get_default_scheduler",
    "set_default_scheduler",
    "set_dispatcher",
    "Observable",
    "Reaction",
    "autorun",
    "reaction",
    "action",
    "transaction",
    "untracked",
    "get_pending_count",
]
