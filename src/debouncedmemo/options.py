"""Debounce options: how long to wait and when to compute.

A bare number is shorthand for DebounceOptions(delay=number). Mappings use the
keys "delay" (required) and "lazy" (default False).
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from numbers import Real
from typing import Mapping, Union

from debouncedmemo.errors import MisuseError

DEFAULT_DELAY_MS = 300


class Policy(enum.Enum):
    """When the factory runs relative to the quiet period."""

    EAGER = "eager"  # compute on change, publish after the quiet period
    LAZY = "lazy"  # compute and publish after the quiet period


@dataclass(frozen=True)
class DebounceOptions:
    """Validated debounce configuration.

    Attributes:
        delay: Quiet period in milliseconds. Must be finite and >= 0.
        lazy: Defer the factory call until the timer fires.
    """

    delay: float = DEFAULT_DELAY_MS
    lazy: bool = False

    def __post_init__(self) -> None:
        delay = self.delay
        if isinstance(delay, bool) or not isinstance(delay, Real):
            raise MisuseError(f"delay must be a number of milliseconds, got {delay!r}")
        if not math.isfinite(delay) or delay < 0:
            raise MisuseError(f"delay must be finite and >= 0, got {delay!r}")
        if not isinstance(self.lazy, bool):
            raise MisuseError(f"lazy must be a bool, got {self.lazy!r}")

    @property
    def policy(self) -> Policy:
        return Policy.LAZY if self.lazy else Policy.EAGER


OptionsLike = Union[float, int, DebounceOptions, Mapping[str, object]]


def resolve_options(options: OptionsLike) -> DebounceOptions:
    """Normalize a number, mapping or DebounceOptions into DebounceOptions."""
    if isinstance(options, DebounceOptions):
        return options
    if isinstance(options, Mapping):
        unknown = set(options) - {"delay", "lazy"}
        if unknown:
            raise MisuseError(f"unknown debounce options: {sorted(unknown)}")
        if "delay" not in options:
            raise MisuseError("debounce options require a 'delay'")
        return DebounceOptions(delay=options["delay"], lazy=options.get("lazy", False))
    return DebounceOptions(delay=options)
