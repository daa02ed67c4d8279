"""Exception types raised by debouncedmemo itself.

Exceptions raised by a factory are never wrapped; they propagate as-is from
whichever call ran the factory.
"""


class DebounceError(Exception):
    """Base class for errors raised by debouncedmemo."""


class MisuseError(DebounceError, ValueError):
    """Invalid configuration or an operation the controller does not support."""
