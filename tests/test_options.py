"""Tests for option parsing and validation."""

import math

import pytest

from debouncedmemo import DebounceOptions, MisuseError, Policy, resolve_options


class TestResolveOptions:
    def test_bare_number_is_eager_delay(self):
        opts = resolve_options(250)
        assert opts == DebounceOptions(delay=250, lazy=False)
        assert opts.policy is Policy.EAGER

    def test_float_delay(self):
        assert resolve_options(12.5).delay == 12.5

    def test_mapping(self):
        opts = resolve_options({"delay": 100, "lazy": True})
        assert opts.delay == 100
        assert opts.policy is Policy.LAZY

    def test_mapping_lazy_defaults_false(self):
        assert resolve_options({"delay": 100}).lazy is False

    def test_options_passthrough(self):
        opts = DebounceOptions(delay=10, lazy=True)
        assert resolve_options(opts) is opts

    def test_default_delay(self):
        assert DebounceOptions().delay == 300

    def test_zero_delay_allowed(self):
        assert resolve_options(0).delay == 0


class TestValidation:
    @pytest.mark.parametrize("delay", [-1, -0.5, math.inf, math.nan, "300", None, True])
    def test_bad_delay(self, delay):
        with pytest.raises(MisuseError):
            resolve_options(delay)

    def test_missing_delay(self):
        with pytest.raises(MisuseError, match="require a 'delay'"):
            resolve_options({"lazy": True})

    def test_unknown_key(self):
        with pytest.raises(MisuseError, match="unknown debounce options"):
            resolve_options({"delay": 1, "leading": True})

    def test_lazy_must_be_bool(self):
        with pytest.raises(MisuseError):
            resolve_options({"delay": 1, "lazy": "yes"})

    def test_misuse_is_value_error(self):
        with pytest.raises(ValueError):
            DebounceOptions(delay=-5)
