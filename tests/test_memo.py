"""Tests for debounced_memo — controllers driven by tracked observables."""

import logging

import pytest

from debouncedmemo import (
    ManualScheduler,
    MisuseError,
    Observable,
    autorun,
    debounced_memo,
    transaction,
)


def _search(query, calls):
    def _compute():
        q = query.get()
        calls.append(q)
        return q.upper()

    return _compute


class TestDebouncedMemo:
    def test_keystrokes_collapse(self):
        clock = ManualScheduler()
        query = Observable("")
        calls = []
        memo = debounced_memo(_search(query, calls), lambda: [query.get()], 300, scheduler=clock)
        renders = []
        autorun(lambda: renders.append(memo.get()))

        for text in ("a", "ab", "abc"):
            query.set(text)
            clock.advance(50)

        assert calls == ["", "a", "ab", "abc"]
        assert renders == [""]
        clock.advance(300)
        assert renders == ["", "ABC"]

    def test_lazy_runs_factory_once(self):
        clock = ManualScheduler()
        query = Observable("")
        calls = []
        memo = debounced_memo(
            _search(query, calls),
            lambda: [query.get()],
            {"delay": 300, "lazy": True},
            scheduler=clock,
        )

        for text in ("a", "ab", "abc"):
            query.set(text)
        assert calls == [""]
        clock.advance(300)
        assert calls == ["", "abc"]
        assert memo.get() == "ABC"

    def test_factory_reads_are_not_tracked(self):
        """Only deps_fn decides when the memo reschedules."""
        clock = ManualScheduler()
        query = Observable("a")
        hidden = Observable(1)
        memo = debounced_memo(
            lambda: f"{query.get()}{hidden.get()}", lambda: [query.get()], 100, scheduler=clock
        )
        query.set("b")
        hidden.set(2)
        assert clock.scheduled_count == 1
        clock.run_all()
        assert memo.get() == "b1"

    def test_transaction_notifies_once(self):
        clock = ManualScheduler()
        a = Observable(1)
        b = Observable(2)
        calls = []

        def total():
            calls.append(1)
            return a.get() + b.get()

        memo = debounced_memo(total, lambda: [a.get(), b.get()], 100, scheduler=clock)
        with transaction():
            a.set(10)
            b.set(20)

        assert len(calls) == 2
        assert clock.scheduled_count == 1
        clock.advance(100)
        assert memo.get() == 30

    def test_update_factory_without_reschedule(self):
        clock = ManualScheduler()
        query = Observable("a")
        lazy = {"delay": 100, "lazy": True}
        memo = debounced_memo(lambda: "v1", lambda: [query.get()], lazy, scheduler=clock)

        query.set("b")
        memo.update(factory=lambda: "v2")
        assert clock.scheduled_count == 1
        clock.advance(100)
        assert memo.get() == "v2"

    def test_update_delay_restarts_window(self):
        clock = ManualScheduler()
        query = Observable("a")
        memo = debounced_memo(lambda: query.get(), lambda: [query.get()], 100, scheduler=clock)

        query.set("b")
        clock.advance(50)
        memo.update(options=200)
        clock.advance(100)
        assert memo.get() == "a"
        clock.advance(100)
        assert memo.get() == "b"

    def test_factory_error_surfaces_at_mutation(self):
        clock = ManualScheduler()
        query = Observable(1)

        def parse():
            if query.get() < 0:
                raise ValueError("negative")
            return query.get()

        memo = debounced_memo(parse, lambda: [query.get()], 100, scheduler=clock)
        with pytest.raises(ValueError, match="negative"):
            query.set(-1)
        clock.run_all()
        assert memo.get() == 1

    def test_dispose_stops_tracking(self):
        clock = ManualScheduler()
        query = Observable("a")
        memo = debounced_memo(lambda: query.get(), lambda: [query.get()], 100, scheduler=clock)
        query.set("b")
        memo.dispose()
        memo.dispose()
        query.set("c")  # no longer observed, must not raise
        clock.run_all()
        assert memo.get() == "a"
        assert not memo.pending

    def test_rejected_delay_keeps_previous_options(self):
        clock = ManualScheduler()
        query = Observable("a")
        memo = debounced_memo(lambda: query.get(), lambda: [query.get()], 100, scheduler=clock)

        with pytest.raises(MisuseError, match="delay must be finite"):
            memo.update(options=-5)
        query.set("b")
        clock.advance(100)
        assert memo.get() == "b"

    def test_rejected_policy_switch_keeps_memo_running(self):
        clock = ManualScheduler()
        query = Observable("a")
        memo = debounced_memo(lambda: query.get(), lambda: [query.get()], 100, scheduler=clock)

        with pytest.raises(MisuseError, match="cannot switch policy"):
            memo.update(factory=lambda: "other", options={"delay": 100, "lazy": True})
        query.set("b")
        clock.advance(100)
        assert memo.get() == "b"

    def test_update_after_dispose(self):
        memo = debounced_memo(lambda: 0, lambda: [], 100, scheduler=ManualScheduler())
        memo.dispose()
        with pytest.raises(MisuseError):
            memo.update(factory=lambda: 1)

    def test_context_manager(self):
        clock = ManualScheduler()
        query = Observable("a")
        with debounced_memo(lambda: query.get(), lambda: [query.get()], 100, scheduler=clock) as memo:
            query.set("b")
        assert memo.controller.disposed
        assert clock.pending_count == 0

    def test_logs_lifecycle(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="debouncedmemo.memo"):
            memo = debounced_memo(lambda: 7, lambda: [], 100, scheduler=ManualScheduler())
            memo.dispose()
        assert "Created DebounceController(7" in caplog.text
        assert "Disposed" in caplog.text
