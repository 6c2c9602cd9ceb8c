"""Tests for deferred callbacks and the re-entrancy guard."""

from __future__ import annotations

import asyncio

import pytest

from sql_workbench.core.sync import DeferredCalls, ReentrancyGuard, SyncDirection

TAB = SyncDirection.TAB_TO_EDITOR
EDITOR = SyncDirection.EDITOR_TO_TAB


class TestDeferredCalls:
    def test_queues_without_running_loop(self):
        deferred = DeferredCalls()
        ran = []
        deferred(lambda: ran.append(1))
        assert ran == []
        assert deferred.pending == 1
        assert deferred.run_pending() == 1
        assert ran == [1]
        assert deferred.pending == 0

    def test_run_pending_includes_nested(self):
        deferred = DeferredCalls()
        ran = []

        def outer():
            ran.append("outer")
            deferred(lambda: ran.append("inner"))

        deferred(outer)
        assert deferred.run_pending() == 2
        assert ran == ["outer", "inner"]

    @pytest.mark.asyncio
    async def test_uses_event_loop_when_running(self):
        deferred = DeferredCalls()
        ran = []
        deferred(lambda: ran.append(1))
        assert deferred.pending == 0
        assert ran == []
        await asyncio.sleep(0)
        assert ran == [1]


class TestReentrancyGuard:
    def _guard(self):
        calls: list = []
        return ReentrancyGuard(calls.append), calls

    def test_starts_idle(self):
        guard, _ = self._guard()
        assert guard.idle
        assert guard.held is None

    def test_directions_are_exclusive(self):
        guard, _ = self._guard()
        assert guard.acquire(TAB)
        assert not guard.acquire(EDITOR)
        assert not guard.acquire(TAB)
        assert guard.is_held(TAB)
        assert not guard.is_held(EDITOR)

    def test_release_is_deferred(self):
        guard, calls = self._guard()
        guard.acquire(EDITOR)
        guard.release_later()
        assert guard.is_held(EDITOR)
        calls.pop(0)()
        assert guard.idle

    def test_on_release_reports_direction(self):
        guard, calls = self._guard()
        released = []
        guard.on_release = released.append
        guard.acquire(TAB)
        guard.release_later()
        calls.pop(0)()
        assert released == [TAB]

    def test_stale_release_leaves_newer_hold(self):
        guard, calls = self._guard()
        guard.acquire(TAB)
        guard.release_later()
        guard.release_later()
        calls.pop(0)()
        assert guard.acquire(EDITOR)
        calls.pop(0)()
        assert guard.is_held(EDITOR)

    def test_release_when_idle_is_noop(self):
        guard, calls = self._guard()
        guard.release_later()
        assert calls == []
