"""Unit tests for the Scheduler implementations."""

from __future__ import annotations

import asyncio

import pytest

from sfdc.capture.core import AsyncioScheduler, ManualScheduler


class TestManualScheduler:
    """Test virtual-time scheduling."""

    def test_nothing_fires_without_advance(self):
        """Callbacks wait for advance()."""
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(1.0, lambda: fired.append(1))

        assert fired == []
        assert scheduler.pending() == 1

    def test_advance_fires_due_callbacks_in_order(self):
        """Due callbacks fire in deadline order; later ones wait."""
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(2.0, lambda: fired.append("b"))
        scheduler.call_later(1.0, lambda: fired.append("a"))
        scheduler.call_later(5.0, lambda: fired.append("c"))

        assert scheduler.advance(2.0) == 2
        assert fired == ["a", "b"]
        assert scheduler.now == 2.0
        assert scheduler.pending() == 1

    def test_cancelled_callbacks_never_fire(self):
        """cancel() removes a callback from the schedule."""
        scheduler = ManualScheduler()
        fired = []
        handle = scheduler.call_later(1.0, lambda: fired.append(1))
        handle.cancel()

        assert scheduler.advance(10.0) == 0
        assert fired == []
        assert scheduler.pending() == 0

    def test_callback_scheduled_during_advance(self):
        """A callback scheduled by a firing callback runs if it is due."""
        scheduler = ManualScheduler()
        fired = []

        def first():
            fired.append("first")
            scheduler.call_later(1.0, lambda: fired.append("second"))

        scheduler.call_later(1.0, first)
        scheduler.advance(3.0)

        assert fired == ["first", "second"]


class TestAsyncioScheduler:
    """Test the event-loop backed scheduler."""

    @pytest.mark.asyncio
    async def test_call_later_runs_on_loop(self):
        """Callback runs after the delay on the running loop."""
        scheduler = AsyncioScheduler()
        event = asyncio.Event()
        scheduler.call_later(0.01, event.set)

        await asyncio.wait_for(event.wait(), timeout=1.0)
        assert event.is_set()

    @pytest.mark.asyncio
    async def test_cancel(self):
        """Cancelled handle never runs."""
        scheduler = AsyncioScheduler()
        fired = []
        handle = scheduler.call_later(0.01, lambda: fired.append(1))
        handle.cancel()

        await asyncio.sleep(0.05)
        assert fired == []
