"""
Tests for the frame-driven timer.
"""

import pytest
from unittest.mock import Mock

from bulletlanes.common.frame_timer import FrameTimer


@pytest.fixture
def timer(clock):
    return FrameTimer(clock)


class TestFrameTimer:
    """Test one-shot and repeating timers."""

    def test_after_fires_once(self, timer, clock):
        """A one-shot timer fires on the first due tick only."""
        callback = Mock()
        timer.after(1.0, callback)
        assert timer.tick() == 0
        clock.advance(1.0)
        assert timer.tick() == 1
        clock.advance(5.0)
        timer.tick()
        callback.assert_called_once_with()
        assert timer.pending() == 0

    def test_every_rearms_from_firing_time(self, timer, clock):
        """Repeating timers restart from the frame they fired on."""
        callback = Mock()
        timer.every(1.0, callback)
        clock.advance(1.5)
        timer.tick()
        clock.advance(0.75)
        timer.tick()
        assert callback.call_count == 1
        clock.advance(0.25)
        timer.tick()
        assert callback.call_count == 2

    def test_every_rejects_non_positive_interval(self, timer):
        """Intervals must be positive."""
        with pytest.raises(ValueError):
            timer.every(0, Mock())

    def test_cancel(self, timer, clock):
        """Cancelled timers never fire."""
        callback = Mock()
        handle = timer.after(0.5, callback)
        assert timer.cancel(handle) is True
        assert timer.cancel(handle) is False
        clock.advance(1.0)
        timer.tick()
        callback.assert_not_called()

    def test_callback_can_cancel_other_timer(self, timer, clock):
        """A timer cancelled by an earlier callback in the same tick is skipped."""
        second = Mock()
        handles = {}
        timer.after(1.0, lambda: timer.cancel(handles['second']))
        handles['second'] = timer.after(1.0, second)
        clock.advance(1.0)
        assert timer.tick() == 1
        second.assert_not_called()

    def test_explicit_now(self, timer):
        """tick() accepts the frame time from the caller."""
        callback = Mock()
        timer.after(2.0, callback)
        timer.tick(now=2.0)
        callback.assert_called_once()
