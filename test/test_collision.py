"""
Tests for the collision predictor.
"""

import pytest

from bulletlanes.lanes.collision import (
    EARLY_EXIT_PROGRESS,
    can_enter,
    item_progress,
    item_velocity,
)
from bulletlanes.lanes.geometry import Rect


VIEWPORT = Rect(0, 0, 1000, 120)


def trailing(left: float, width: float = 100) -> Rect:
    return Rect(left, 0, width, 40)


class TestHelpers:
    """Test progress and velocity helpers."""

    def test_progress_uses_right_edge(self):
        """Progress is the right edge's share of the viewport width."""
        assert item_progress(VIEWPORT, trailing(400)) == pytest.approx(0.5)

    def test_progress_normalized_by_viewport_left(self):
        """Viewport origin is subtracted before normalizing."""
        viewport = Rect(200, 0, 1000, 40)
        assert item_progress(viewport, trailing(600)) == pytest.approx(0.5)

    def test_velocity_covers_viewport_plus_item(self):
        """An item travels viewport width plus its own width."""
        assert item_velocity(1000, 100, 10) == pytest.approx(110)


class TestAdmission:
    """Test can_enter in both regimes."""

    def test_empty_lane_always_allows(self):
        """No trailing item means nothing to collide with."""
        assert can_enter(VIEWPORT, None, 0, 100, 1, fixed_speed=True)

    def test_early_exit_allows_regardless_of_speed(self):
        """A trailing item 80% across never blocks."""
        rect = trailing(700)  # right edge at 800
        assert item_progress(VIEWPORT, rect) == pytest.approx(EARLY_EXIT_PROGRESS)
        assert can_enter(VIEWPORT, rect, 10, 100, 0.5, fixed_speed=False)
        assert can_enter(VIEWPORT, rect, 10, 100, 0.5, fixed_speed=True)

    def test_fixed_speed_blocks_while_trailing_item_visible(self):
        """Same configured speed: blocked until the trailing item is out."""
        assert not can_enter(VIEWPORT, trailing(100), 11, 100, 11, fixed_speed=True)

    def test_fixed_speed_blocks_item_still_entering(self):
        """An item still sliding in from the left edge blocks its lane."""
        assert not can_enter(VIEWPORT, trailing(-100), 11, 100, 11, fixed_speed=True)

    def test_slower_follower_allowed(self):
        """A follower that is not faster can never catch up."""
        assert can_enter(VIEWPORT, trailing(50), 10, 100, 20, fixed_speed=False)

    def test_equal_speed_follower_allowed(self):
        """Equal velocity is allowed."""
        assert can_enter(VIEWPORT, trailing(50), 10, 100, 10, fixed_speed=False)

    def test_faster_follower_allowed_when_trailing_item_is_young(self):
        """v1=110px/s, v2=220px/s, left=50: t1 ~ 0.45s <= t2 ~ 4.55s."""
        assert can_enter(VIEWPORT, trailing(50), 10, 100, 5, fixed_speed=False)

    def test_faster_follower_exact_tie_allows(self):
        """left=500 gives t1 == t2 == 50/11s; ties favour entry."""
        assert can_enter(VIEWPORT, trailing(500), 10, 100, 5, fixed_speed=False)

    def test_faster_follower_boundary_with_offset_viewport(self):
        """Same boundary case with a viewport that does not start at 0."""
        viewport = Rect(200, 0, 1000, 40)
        assert can_enter(viewport, trailing(700), 10, 100, 5, fixed_speed=False)

    def test_faster_follower_blocked_when_it_would_overtake(self):
        """A much faster follower behind a far-travelled slow item is vetoed."""
        # t1 = 600 / 110 ~ 5.45s, t2 = 1000 / 220 ~ 4.55s
        assert not can_enter(VIEWPORT, trailing(600), 10, 100, 5, fixed_speed=False)

    def test_faster_follower_behind_item_just_entering(self):
        """Trailing item left of the viewport gives a negative t1: allowed."""
        assert can_enter(VIEWPORT, trailing(-60), 10, 100, 5, fixed_speed=False)
