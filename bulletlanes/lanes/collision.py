"""
Collision Predictor

Decides whether a new item can enter a lane now without overlapping the
lane's trailing item before that item leaves the viewport. All motion is
linear: an item of width w with duration d travels viewport.width + w
pixels in d seconds.

Comparisons are non-strict so exact ties admit the newcomer.
"""

from typing import Optional

from bulletlanes.lanes.geometry import Rect

# Past this fraction of the viewport the trailing item never blocks
EARLY_EXIT_PROGRESS = 0.8


def item_progress(viewport: Rect, rect: Rect) -> float:
    """How far an item's right edge has travelled across the viewport (0..1)."""
    return (rect.right - viewport.left) / viewport.width


def item_velocity(viewport_width: float, item_width: float, duration: float) -> float:
    """Pixels per second for an item crossing the whole viewport in `duration`."""
    return (viewport_width + item_width) / duration


def can_enter(
    viewport: Rect,
    trailing_rect: Optional[Rect],
    trailing_duration: float,
    candidate_width: float,
    candidate_duration: float,
    fixed_speed: bool,
) -> bool:
    """
    Check whether a candidate may be inserted behind the trailing item.

    Args:
        viewport: Viewport rectangle
        trailing_rect: Current bounding box of the lane's trailing item,
            None when the lane is empty
        trailing_duration: Trailing item's total travel time in seconds
        candidate_width: Width of the new item in pixels
        candidate_duration: Travel time of the new item in seconds
        fixed_speed: True when a global speed or lane speed table applies

    Returns:
        True if the candidate can enter now
    """
    if trailing_rect is None or viewport.width <= 0:
        return True

    if item_progress(viewport, trailing_rect) >= EARLY_EXIT_PROGRESS:
        return True

    if fixed_speed:
        # Same configured speed: plain edge test, blocked until the trailing item is out
        return not trailing_rect.left < viewport.right

    if trailing_duration <= 0 or candidate_duration <= 0:
        return True

    v1 = item_velocity(viewport.width, trailing_rect.width, trailing_duration)
    v2 = item_velocity(viewport.width, candidate_width, candidate_duration)
    if v2 <= v1:
        return True

    t1 = (trailing_rect.left - viewport.left) / v1
    t2 = viewport.width / v2
    return t2 >= t1
