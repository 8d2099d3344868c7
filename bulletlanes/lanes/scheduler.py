"""
Lane Scheduler

Two-phase placement: select_lane() optimistically picks the emptiest lane
from a load estimate, then can_enter() runs the collision predictor
against that lane's trailing item and has the final say.
"""

import logging
from typing import Callable, List, Optional

import numpy as np

from bulletlanes.lanes.collision import can_enter as predict_can_enter, item_progress
from bulletlanes.lanes.geometry import GeometryProvider, Rect
from bulletlanes.lanes.lane_pool import ActiveItem, Lane, LanePool

logger = logging.getLogger(__name__)


class LaneScheduler:
    """
    Picks lanes for incoming items.

    Key responsibilities:
    - Score every lane's load from its trailing item's position
    - Reserve the chosen lane (idle -> running) in the same call
    - Answer admission checks through the collision predictor
    """

    def __init__(
        self,
        pool: LanePool,
        geometry: GeometryProvider,
        lane_height: float,
        viewport: Callable[[], Rect],
    ):
        """
        Args:
            pool: Lane pool to schedule onto
            geometry: Source of live item bounding boxes
            lane_height: Height of one lane in pixels
            viewport: Returns the current viewport rectangle
        """
        self.pool = pool
        self.geometry = geometry
        self.lane_height = lane_height
        self._viewport = viewport

    def lane_loads(self) -> np.ndarray:
        """
        Load score per lane: 0 for idle lanes, otherwise 1 - progress of
        the trailing item (1 = just entered, 0 = about to leave).
        """
        viewport = self._viewport()
        loads: List[float] = []
        for lane in self.pool:
            item = lane.trailing_item
            if lane.is_idle or item is None or viewport.width <= 0:
                loads.append(0.0)
                continue
            rect = self.trailing_rect(lane)
            loads.append(1.0 - item_progress(viewport, rect))
        return np.asarray(loads, dtype=float)

    def select_lane(self) -> Optional[int]:
        """
        Pick the least loaded lane, lowest index on ties, and reserve it.

        Returns:
            Lane index, or None only when there are no lanes at all
        """
        loads = self.lane_loads()
        if loads.size == 0:
            return None

        # argmin returns the first occurrence, giving the lowest index on ties
        index = int(np.argmin(loads))
        if self.pool[index].is_idle:
            self.pool.reserve(index)
        logger.debug("Selected lane %d (load %.3f)", index, loads[index])
        return index

    def can_enter(
        self,
        lane_index: int,
        candidate_duration: float,
        candidate_width: float,
        fixed_speed: bool,
    ) -> bool:
        """Collision check of a candidate against the lane's trailing item."""
        lane = self.pool[lane_index]
        item = lane.trailing_item
        if item is None:
            return True
        allowed = predict_can_enter(
            self._viewport(),
            self.trailing_rect(lane),
            item.duration,
            candidate_width,
            candidate_duration,
            fixed_speed,
        )
        if not allowed:
            logger.debug(
                "Lane %d vetoed: trailing item %s still too close", lane_index, item.id
            )
        return allowed

    def trailing_rect(self, lane: Lane) -> Optional[Rect]:
        item = lane.trailing_item
        if item is None:
            return None
        rect = self.geometry.get_item_rect(item.id)
        if rect is None:
            # Not handed to the motion engine yet: it sits at its entry position
            rect = self.entry_rect(item)
        return rect

    def entry_rect(self, item: ActiveItem) -> Rect:
        viewport = self._viewport()
        return Rect(
            viewport.left - item.width,
            viewport.top + item.lane_index * self.lane_height,
            item.width,
            self.lane_height,
        )
