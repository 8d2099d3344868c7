"""
Lane Pool

Fixed set of horizontal lanes. Each lane is either idle or running and
owns the items currently travelling on it, oldest first. A lane is
running exactly when it holds items; the only exception is the
reservation made by the scheduler right before an item is inserted.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

from bulletlanes.config import ScreenOptions
from bulletlanes.lanes.playback import PlayState

logger = logging.getLogger(__name__)


class LaneStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"


def new_item_id() -> str:
    return uuid.uuid4().hex[:16]


@dataclass
class ActiveItem:
    """An item placed on a lane and handed to the motion engine."""
    id: str
    content: str
    width: float
    duration: float
    lane_index: int
    options: ScreenOptions = field(default_factory=ScreenOptions, repr=False)
    play_state: PlayState = PlayState.PLAYING

    @property
    def paused_by_user(self) -> bool:
        return self.play_state.paused_by_user

    @property
    def paused_by_hover(self) -> bool:
        return self.play_state.paused_by_hover


@dataclass
class Lane:
    index: int
    status: LaneStatus = LaneStatus.IDLE
    items: List[ActiveItem] = field(default_factory=list)

    @property
    def is_idle(self) -> bool:
        return self.status is LaneStatus.IDLE

    @property
    def trailing_item(self) -> Optional[ActiveItem]:
        """Most recently added item, the one a newcomer would follow."""
        return self.items[-1] if self.items else None


class LanePool:
    """Ordered, fixed-size collection of lanes."""

    def __init__(self, lane_count: int):
        if lane_count < 0:
            raise ValueError(f"lane_count must be >= 0, got {lane_count}")
        self.lanes: List[Lane] = [Lane(index=i) for i in range(lane_count)]
        self._index: Dict[str, ActiveItem] = {}

    def __len__(self) -> int:
        return len(self.lanes)

    def __iter__(self) -> Iterator[Lane]:
        return iter(self.lanes)

    def __getitem__(self, index: int) -> Lane:
        return self.lanes[index]

    def reserve(self, index: int) -> None:
        """Mark a lane running ahead of the insertion that will fill it."""
        lane = self.lanes[index]
        if lane.is_idle:
            lane.status = LaneStatus.RUNNING
            logger.debug("Lane %d reserved", index)

    def add_item(self, item: ActiveItem) -> None:
        lane = self.lanes[item.lane_index]
        lane.items.append(item)
        lane.status = LaneStatus.RUNNING
        self._index[item.id] = item

    def remove_item(self, item_id: str) -> Optional[ActiveItem]:
        """
        Remove an item from its lane, idling the lane when it empties.

        Returns:
            The removed item, or None if it was not active
        """
        item = self._index.pop(item_id, None)
        if item is None:
            return None
        lane = self.lanes[item.lane_index]
        lane.items = [i for i in lane.items if i.id != item_id]
        if not lane.items:
            lane.status = LaneStatus.IDLE
            logger.debug("Lane %d is idle", lane.index)
        return item

    def get(self, item_id: str) -> Optional[ActiveItem]:
        return self._index.get(item_id)

    def active_items(self) -> List[ActiveItem]:
        """All active items, lane order then insertion order."""
        return [item for lane in self.lanes for item in lane.items]

    def running_count(self) -> int:
        return sum(1 for lane in self.lanes if not lane.is_idle)
