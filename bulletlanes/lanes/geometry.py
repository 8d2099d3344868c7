"""
Geometry primitives shared by the scheduler and the motion engine.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in viewport coordinates."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


class GeometryProvider(Protocol):
    """Supplies the viewport rectangle and an item's current bounding box."""

    def get_viewport_rect(self) -> Rect:
        ...

    def get_item_rect(self, item_id: str) -> Optional[Rect]:
        ...
