"""
Frame Renderer

Draws the items of a BulletScreen at their current positions onto an RGB
frame. Paused items are drawn last so they stay on top of the items that
keep moving underneath them.
"""

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from bulletlanes.exceptions import UninitializedStateError
from bulletlanes.lanes.geometry import Rect
from bulletlanes.lanes.lane_pool import ActiveItem
from bulletlanes.lanes.measure import strip_markup

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class FrameRenderer:
    """Composes RGB frames from item rectangles."""

    def __init__(self, width: int, height: int, font: Optional[ImageFont.ImageFont] = None,
                 background: Color = (0, 0, 0), color: Color = (255, 255, 255),
                 paused_color: Color = (255, 220, 0)):
        self.width = int(width)
        self.height = int(height)
        self.font = font or ImageFont.load_default()
        self.background = background
        self.color = color
        self.paused_color = paused_color
        self.last_frame: Optional[Image.Image] = None
        self.frames_rendered = 0

    def render(self, placed: Iterable[Tuple[ActiveItem, Rect]], origin: Tuple[float, float] = (0, 0)) -> Image.Image:
        """
        Draw items onto a fresh frame.

        Args:
            placed: (item, rect) pairs in viewport coordinates
            origin: Viewport (left, top), subtracted from every rect

        Returns:
            The rendered PIL image (also kept as last_frame)
        """
        frame = Image.new('RGB', (self.width, self.height), self.background)
        draw = ImageDraw.Draw(frame)

        # Moving items first, paused ones on top
        ordered: List[Tuple[ActiveItem, Rect]] = sorted(
            placed, key=lambda pair: pair[0].play_state.is_paused
        )
        for item, rect in ordered:
            x = rect.left - origin[0]
            if x >= self.width or x + rect.width <= 0:
                continue
            fill = self.paused_color if item.play_state.is_paused else self.color
            draw.text((x, rect.top - origin[1]), strip_markup(item.content), font=self.font, fill=fill)

        self.last_frame = frame
        self.frames_rendered += 1
        return frame

    def render_screen(self, screen) -> Image.Image:
        """Render every active item of a BulletScreen that is on screen."""
        placed = []
        for item in screen.list_active():
            rect = screen.engine.get_item_rect(item.id)
            if rect is not None:
                placed.append((item, rect))
        viewport = screen.viewport
        return self.render(placed, origin=(viewport.left, viewport.top))

    def to_array(self) -> np.ndarray:
        """Last frame as a (height, width, 3) uint8 array."""
        if self.last_frame is None:
            raise UninitializedStateError("No frame has been rendered yet", component='FrameRenderer')
        return np.asarray(self.last_frame, dtype=np.uint8)

    def save(self, path: str) -> None:
        if self.last_frame is None:
            raise UninitializedStateError("No frame has been rendered yet", component='FrameRenderer')
        self.last_frame.save(path)
        logger.info("Saved frame to %s", path)
