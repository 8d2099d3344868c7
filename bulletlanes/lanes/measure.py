"""
Off-screen measurement surface.

Item widths are measured once, at submission, by laying the content out
on a scratch Pillow image that is never displayed.
"""

import html
import logging
import re
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont

from bulletlanes.exceptions import ConfigurationError, UninitializedStateError

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r'<[^>]+>')

FontType = Union[ImageFont.ImageFont, ImageFont.FreeTypeFont]


def strip_markup(content: str) -> str:
    """Visible text of an HTML snippet: tags removed, entities decoded."""
    return html.unescape(_TAG_RE.sub('', content))


class TextMeasurer:
    """Measures rendered text width in pixels with a Pillow font."""

    def __init__(self, font: Optional[FontType] = None, font_path: Optional[str] = None,
                 font_size: int = 16, padding: int = 0):
        """
        Args:
            font: Preloaded Pillow font (wins over font_path)
            font_path: TrueType/OpenType font file to load
            font_size: Size used with font_path
            padding: Extra pixels added to every measurement
        """
        if font is None:
            if font_path:
                try:
                    font = ImageFont.truetype(font_path, font_size)
                except (IOError, OSError) as e:
                    raise ConfigurationError(
                        f"Could not load font: {e}", field='font_path'
                    ) from e
            else:
                font = ImageFont.load_default()
        self.font = font
        self.padding = padding
        self._scratch: Optional[Image.Image] = Image.new('L', (1, 1))
        self._draw: Optional[ImageDraw.ImageDraw] = ImageDraw.Draw(self._scratch)

    def measure_width(self, content: str) -> float:
        """
        Width in pixels the content occupies when laid out on one line.

        Raises:
            UninitializedStateError: If the measurer was closed
        """
        if self._draw is None:
            raise UninitializedStateError(
                "Measurement surface is not available", component='TextMeasurer'
            )
        text = strip_markup(content)
        if not text:
            return float(self.padding)
        return float(self._draw.textlength(text, font=self.font)) + self.padding

    def close(self) -> None:
        self._draw = None
        if self._scratch is not None:
            self._scratch.close()
            self._scratch = None
