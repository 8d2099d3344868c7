"""
Pytest configuration and fixtures for bulletlanes tests.

Provides a manual clock, a deterministic width measurer and a screen
factory so scheduling scenarios can be stepped frame by frame.
"""

import pytest
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from bulletlanes.lanes.geometry import Rect
from bulletlanes.lanes.target import Surface


class ManualClock:
    """Clock that only moves when a test says so."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class FixedWidthMeasurer:
    """Measurer returning the same width for any content."""

    def __init__(self, width: float = 100.0):
        self.width = width
        self.calls = []
        self.closed = False

    def measure_width(self, content: str) -> float:
        self.calls.append(content)
        return self.width

    def close(self) -> None:
        self.closed = True


class FakeGeometry:
    """Geometry provider backed by a dict of item rects."""

    def __init__(self, viewport: Rect):
        self.viewport = viewport
        self.rects: Dict[str, Rect] = {}

    def get_viewport_rect(self) -> Rect:
        return self.viewport

    def get_item_rect(self, item_id: str) -> Optional[Rect]:
        return self.rects.get(item_id)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def viewport():
    return Rect(0, 0, 1000, 120)


@pytest.fixture
def surface():
    """1000x120 surface: three 40px lanes."""
    return Surface('stage', 1000, 120)


@pytest.fixture
def measurer():
    return FixedWidthMeasurer(100.0)


@pytest.fixture
def make_screen(clock, measurer, surface):
    """Factory building a BulletScreen on the manual clock."""
    from bulletlanes.screen import BulletScreen

    def _make(options: Optional[Dict[str, Any]] = None, target: Any = None, **kwargs):
        return BulletScreen(
            target if target is not None else surface,
            options,
            measurer=kwargs.pop('measurer', measurer),
            clock=clock,
            **kwargs
        )

    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test."""
    import logging
    logging.root.handlers = []
    logging.root.setLevel(logging.WARNING)
    yield
    logging.root.handlers = []
    logging.root.setLevel(logging.WARNING)


@pytest.fixture
def geometry(viewport):
    """Geometry provider whose item rects a test sets directly."""
    return FakeGeometry(viewport)
