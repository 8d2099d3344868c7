"""
bulletlanes - collision-free lane scheduling for scrolling bullet comments.
"""

from bulletlanes.config import ScreenOptions
from bulletlanes.exceptions import (
    BulletLanesError,
    ConfigurationError,
    UninitializedStateError,
    UnknownItemError,
)
from bulletlanes.lanes.target import Surface, default_registry
from bulletlanes.screen import BulletScreen

__version__ = '0.1.0'

__all__ = [
    'BulletLanesError',
    'BulletScreen',
    'ConfigurationError',
    'ScreenOptions',
    'Surface',
    'UninitializedStateError',
    'UnknownItemError',
    'default_registry',
]
