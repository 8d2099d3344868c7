"""
Common utilities shared by the lane scheduler and the render side:
- Error handling utilities
- Frame-driven timers
"""

from bulletlanes.common.error_handler import safe_execute, log_and_raise
from bulletlanes.common.frame_timer import FrameTimer

__all__ = [
    'safe_execute',
    'log_and_raise',
    'FrameTimer',
]
