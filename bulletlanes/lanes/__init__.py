"""
Lane scheduling for scrolling bullet comments.

Components:
- LanePool: fixed set of lanes and the items travelling on them
- LaneScheduler: load-based lane choice plus collision admission
- OverflowQueue: items waiting for lane capacity
- ItemLifecycleManager: motion signals -> lane bookkeeping
- LinearMotionEngine: constant-velocity reference motion engine
"""

from bulletlanes.lanes.collision import can_enter
from bulletlanes.lanes.geometry import Rect
from bulletlanes.lanes.lane_pool import ActiveItem, Lane, LanePool, LaneStatus
from bulletlanes.lanes.lifecycle import ItemLifecycleManager, ItemPhase
from bulletlanes.lanes.measure import TextMeasurer
from bulletlanes.lanes.motion import LinearMotionEngine, MotionEngine
from bulletlanes.lanes.overflow import OverflowQueue, PendingItem
from bulletlanes.lanes.playback import PauseEvent, PlayState
from bulletlanes.lanes.scheduler import LaneScheduler
from bulletlanes.lanes.target import ElementHandle, Selector, Surface, SurfaceRegistry

__all__ = [
    'ActiveItem',
    'ElementHandle',
    'ItemLifecycleManager',
    'ItemPhase',
    'Lane',
    'LanePool',
    'LaneScheduler',
    'LaneStatus',
    'LinearMotionEngine',
    'MotionEngine',
    'OverflowQueue',
    'PauseEvent',
    'PendingItem',
    'PlayState',
    'Rect',
    'Selector',
    'Surface',
    'SurfaceRegistry',
    'TextMeasurer',
    'can_enter',
]
