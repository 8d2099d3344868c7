"""
Motion Engine

The scheduler never moves items itself. It hands each placed item to a
motion engine (start offset + duration), flips its play state, and
listens for two lifecycle signals: 'started' and 'finished'.

LinearMotionEngine is the reference engine: constant velocity, left to
right, from just outside the left edge to fully past the right edge,
driven by a clock the host advances once per frame. It also answers
geometry queries for the items it moves.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from bulletlanes.lanes.geometry import Rect

logger = logging.getLogger(__name__)

STARTED = 'started'
FINISHED = 'finished'
SIGNALS = (STARTED, FINISHED)

RUNNING = 'running'
PAUSED = 'paused'

SignalCallback = Callable[[str], None]


class MotionEngine(ABC):
    """Interface the screen drives; signals carry the item id."""

    def __init__(self):
        self._listeners: Dict[str, List[SignalCallback]] = {name: [] for name in SIGNALS}
        self._hints: Dict[str, Dict[str, Any]] = {}

    def subscribe(self, signal: str, callback: SignalCallback) -> None:
        if signal not in self._listeners:
            raise ValueError(f"Unknown motion signal '{signal}'")
        self._listeners[signal].append(callback)

    def emit(self, signal: str, item_id: str) -> None:
        for callback in list(self._listeners[signal]):
            callback(item_id)

    @abstractmethod
    def start(self, item_id: str, width: float, duration: float, top: float = 0.0,
              height: float = 0.0, from_offset: Optional[float] = None) -> None:
        """Begin moving an item; 'started' is emitted once it is on screen."""

    @abstractmethod
    def set_play_state(self, item_id: str, state: str) -> None:
        """Set an item to 'running' or 'paused'."""

    @abstractmethod
    def cancel(self, item_id: str) -> bool:
        """Stop an item early; must still emit 'finished'."""

    @abstractmethod
    def get_viewport_rect(self) -> Rect:
        ...

    @abstractmethod
    def get_item_rect(self, item_id: str) -> Optional[Rect]:
        ...

    def advance(self, now: Optional[float] = None) -> None:
        """Deliver due lifecycle signals. Engines driven by their own loop ignore this."""

    # Presentation hints (z-order while paused, will-change while moving)

    def set_hint(self, item_id: str, name: str, value: Any) -> None:
        self._hints.setdefault(item_id, {})[name] = value

    def get_hints(self, item_id: str) -> Dict[str, Any]:
        return dict(self._hints.get(item_id, {}))

    def clear_hints(self, item_id: str) -> None:
        self._hints.pop(item_id, None)


@dataclass
class _Track:
    item_id: str
    width: float
    duration: float
    top: float
    height: float
    from_offset: float
    state: str = RUNNING
    started: bool = False
    elapsed: float = 0.0
    resumed_at: Optional[float] = None


class LinearMotionEngine(MotionEngine):
    """
    Constant-velocity engine on an injectable clock.

    Usage:
        engine = LinearMotionEngine(viewport)
        engine.subscribe('finished', on_finished)
        engine.start(item_id, width=120, duration=8.0)
        engine.advance()   # once per frame
    """

    def __init__(self, viewport: Rect, clock: Optional[Callable[[], float]] = None):
        super().__init__()
        self.viewport = viewport
        self._clock = clock or time.monotonic
        self._tracks: Dict[str, _Track] = {}

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._tracks

    def __len__(self) -> int:
        return len(self._tracks)

    def start(self, item_id: str, width: float, duration: float, top: float = 0.0,
              height: float = 0.0, from_offset: Optional[float] = None) -> None:
        if duration <= 0:
            raise ValueError(f"duration must be > 0, got {duration}")
        self._tracks[item_id] = _Track(
            item_id=item_id,
            width=width,
            duration=duration,
            top=top,
            height=height,
            from_offset=-width if from_offset is None else from_offset,
        )
        self.set_hint(item_id, 'will_change', True)

    def set_play_state(self, item_id: str, state: str) -> None:
        if state not in (RUNNING, PAUSED):
            raise ValueError(f"Unknown play state '{state}'")
        track = self._tracks.get(item_id)
        if track is None or track.state == state:
            return

        now = self._clock()
        if state == PAUSED:
            if track.resumed_at is not None:
                track.elapsed += now - track.resumed_at
                track.resumed_at = None
        elif track.started:
            track.resumed_at = now
        track.state = state

    def get_play_state(self, item_id: str) -> Optional[str]:
        track = self._tracks.get(item_id)
        return track.state if track else None

    def cancel(self, item_id: str) -> bool:
        track = self._tracks.pop(item_id, None)
        if track is None:
            return False
        logger.debug("Cancelled item %s", item_id)
        self.emit(FINISHED, item_id)
        return True

    def advance(self, now: Optional[float] = None) -> None:
        """
        Move time forward: emit 'started' for newly shown items and
        'finished' for items that completed their travel.
        """
        if now is None:
            now = self._clock()

        started: List[str] = []
        finished: List[str] = []
        for track in list(self._tracks.values()):
            if not track.started:
                track.started = True
                if track.state == RUNNING:
                    track.resumed_at = now
                started.append(track.item_id)
                continue
            if self._elapsed(track, now) >= track.duration:
                finished.append(track.item_id)

        for item_id in finished:
            self._tracks.pop(item_id, None)

        # Listeners may start new items, so emit after the sweep
        for item_id in started:
            self.emit(STARTED, item_id)
        for item_id in finished:
            self.emit(FINISHED, item_id)

    def get_viewport_rect(self) -> Rect:
        return self.viewport

    def get_item_rect(self, item_id: str) -> Optional[Rect]:
        track = self._tracks.get(item_id)
        if track is None:
            return None
        elapsed = self._elapsed(track, self._clock())
        travel = self.viewport.width - track.from_offset
        left = self.viewport.left + track.from_offset + travel * (elapsed / track.duration)
        return Rect(left, track.top, track.width, track.height)

    def _elapsed(self, track: _Track, now: float) -> float:
        elapsed = track.elapsed
        if track.resumed_at is not None:
            elapsed += now - track.resumed_at
        return min(elapsed, track.duration)
