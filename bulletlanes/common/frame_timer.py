"""
Frame Timer

Timeout/interval scheduling driven by the host's frame loop instead of
threads. Callbacks run inside tick(), on the caller's thread, so they
interleave with rendering exactly like lifecycle signals do.
"""

import itertools
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class _Timer:
    callback: Callable[[], None]
    interval: float
    due: float
    repeat: bool


class FrameTimer:
    """
    Maps opaque timer handles to pending callbacks.

    Usage:
        timer = FrameTimer()
        handle = timer.after(0.5, do_something)
        ...
        timer.tick()          # once per frame
        timer.cancel(handle)
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._timers: Dict[int, _Timer] = {}
        self._handles = itertools.count(1)

    def after(self, delay: float, callback: Callable[[], None]) -> int:
        """Run callback once, on the first tick at least `delay` seconds from now."""
        return self._add(callback, delay, repeat=False)

    def every(self, interval: float, callback: Callable[[], None]) -> int:
        """Run callback on every tick at least `interval` seconds after the previous run."""
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        return self._add(callback, interval, repeat=True)

    def cancel(self, handle: int) -> bool:
        """Cancel a pending timer. Returns False if the handle is unknown or already fired."""
        return self._timers.pop(handle, None) is not None

    def pending(self) -> int:
        return len(self._timers)

    def tick(self, now: Optional[float] = None) -> int:
        """
        Fire all timers that are due.

        Args:
            now: Current clock reading (defaults to the timer's clock)

        Returns:
            Number of callbacks invoked
        """
        if now is None:
            now = self._clock()

        fired = 0
        for handle, timer in list(self._timers.items()):
            if handle not in self._timers or now < timer.due:
                continue
            if timer.repeat:
                # Restart from the firing frame, not from the nominal due time
                timer.due = now + timer.interval
            else:
                del self._timers[handle]
            timer.callback()
            fired += 1

        if fired:
            logger.debug("FrameTimer fired %d callback(s), %d pending", fired, len(self._timers))
        return fired

    def _add(self, callback: Callable[[], None], interval: float, repeat: bool) -> int:
        handle = next(self._handles)
        self._timers[handle] = _Timer(
            callback=callback,
            interval=interval,
            due=self._clock() + interval,
            repeat=repeat,
        )
        return handle
