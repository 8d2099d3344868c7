"""
Bullet Screen

Main orchestrator: scrolls a stream of text items across fixed lanes of a
surface so that items sharing a lane never collide. Coordinates the lane
scheduler, collision predictor, overflow queue, lifecycle manager and the
motion engine that actually moves items.

All decisions run synchronously inside the calling thread. Logical lane
reservation happens inside submit(); handing the item to the motion engine
is batched until the next render_frame().
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from bulletlanes.common.error_handler import log_and_raise
from bulletlanes.common.frame_timer import FrameTimer
from bulletlanes.config import ScreenOptions
from bulletlanes.exceptions import ConfigurationError, UnknownItemError
from bulletlanes.lanes.geometry import Rect
from bulletlanes.lanes.lane_pool import ActiveItem, LanePool, new_item_id
from bulletlanes.lanes.lifecycle import ItemLifecycleManager
from bulletlanes.lanes.measure import TextMeasurer
from bulletlanes.lanes.motion import PAUSED, RUNNING, LinearMotionEngine, MotionEngine
from bulletlanes.lanes.overflow import OverflowQueue, PendingItem
from bulletlanes.lanes.playback import PauseEvent, PlayState, transition
from bulletlanes.lanes.scheduler import LaneScheduler
from bulletlanes.lanes.target import SurfaceRegistry, resolve_target
from bulletlanes.logging_config import log_debug

logger = logging.getLogger(__name__)

OptionsArg = Optional[Union[Mapping[str, Any], ScreenOptions]]


class BulletScreen:
    """
    Lane-based scroller for bullet comments.

    Usage:
        screen = BulletScreen(Surface('stage', 800, 400), {'speed': 120})
        item_id = screen.submit('hello')
        while running:
            screen.render_frame()
    """

    def __init__(
        self,
        target: Any,
        options: OptionsArg = None,
        registry: Optional[SurfaceRegistry] = None,
        engine: Optional[MotionEngine] = None,
        measurer: Optional[TextMeasurer] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the screen.

        Args:
            target: Selector string or Surface to render into
            options: Process-wide defaults (mapping or ScreenOptions)
            registry: Surface registry used to resolve selector targets
            engine: Motion engine (defaults to a LinearMotionEngine)
            measurer: Width measurement surface (defaults to a TextMeasurer)
            clock: Clock for the default engine and frame timer

        Raises:
            ConfigurationError: Invalid target or options; nothing is built
        """
        self.options = ScreenOptions().merged(options)
        errors = self.options.validate()
        if errors:
            log_and_raise(
                logger,
                f"Invalid bullet screen options: {'; '.join(errors)}",
                ConfigurationError,
                context={'errors': len(errors)},
            )

        self.surface = resolve_target(target, registry)
        self._viewport = self.surface.measure()
        lane_count = int(self._viewport.height // self.options.lane_height)

        self.engine = engine or LinearMotionEngine(self._viewport, clock)
        self.measurer = measurer or TextMeasurer()
        self.pool = LanePool(lane_count)
        self.scheduler = LaneScheduler(
            self.pool, self.engine, self.options.lane_height, lambda: self._viewport
        )
        self.queue = OverflowQueue()
        self.lifecycle = ItemLifecycleManager(self.pool, self.engine, owner=self)
        self.lifecycle.on_finish(self._after_finish)
        self.timer = FrameTimer(clock)

        self._is_all_paused = False
        self._render_batch: List[ActiveItem] = []
        self._replays_owed = 0
        self._draining = False
        # Width of the most recently measured item
        self._last_width = 0.0

        logger.info(
            "BulletScreen initialized on '%s': %dx%d, %d lanes of %dpx",
            self.surface.name, self._viewport.width, self._viewport.height,
            lane_count, self.options.lane_height
        )

    @property
    def viewport(self) -> Rect:
        return self._viewport

    @property
    def lane_count(self) -> int:
        return len(self.pool)

    @property
    def is_all_paused(self) -> bool:
        return self._is_all_paused

    @property
    def queued_count(self) -> int:
        return len(self.queue)

    # Submission

    def submit(self, content: str, options: OptionsArg = None) -> Optional[str]:
        """
        Place an item on a lane.

        Args:
            content: Text or HTML snippet to scroll
            options: Per-item overrides merged over the screen defaults

        Returns:
            Item id when placed; None when queued for later or when the
            screen is globally paused (in which case it is discarded)

        Raises:
            ConfigurationError: If the per-item options are invalid
        """
        merged = self.options.merged(options)
        if options:
            errors = merged.validate()
            if errors:
                raise ConfigurationError(f"Invalid item options: {'; '.join(errors)}")
        item_id = self._submit(content, merged, replay=False)
        self._drain_replays()
        return item_id

    def _submit(self, content: str, options: ScreenOptions, replay: bool) -> Optional[str]:
        if self._is_all_paused and not replay:
            logger.debug("Screen paused, submission rejected")
            return None

        width = self.measurer.measure_width(content)
        self._last_width = width

        lane_index = self.scheduler.select_lane()
        if lane_index is None:
            self._defer(PendingItem(content, options), replay)
            return None

        duration = options.item_duration(self._viewport.width, self._last_width, lane_index)
        # Regime follows the screen configuration, not the item's overrides
        fixed_speed = self.options.uses_fixed_speed
        if not self.scheduler.can_enter(lane_index, duration, width, fixed_speed):
            self._defer(PendingItem(content, options), replay)
            return None

        item = ActiveItem(
            id=new_item_id(),
            content=content,
            width=width,
            duration=duration,
            lane_index=lane_index,
            options=options,
        )
        self.pool.add_item(item)
        self.lifecycle.attach(item)
        log_debug(
            logger, f"Placed item ({duration:.2f}s, {width:.0f}px)",
            item_id=item.id, lane_index=lane_index,
        )
        self._render(item)
        return item.id

    def _defer(self, pending: PendingItem, replay: bool) -> None:
        if replay:
            self.queue.requeue(pending)
        else:
            self.queue.enqueue(pending)

    def _render(self, item: ActiveItem) -> None:
        self._render_batch.append(item)
        # Every placement gives one queued item another chance
        self._replays_owed += 1

    def _after_finish(self, item: ActiveItem) -> None:
        self._replays_owed += 1
        self._drain_replays()

    def _drain_replays(self) -> None:
        """
        Pay off owed replays, one dequeue each, in a loop rather than by
        nesting submissions. Placements made here owe further replays,
        which the same loop pays.
        """
        if self._draining:
            return
        self._draining = True
        try:
            while self._replays_owed:
                self._replays_owed -= 1
                pending = self.queue.dequeue_one()
                if pending is None:
                    continue
                try:
                    self._submit(pending.content, pending.options, replay=True)
                except Exception:
                    self.queue.requeue(pending)
                    raise
        finally:
            self._draining = False

    # Frame loop

    def flush_renders(self) -> int:
        """Hand items placed since the last frame to the motion engine."""
        batch, self._render_batch = self._render_batch, []
        flushed = 0
        for item in batch:
            if self.pool.get(item.id) is None:
                continue
            self.engine.start(
                item.id,
                item.width,
                item.duration,
                top=self._viewport.top + item.lane_index * self.options.lane_height,
                height=self.options.lane_height,
            )
            if self._is_all_paused or item.play_state.is_paused:
                self.engine.set_play_state(item.id, PAUSED)
            flushed += 1
        return flushed

    def render_frame(self, now: Optional[float] = None) -> None:
        """One host frame: flush insertions, advance motion, fire timers."""
        self.flush_renders()
        self.engine.advance(now)
        self.timer.tick(now)

    def remeasure(self) -> Rect:
        """Re-read the viewport from the surface. The lane count is kept."""
        self._viewport = self.surface.measure()
        if isinstance(self.engine, LinearMotionEngine):
            self.engine.viewport = self._viewport
        return self._viewport

    # Query

    def list_active(self) -> List[ActiveItem]:
        """Active items across lanes, lane order then insertion order."""
        return self.pool.active_items()

    def get_item(self, item_id: str) -> Optional[ActiveItem]:
        return self.pool.get(item_id)

    def lane_states(self) -> List[Dict[str, Any]]:
        return [
            {
                'index': lane.index,
                'status': lane.status.value,
                'items': [item.id for item in lane.items],
            }
            for lane in self.pool
        ]

    def get_status(self) -> Dict[str, Any]:
        """Current screen status for monitoring."""
        return {
            'lanes': self.lane_count,
            'running_lanes': self.pool.running_count(),
            'active_items': len(self.pool.active_items()),
            'pending_renders': len(self._render_batch),
            'all_paused': self._is_all_paused,
            'queue': self.queue.get_status(),
        }

    # Control

    def pause(self, item_id: Optional[str] = None) -> bool:
        """
        Pause one item (user pause) or, with no id, the whole screen.

        Global pause also rejects new submissions until resume(); items
        already waiting in the overflow queue are still placed.
        """
        if item_id is None:
            self._is_all_paused = True
            for item in self.pool.active_items():
                self.engine.set_play_state(item.id, PAUSED)
            logger.info("All items paused (%d active)", len(self.pool.active_items()))
            return True
        return self._apply(item_id, PauseEvent.USER_PAUSE)

    def resume(self, item_id: Optional[str] = None) -> bool:
        """
        Resume one item (clears the user pause) or, with no id, everything.

        Global resume drops every per-item pause as well.
        """
        if item_id is None:
            self._is_all_paused = False
            for item in self.pool.active_items():
                item.play_state = PlayState.PLAYING
                self.engine.set_play_state(item.id, RUNNING)
                self.engine.set_hint(item.id, 'raised', False)
            logger.info("All items resumed")
            return True
        return self._apply(item_id, PauseEvent.USER_RESUME)

    def handle_click(self, item_id: str) -> bool:
        """Toggle the user pause of an item, if click-to-pause is enabled for it."""
        item = self.pool.get(item_id)
        if item is None or not item.options.pause_on_click:
            return False
        event = PauseEvent.USER_RESUME if item.paused_by_user else PauseEvent.USER_PAUSE
        return self._apply(item_id, event)

    def handle_hover(self, item_id: str, inside: bool) -> bool:
        """Pointer entered (inside=True) or left an item."""
        item = self.pool.get(item_id)
        if item is None or not item.options.pause_on_hover:
            return False
        event = PauseEvent.HOVER_ENTER if inside else PauseEvent.HOVER_LEAVE
        return self._apply(item_id, event)

    def remove(self, item_id: str) -> None:
        """
        Take an item off screen now. Lane bookkeeping runs as for a
        natural finish, including on_end and the queue replay.

        Raises:
            UnknownItemError: If the item is not active
        """
        if self.pool.get(item_id) is None:
            log_and_raise(logger, "Cannot remove unknown item", UnknownItemError, item_id=item_id)
        if not self.engine.cancel(item_id):
            # Still waiting for its first frame
            self.lifecycle.handle_finished(item_id)

    def close(self) -> None:
        self.measurer.close()

    def _apply(self, item_id: str, event: PauseEvent) -> bool:
        item = self.pool.get(item_id)
        if item is None:
            return False
        new_state = transition(item.play_state, event)
        if new_state is item.play_state:
            return True
        item.play_state = new_state
        if not self._is_all_paused:
            self.engine.set_play_state(item_id, new_state.engine_state)
        self.engine.set_hint(item_id, 'raised', new_state.is_paused)
        log_debug(logger, f"Play state -> {new_state.value}", item_id=item_id)
        return True
