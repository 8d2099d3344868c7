"""
Item Lifecycle Manager

Wires motion engine signals to lane bookkeeping. Every placed item goes
entering -> active -> finished. Per-item listeners are kept in a registry
keyed by item id and called directly; a listener that raises is logged
and skipped so lane state is always updated.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from bulletlanes.common.error_handler import safe_execute
from bulletlanes.lanes.lane_pool import ActiveItem, LanePool
from bulletlanes.lanes.motion import FINISHED, STARTED, MotionEngine
from bulletlanes.logging_config import log_debug

logger = logging.getLogger(__name__)

ItemListener = Callable[[str, Any], None]


class ItemPhase(Enum):
    ENTERING = "entering"
    ACTIVE = "active"
    FINISHED = "finished"


class ItemLifecycleManager:
    """
    Tracks item phases and runs start/finish listeners.

    Args:
        pool: Lane pool the items live in
        engine: Motion engine whose signals drive the transitions
        owner: Object passed as second argument to listeners
    """

    def __init__(self, pool: LanePool, engine: MotionEngine, owner: Any = None):
        self.pool = pool
        self.engine = engine
        self.owner = owner
        self._phases: Dict[str, ItemPhase] = {}
        self._listeners: Dict[str, Dict[str, List[ItemListener]]] = {}
        self._finish_hooks: List[Callable[[ActiveItem], None]] = []

        engine.subscribe(STARTED, self.handle_started)
        engine.subscribe(FINISHED, self.handle_finished)

    def attach(self, item: ActiveItem) -> None:
        """Register an item entering the screen, with its on_start/on_end callbacks."""
        self._phases[item.id] = ItemPhase.ENTERING
        self._listeners[item.id] = {STARTED: [], FINISHED: []}
        if item.options.on_start:
            self.add_listener(item.id, STARTED, item.options.on_start)
        if item.options.on_end:
            self.add_listener(item.id, FINISHED, item.options.on_end)

    def add_listener(self, item_id: str, signal: str, listener: ItemListener) -> None:
        if item_id not in self._listeners:
            raise KeyError(item_id)
        self._listeners[item_id][signal].append(listener)

    def on_finish(self, hook: Callable[[ActiveItem], None]) -> None:
        """Run hook after an item's lane bookkeeping has been updated."""
        self._finish_hooks.append(hook)

    def phase(self, item_id: str) -> Optional[ItemPhase]:
        return self._phases.get(item_id)

    def handle_started(self, item_id: str) -> None:
        if self._phases.get(item_id) is not ItemPhase.ENTERING:
            return
        self._phases[item_id] = ItemPhase.ACTIVE
        self._notify(item_id, STARTED)

    def handle_finished(self, item_id: str) -> None:
        if item_id not in self._phases:
            return
        self._phases[item_id] = ItemPhase.FINISHED
        self._notify(item_id, FINISHED)

        item = self.pool.remove_item(item_id)
        self.engine.clear_hints(item_id)
        self._listeners.pop(item_id, None)
        self._phases.pop(item_id, None)

        if item is None:
            return
        log_debug(logger, "Item finished", item_id=item_id, lane_index=item.lane_index)
        for hook in list(self._finish_hooks):
            hook(item)

    def _notify(self, item_id: str, signal: str) -> None:
        for listener in list(self._listeners.get(item_id, {}).get(signal, [])):
            safe_execute(
                lambda: listener(item_id, self.owner),
                f"{signal} callback failed for item {item_id}",
                logger,
            )
