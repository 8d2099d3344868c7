"""
Overflow Queue

FIFO buffer for items that found no lane. The screen drains exactly one
entry per placement event and sends it back through the normal
submission path, so a replayed item may land here again.

There is no bound and no drop policy: sustained overload grows the queue.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Optional

from bulletlanes.config import ScreenOptions

logger = logging.getLogger(__name__)


@dataclass
class PendingItem:
    """An accepted item waiting for lane capacity."""
    content: str
    options: ScreenOptions = field(default_factory=ScreenOptions)
    attempts: int = 0


class OverflowQueue:
    """FIFO of PendingItem with replay statistics."""

    def __init__(self):
        self._items: Deque[PendingItem] = deque()
        self.stats = {
            'enqueued': 0,
            'replayed': 0,
            'requeued': 0,
        }

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def enqueue(self, item: PendingItem) -> None:
        self._items.append(item)
        self.stats['enqueued'] += 1
        logger.debug("Queued item (%d waiting)", len(self._items))

    def requeue(self, item: PendingItem) -> None:
        """Put a replayed item that still did not fit back at the head."""
        item.attempts += 1
        self._items.appendleft(item)
        self.stats['requeued'] += 1

    def dequeue_one(self) -> Optional[PendingItem]:
        if not self._items:
            return None
        self.stats['replayed'] += 1
        return self._items.popleft()

    def get_status(self) -> Dict[str, Any]:
        return {
            'waiting': len(self._items),
            'stats': self.stats.copy(),
        }
