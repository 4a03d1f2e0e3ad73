"""EventBus — thread-safe pub/sub for viewer notifications.

The viewer core publishes progress, load failures, world assembly and
scanner list changes here; the web shell (or any other display
collaborator) subscribes and renders them.  Each subscriber owns a bounded
queue so a slow consumer cannot block the render tick.
"""

from __future__ import annotations

import queue
import threading

# Event types published by the viewer core
LOAD_PROGRESS = "load_progress"
LAYER_LOAD_FAILED = "layer_load_failed"
WORLD_ASSEMBLED = "world_assembled"
SCANNER_EVENT_SPAWNED = "scanner_event_spawned"
SCANNER_EVENT_REMOVED = "scanner_event_removed"
SCANNER_LISTENING = "scanner_listening"


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self, maxsize: int = 100) -> None:
        self._lock = threading.Lock()
        self._maxsize = maxsize
        self._subscribers: list[tuple[queue.Queue, frozenset[str] | None]] = []

    def subscribe(self, types: set[str] | list[str] | None = None) -> queue.Queue:
        """Subscribe to events.  Returns a Queue that receives messages.

        Args:
            types: Event types to receive.  None receives everything.
        """
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        wanted = frozenset(types) if types is not None else None
        with self._lock:
            self._subscribers.append((q, wanted))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(s, w) for s, w in self._subscribers if s is not q]

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q, wanted in self._subscribers:
                if wanted is not None and event_type not in wanted:
                    continue
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    # Drop oldest so the newest state always gets through
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass
