"""Unit tests for EventBus — pub/sub with per-subscriber type filters."""
from __future__ import annotations

import queue

import pytest

from districtview.comms import EventBus
from districtview.comms.event_bus import LOAD_PROGRESS, SCANNER_EVENT_SPAWNED


@pytest.mark.unit
class TestEventBus:

    def test_publish_delivers(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.publish(LOAD_PROGRESS, {"completed": 1})
        msg = q.get_nowait()
        assert msg == {"type": LOAD_PROGRESS, "data": {"completed": 1}}

    def test_publish_without_data(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.publish("ping")
        assert "data" not in q.get_nowait()

    def test_type_filter(self):
        bus = EventBus()
        q = bus.subscribe(types={SCANNER_EVENT_SPAWNED})
        bus.publish(LOAD_PROGRESS, {})
        bus.publish(SCANNER_EVENT_SPAWNED, {"id": "x"})
        assert q.get_nowait()["type"] == SCANNER_EVENT_SPAWNED
        with pytest.raises(queue.Empty):
            q.get_nowait()

    def test_unsubscribe(self):
        bus = EventBus()
        q = bus.subscribe()
        assert bus.subscriber_count == 1
        bus.unsubscribe(q)
        assert bus.subscriber_count == 0
        bus.publish("x")
        assert q.empty()

    def test_overflow_drops_oldest(self):
        bus = EventBus(maxsize=3)
        q = bus.subscribe()
        for i in range(5):
            bus.publish("n", {"i": i})
        assert [q.get_nowait()["data"]["i"] for _ in range(3)] == [2, 3, 4]
