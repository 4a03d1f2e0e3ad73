"""ScannerEventEngine — simulated live feed of incidents on street geometry.

Architecture
------------
The engine owns three things: the spawn cadence (SpawnCadence, a pure
state machine), the pending spawn timer, and the registry of live events.
It consumes the assembler's sample cache and the SpatialSampler but never
mutates either.

Event lifecycle
---------------
spawn_event() creates five artifacts together: the marker, the label,
the list entry, the expiry timer, and the registry entry.  remove_event()
tears all five down together and is idempotent; expiry and user removal
both go through it, so a removed event can never be re-removed by its own
timer (the timer is cancelled first).

Timing
------
All waiting is a scheduled callback on the injected Scheduler.  Two clocks
are injected as well: a monotonic clock for pulse animation and a wall
clock for the displayed time.  Tests replace all three.
"""

from __future__ import annotations

import math
import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Sequence

import numpy as np
from loguru import logger

from districtview.comms.event_bus import (
    SCANNER_EVENT_REMOVED,
    SCANNER_EVENT_SPAWNED,
    SCANNER_LISTENING,
)
from districtview.layers.catalogue import SCANNER_MESSAGES
from districtview.simulation.cadence import SpawnCadence
from districtview.simulation.sampler import SpatialSampler
from districtview.simulation.visuals import (
    EventFeed,
    Label,
    ListEntry,
    Marker,
    render_label_bitmap,
)

if TYPE_CHECKING:
    from districtview.comms.event_bus import EventBus
    from districtview.scene.graph import SceneNode
    from districtview.simulation.scheduler import Scheduler, TimerHandle
    from districtview.world.assembler import SampleEntry


@dataclass(frozen=True)
class ScannerConfig:
    """Scanner tunables.  Durations in seconds, distances in world units."""

    burst_count: int = 10
    burst_delay: float = 1.0
    steady_min: float = 1.0
    steady_max: float = 5.0
    event_lifetime: float = 60.0
    purge_on_stop: bool = False
    marker_radius: float = 2000.0
    label_height: float = 7000.0
    pulse_amplitude: float = 0.2
    pulse_rate: float = 3.2  # rad/s
    messages: tuple[str, ...] = SCANNER_MESSAGES


@dataclass
class ScannerEvent:
    """One live scanner event and everything attached to it."""

    event_id: str
    position: np.ndarray
    message: str
    district_title: str
    timestamp: datetime
    created_at: float
    marker: Marker
    label: Label | None
    list_entry: ListEntry
    removal_timer: TimerHandle | None = field(default=None, repr=False)

    @property
    def time_label(self) -> str:
        return self.timestamp.strftime("%H:%M:%S")

    def pulse_scale(self, now: float, amplitude: float = 0.2, rate: float = 3.2) -> float:
        age = now - self.created_at
        return 1.0 + math.sin(age * rate) * amplitude

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "message": self.message,
            "district": self.district_title,
            "time": self.time_label,
            "position": self.position.tolist(),
        }


class ScannerEventEngine:
    """Spawns, animates and expires scanner events."""

    def __init__(
        self,
        scheduler: Scheduler,
        group: SceneNode,
        config: ScannerConfig | None = None,
        rng: random.Random | None = None,
        sampler: SpatialSampler | None = None,
        monotonic: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = datetime.now,
        on_select: Callable[[np.ndarray], None] | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or ScannerConfig()
        self._scheduler = scheduler
        self._group = group
        self._rng = rng or random.Random()
        self._sampler = sampler or SpatialSampler(self._rng)
        self._monotonic = monotonic
        self._wall_clock = wall_clock
        self._on_select = on_select
        self._event_bus = event_bus
        self._cadence = SpawnCadence(
            burst_count=self.config.burst_count,
            burst_delay=self.config.burst_delay,
            steady_min=self.config.steady_min,
            steady_max=self.config.steady_max,
            rng=self._rng,
        )
        self._timer: TimerHandle | None = None
        self._events: dict[str, ScannerEvent] = {}
        self._sample_cache: tuple[SampleEntry, ...] = ()
        self.feed = EventFeed()

    # -- Inputs --------------------------------------------------------------

    def set_sample_cache(self, entries: Sequence[SampleEntry]) -> None:
        self._sample_cache = tuple(entries)

    # -- Listening state -----------------------------------------------------

    @property
    def listening(self) -> bool:
        return self._cadence.listening

    @property
    def cadence_state(self) -> str:
        return self._cadence.state.name

    @property
    def burst_remaining(self) -> int:
        return getattr(self._cadence.state, "remaining", 0)

    def set_listening(self, listening: bool) -> None:
        if listening:
            self.enable()
        else:
            self.disable()

    def enable(self) -> None:
        """Start (or restart) listening: one spawn now, then a burst."""
        self._cancel_timer()
        step = self._cadence.enable()
        logger.info("Scanner listening enabled")
        self._publish(SCANNER_LISTENING, {"listening": True})
        self._schedule(step.delay)
        if step.spawn:
            self.spawn_event()

    def disable(self) -> None:
        was_listening = self.listening
        self._cancel_timer()
        self._cadence.disable()
        if was_listening:
            logger.info("Scanner listening disabled")
            self._publish(SCANNER_LISTENING, {"listening": False})
        if self.config.purge_on_stop:
            self.purge()

    def close(self) -> None:
        """Stop listening and tear down every live event."""
        self._cancel_timer()
        self._cadence.disable()
        self.purge()

    def _schedule(self, delay: float | None) -> None:
        if delay is None:
            return
        self._timer = self._scheduler.call_later(delay, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        step = self._cadence.fire()
        # Book the next fire before spawning
        self._schedule(step.delay)
        if step.spawn:
            self.spawn_event()

    # -- Event lifecycle -----------------------------------------------------

    @property
    def events(self) -> list[ScannerEvent]:
        """Live events, most recent first."""
        return [self._events[entry.event_id] for entry in self.feed
                if entry.event_id in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def get_event(self, event_id: str) -> ScannerEvent | None:
        return self._events.get(event_id)

    def _new_id(self, timestamp: datetime) -> str:
        millis = int(timestamp.timestamp() * 1000)
        while True:
            event_id = f"{millis}-{self._rng.getrandbits(24):06x}"
            if event_id not in self._events:
                return event_id

    def _choice(self, items: Sequence):
        return items[math.floor(self._rng.random() * len(items))]

    def spawn_event(self) -> ScannerEvent | None:
        """Spawn one event on a random street surface.

        Returns None (and spawns nothing) when the sample cache is empty or
        the chosen surface cannot be sampled.
        """
        if not self._sample_cache:
            logger.debug("Scanner spawn skipped: no sample surfaces")
            return None
        candidate = self._choice(self._sample_cache)
        point = self._sampler.sample(candidate.surface)
        if point is None:
            logger.debug(f"Scanner spawn skipped: {candidate.surface.name} has no triangles")
            return None

        cfg = self.config
        message = self._choice(cfg.messages)
        timestamp = self._wall_clock()
        created_at = self._monotonic()
        event_id = self._new_id(timestamp)
        time_label = timestamp.strftime("%H:%M:%S")

        marker = Marker(f"scanner-{event_id}", point, radius=cfg.marker_radius)
        self._group.add(marker)

        label = Label(
            f"scanner-label-{event_id}",
            point + np.array([0.0, 0.0, cfg.label_height]),
            render_label_bitmap(message, candidate.district_title, time_label),
        )
        self._group.add(label)

        entry = self.feed.prepend(ListEntry(
            event_id=event_id,
            message=message,
            district_title=candidate.district_title,
            time_label=time_label,
            on_select=self.select_event,
        ))

        timer = self._scheduler.call_later(
            cfg.event_lifetime, lambda: self.remove_event(event_id),
        )

        event = ScannerEvent(
            event_id=event_id,
            position=point,
            message=message,
            district_title=candidate.district_title,
            timestamp=timestamp,
            created_at=created_at,
            marker=marker,
            label=label,
            list_entry=entry,
            removal_timer=timer,
        )
        self._events[event_id] = event
        logger.debug(f"Scanner event {event_id}: {message} in {candidate.district_title}")
        self._publish(SCANNER_EVENT_SPAWNED, event.to_dict())
        return event

    def remove_event(self, event_id: str) -> bool:
        """Tear down one event.  Unknown ids are a no-op (returns False)."""
        event = self._events.pop(event_id, None)
        if event is None:
            return False
        if event.removal_timer is not None:
            event.removal_timer.cancel()
            event.removal_timer = None
        self._group.remove(event.marker)
        if event.label is not None:
            self._group.remove(event.label)
            event.label.dispose()
        self.feed.remove(event_id)
        logger.debug(f"Scanner event {event_id} removed")
        self._publish(SCANNER_EVENT_REMOVED, {"id": event_id})
        return True

    def purge(self) -> int:
        ids = list(self._events)
        for event_id in ids:
            self.remove_event(event_id)
        return len(ids)

    def select_event(self, event_id: str) -> bool:
        """Request a camera focus on a live event.  Stale ids are ignored."""
        event = self.get_event(event_id)
        if event is None:
            return False
        if self._on_select is not None:
            self._on_select(event.position.copy())
        return True

    # -- Per-frame -----------------------------------------------------------

    def tick(self, now: float | None = None) -> None:
        """Pulse every live marker.  Only the derived scale changes."""
        if not self._events:
            return
        if now is None:
            now = self._monotonic()
        cfg = self.config
        for event in self._events.values():
            event.marker.scale = event.pulse_scale(now, cfg.pulse_amplitude, cfg.pulse_rate)

    def _publish(self, event_type: str, data: dict) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event_type, data)
