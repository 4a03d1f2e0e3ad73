"""Deterministic stand-ins for clocks, timers, loaders and geometry.

FakeScheduler implements the viewer's timer facility on a virtual clock:
nothing fires until the test calls ``advance`` or ``run_next``, and every
``call_later`` delay is recorded so cadence tests can assert exact timing.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import numpy as np

from districtview.scene.graph import Geometry, MeshNode, SceneNode, TintableMaterial

BASE_WALL = datetime(2026, 3, 14, 21, 30, 0)


class FakeClock:
    """Monotonic clock under test control (seconds)."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def wall(self) -> datetime:
        return BASE_WALL + timedelta(seconds=self.now)


class FakeTimer:
    def __init__(self, when: float, delay: float, callback, seq: int) -> None:
        self.when = when
        self.delay = delay
        self.callback = callback
        self.seq = seq
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual timer facility sharing a FakeClock."""

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.clock = clock or FakeClock()
        self.timers: list[FakeTimer] = []
        self._seq = 0

    def call_later(self, delay: float, callback) -> FakeTimer:
        self._seq += 1
        timer = FakeTimer(self.clock.now + delay, delay, callback, self._seq)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        live = [t for t in self.timers if not t.cancelled and not t.fired]
        return sorted(live, key=lambda t: (t.when, t.seq))

    def run_next(self) -> FakeTimer | None:
        """Fire the earliest pending timer, moving the clock to it."""
        pending = self.pending
        if not pending:
            return None
        timer = pending[0]
        self.clock.now = max(self.clock.now, timer.when)
        timer.fired = True
        timer.callback()
        return timer

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every timer due on the way."""
        target = self.clock.now + seconds
        fired = 0
        while True:
            pending = self.pending
            if not pending or pending[0].when > target:
                break
            self.run_next()
            fired += 1
        self.clock.now = target
        return fired


def make_mesh(name: str, triangles, indexed: bool = True, matrix=None) -> MeshNode:
    """MeshNode from a list of triangles, each three (x, y, z) vertices."""
    tris = np.asarray(triangles, dtype=float).reshape(-1, 3, 3)
    if indexed:
        positions = tris.reshape(-1, 3)
        indices = np.arange(len(positions))[::-1].copy()
        # Reverse storage order so indices actually matter
        positions = positions[::-1].copy()
        geometry = Geometry(positions=positions, indices=indices)
    else:
        geometry = Geometry(positions=tris.reshape(-1, 3))
    return MeshNode(name, geometry, [TintableMaterial()], matrix=matrix)


def make_layer_node(name: str, triangles) -> SceneNode:
    node = SceneNode(name)
    node.add(make_mesh(f"{name}/mesh", triangles))
    return node


def square(x0: float, y0: float, size: float, z: float = 0.0) -> list:
    """Two triangles covering an axis-aligned square at height z."""
    a = (x0, y0, z)
    b = (x0 + size, y0, z)
    c = (x0 + size, y0 + size, z)
    d = (x0, y0 + size, z)
    return [[a, b, c], [a, c, d]]


class FakeLoader:
    """Async load primitive returning canned nodes or raising canned errors.

    ``delays`` maps a URL substring to a sleep before settling, to shuffle
    completion order.
    """

    def __init__(self, nodes=None, failures=None, delays=None, default=None) -> None:
        self.nodes = dict(nodes or {})
        self.failures = dict(failures or {})
        self.delays = dict(delays or {})
        self.default = default
        self.calls: list[str] = []
        self.settled: list[str] = []

    def _match(self, table: dict, url: str):
        for key, value in table.items():
            if key in url:
                return value
        return None

    async def __call__(self, url: str) -> SceneNode:
        self.calls.append(url)
        delay = self._match(self.delays, url)
        await asyncio.sleep(delay or 0)
        self.settled.append(url)
        error = self._match(self.failures, url)
        if error is not None:
            raise error
        node = self._match(self.nodes, url)
        if node is None and self.default is not None:
            node = self.default(url)
        if node is None:
            raise FileNotFoundError(url)
        return node
