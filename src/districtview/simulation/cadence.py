"""Spawn cadence state machine for the scanner feed.

States:  Stopped -> Burst(remaining) -> Steady

  enable()   any state -> Burst(burst_count); spawn now, next fire after
             the short burst delay
  fire()     Burst(n):  spawn, n -= 1; stay in Burst while n > 0 (short
                        delay), otherwise move to Steady (random delay)
             Steady:    spawn, random delay in [steady_min, steady_max)
             Stopped:   nothing (a stale timer)
  disable()  any state -> Stopped; nothing scheduled

The machine is pure: it never touches timers itself.  Each transition
returns a Step telling the caller whether to spawn and when (if at all) to
fire again.
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class Stopped:
    name = "stopped"


@dataclass(frozen=True)
class Burst:
    remaining: int
    name = "burst"


@dataclass(frozen=True)
class Steady:
    name = "steady"


CadenceState = Stopped | Burst | Steady


@dataclass(frozen=True)
class Step:
    """Outcome of one transition."""

    state: CadenceState
    spawn: bool
    delay: float | None


class SpawnCadence:
    """Burst-then-steady spawn timing."""

    def __init__(
        self,
        burst_count: int = 10,
        burst_delay: float = 1.0,
        steady_min: float = 1.0,
        steady_max: float = 5.0,
        rng: random.Random | None = None,
    ) -> None:
        if steady_max < steady_min:
            raise ValueError("steady_max must be >= steady_min")
        self.burst_count = burst_count
        self.burst_delay = burst_delay
        self.steady_min = steady_min
        self.steady_max = steady_max
        self._rng = rng or random.Random()
        self._state: CadenceState = Stopped()

    @property
    def state(self) -> CadenceState:
        return self._state

    @property
    def listening(self) -> bool:
        return not isinstance(self._state, Stopped)

    def steady_delay(self) -> float:
        return self.steady_min + self._rng.random() * (self.steady_max - self.steady_min)

    def enable(self) -> Step:
        if self.burst_count > 0:
            self._state = Burst(self.burst_count)
            return Step(self._state, spawn=True, delay=self.burst_delay)
        self._state = Steady()
        return Step(self._state, spawn=True, delay=self.steady_delay())

    def disable(self) -> Step:
        self._state = Stopped()
        return Step(self._state, spawn=False, delay=None)

    def fire(self) -> Step:
        state = self._state
        if isinstance(state, Burst):
            remaining = state.remaining - 1
            if remaining > 0:
                self._state = Burst(remaining)
                return Step(self._state, spawn=True, delay=self.burst_delay)
            self._state = Steady()
            return Step(self._state, spawn=True, delay=self.steady_delay())
        if isinstance(state, Steady):
            return Step(state, spawn=True, delay=self.steady_delay())
        return Step(state, spawn=False, delay=None)
