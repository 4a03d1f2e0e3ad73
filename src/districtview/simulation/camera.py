"""CameraChoreographer — timed focus transitions onto a world point.

focus() installs a CameraTransition from the current pose to a pose
looking at the target from a clamped distance, keeping the current viewing
direction.  A new focus simply replaces the one in flight; there is no
queue and no cancel token.  tick() advances the transition with a
symmetric quadratic ease and clears it once progress reaches 1.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

_DEFAULT_DIRECTION = np.array([1.0, 1.0, 1.0]) / np.sqrt(3.0)
_DEGENERATE_LENGTH = 0.001


def ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 2 / 2.0


@dataclass(frozen=True)
class CameraPose:
    position: np.ndarray
    target: np.ndarray


@dataclass(frozen=True)
class CameraTransition:
    start_time: float
    duration: float
    from_position: np.ndarray
    to_position: np.ndarray
    from_target: np.ndarray
    to_target: np.ndarray

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - self.start_time) / self.duration))

    def pose_at(self, now: float) -> CameraPose:
        eased = ease_in_out_quad(self.progress(now))
        return CameraPose(
            position=self.from_position + (self.to_position - self.from_position) * eased,
            target=self.from_target + (self.to_target - self.from_target) * eased,
        )


class CameraChoreographer:
    """Owns at most one in-flight camera transition."""

    def __init__(
        self,
        duration: float = 1.8,
        min_distance: float = 72000.0,
        max_distance: float = 180000.0,
    ) -> None:
        self.duration = duration
        self.min_distance = min_distance
        self.max_distance = max_distance
        self._transition: CameraTransition | None = None

    @property
    def active(self) -> bool:
        return self._transition is not None

    @property
    def transition(self) -> CameraTransition | None:
        return self._transition

    def desired_position(self, target, camera_position, look_target) -> np.ndarray:
        target = np.asarray(target, dtype=float)
        offset = np.asarray(camera_position, dtype=float) - np.asarray(look_target, dtype=float)
        length = float(np.linalg.norm(offset))
        distance = max(self.min_distance, min(length, self.max_distance))
        if length > _DEGENERATE_LENGTH:
            direction = offset / length
        else:
            direction = _DEFAULT_DIRECTION
        return target + direction * distance

    def focus(self, target, camera_position, look_target, now: float) -> CameraTransition:
        """Start a transition toward ``target``, replacing any in flight."""
        self._transition = CameraTransition(
            start_time=now,
            duration=self.duration,
            from_position=np.asarray(camera_position, dtype=float).copy(),
            to_position=self.desired_position(target, camera_position, look_target),
            from_target=np.asarray(look_target, dtype=float).copy(),
            to_target=np.asarray(target, dtype=float).copy(),
        )
        return self._transition

    def tick(self, now: float) -> CameraPose | None:
        """Pose for this frame, or None when no transition is active."""
        transition = self._transition
        if transition is None:
            return None
        pose = transition.pose_at(now)
        if transition.progress(now) >= 1.0:
            self._transition = None
        return pose
