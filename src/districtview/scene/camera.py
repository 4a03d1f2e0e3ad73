"""CameraRig — perspective camera plus orbit target (Z up)."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class CameraRig:
    """Camera pose and projection values consumed by the renderer.

    Attributes:
        position: Camera position in world space.
        target: Orbit-controls look-at target.
        fov: Vertical field of view in degrees.
        near: Near clipping plane.
        far: Far clipping plane.
        max_distance: Orbit-controls zoom-out limit.
    """

    position: np.ndarray = field(default_factory=lambda: np.array([40.0, 30.0, 60.0]))
    target: np.ndarray = field(default_factory=lambda: np.zeros(3))
    fov: float = 45.0
    near: float = 0.1
    far: float = 5000.0
    max_distance: float = 20000.0
    version: int = 0

    def set_pose(self, position, target) -> None:
        self.position = np.asarray(position, dtype=float).copy()
        self.target = np.asarray(target, dtype=float).copy()
        self.version += 1

    def to_dict(self) -> dict:
        return {
            "position": self.position.tolist(),
            "target": self.target.tolist(),
            "fov": self.fov,
            "near": self.near,
            "far": self.far,
            "max_distance": self.max_distance,
        }
