"""ReferenceGrid — placement state of the fading ground grid.

The grid itself is drawn by a shader outside this package; the core only
decides where the plane sits.  It follows the camera in x/y every frame so
the fade is always centered under the viewer, and sits at ``base_z``, which
world assembly lowers to just beneath the ground layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class ReferenceGrid:
    color: int = 0xC8C8C8
    spacing: float = 5000.0
    line_width: float = 150.0
    fade_start: float = 120000.0
    fade_end: float = 600000.0
    opacity: float = 0.3
    base_z: float = -1.0
    position: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, -1.0]))

    @property
    def size(self) -> float:
        return self.fade_end * 20

    def follow(self, camera_position) -> None:
        cam = np.asarray(camera_position, dtype=float)
        self.position = np.array([cam[0], cam[1], self.base_z])

    def uniforms(self) -> dict:
        return {
            "uColor": self.color,
            "uSpacing": self.spacing,
            "uLineWidth": self.line_width,
            "uFadeStart": self.fade_start,
            "uFadeEnd": self.fade_end,
            "uOpacity": self.opacity,
        }
