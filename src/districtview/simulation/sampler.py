"""SpatialSampler — random points on triangulated surfaces.

A triangle is chosen uniformly *by index*, not by area, so densely
tessellated street segments receive proportionally more samples.  Inside
the chosen triangle the point is area-uniform, using the square-root
barycentric construction:

    u = 1 - sqrt(r1)
    v = sqrt(r1) * (1 - r2)
    w = sqrt(r1) * r2          (u + v + w = 1)

The point is computed in local space, moved through the surface's world
transform, then lifted along +Z so markers sit above the road.
"""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING

import numpy as np

from districtview.scene.graph import transform_points

if TYPE_CHECKING:
    from districtview.scene.graph import MeshNode

SURFACE_LIFT = 200.0


def barycentric_weights(r1: float, r2: float) -> tuple[float, float, float]:
    s = math.sqrt(r1)
    return 1.0 - s, s * (1.0 - r2), s * r2


class SpatialSampler:
    """Draws random points on MeshNode surfaces."""

    def __init__(self, rng: random.Random | None = None, lift: float = SURFACE_LIFT) -> None:
        self._rng = rng or random.Random()
        self.lift = lift

    def pick_triangle(self, surface: MeshNode) -> int | None:
        geometry = surface.geometry
        if geometry is None or geometry.positions is None:
            return None
        count = geometry.triangle_count
        if count <= 0:
            return None
        return math.floor(self._rng.random() * count)

    def sample(self, surface: MeshNode) -> np.ndarray | None:
        """Random world-space point on ``surface``, or None if it has no triangles."""
        tri = self.pick_triangle(surface)
        if tri is None:
            return None
        geometry = surface.geometry
        i0, i1, i2 = geometry.triangle_indices(tri)
        positions = geometry.positions
        if max(i0, i1, i2) >= len(positions):
            return None
        a, b, c = positions[i0], positions[i1], positions[i2]

        u, v, w = barycentric_weights(self._rng.random(), self._rng.random())
        local = a * u + b * v + c * w
        point = transform_points(surface.world_matrix(), local)[0]
        point[2] += self.lift
        return point
