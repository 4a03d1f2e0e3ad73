"""Axis-aligned bounding boxes over scene nodes."""

from __future__ import annotations

import numpy as np

from districtview.scene.graph import SceneNode


class Box3:
    """World-space AABB.  A fresh box is empty (min=+inf, max=-inf)."""

    def __init__(self, minimum=None, maximum=None) -> None:
        self.min = np.full(3, np.inf) if minimum is None else np.asarray(minimum, dtype=float)
        self.max = np.full(3, -np.inf) if maximum is None else np.asarray(maximum, dtype=float)

    def __repr__(self) -> str:
        if self.is_empty():
            return "Box3(empty)"
        return f"Box3(min={self.min.tolist()}, max={self.max.tolist()})"

    @classmethod
    def from_node(cls, node: SceneNode) -> Box3:
        """Bounds of every surface under ``node`` in world space.

        Hidden nodes are included; visibility is a display concern.
        """
        box = cls()
        for mesh in node.meshes():
            pts = mesh.world_positions()
            if pts is not None and len(pts):
                box.expand_by_points(pts)
        return box

    def is_empty(self) -> bool:
        return bool(np.any(self.max < self.min))

    def expand_by_points(self, points) -> None:
        pts = np.asarray(points, dtype=float).reshape(-1, 3)
        if not len(pts):
            return
        self.min = np.minimum(self.min, pts.min(axis=0))
        self.max = np.maximum(self.max, pts.max(axis=0))

    def union(self, other: Box3) -> Box3:
        return Box3(np.minimum(self.min, other.min), np.maximum(self.max, other.max))

    def size(self) -> np.ndarray:
        if self.is_empty():
            return np.zeros(3)
        return self.max - self.min

    def center(self) -> np.ndarray:
        if self.is_empty():
            return np.zeros(3)
        return (self.min + self.max) / 2.0

    def max_dim(self) -> float:
        return float(self.size().max())
