"""Minimal scene graph — the render collaborator's node model.

The viewer core only needs a handful of scene-graph operations: attach and
detach nodes, toggle visibility, read a node's world transform, and walk a
subtree to find triangulated surfaces.  Nodes carry a 4x4 local transform
(numpy, column-vector convention, Z up) and compose it with their parents'
on demand; there is no cached matrixWorld to keep in sync.

Materials come in two variants.  ``BasicMaterial`` has opacity and face
settings only; ``TintableMaterial`` adds an RGB color.  Styling code checks
``material.tintable`` rather than probing for attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator

import numpy as np


@dataclass
class BasicMaterial:
    """Material without a color channel (e.g. textured or vertex-colored)."""

    tintable: ClassVar[bool] = False

    opacity: float = 1.0
    transparent: bool = False
    double_sided: bool = False
    version: int = 0

    def mark_dirty(self) -> None:
        """Tell the renderer the material needs re-uploading."""
        self.version += 1


@dataclass
class TintableMaterial(BasicMaterial):
    """Material with an RGB color that layer styling may overwrite."""

    tintable: ClassVar[bool] = True

    color: np.ndarray = field(default_factory=lambda: np.ones(3))

    def set_color(self, rgb) -> None:
        self.color = np.asarray(rgb, dtype=float).copy()


@dataclass
class Geometry:
    """Triangulated vertex data.

    Attributes:
        positions: (N, 3) float array of local-space vertex positions, or None
            when the geometry carries no addressable position data.
        indices: Flat int array of vertex indices, three per triangle, or None
            for non-indexed geometry (consecutive position triples).
    """

    positions: np.ndarray | None
    indices: np.ndarray | None = None

    def __post_init__(self) -> None:
        if self.positions is not None:
            self.positions = np.asarray(self.positions, dtype=float).reshape(-1, 3)
        if self.indices is not None:
            self.indices = np.asarray(self.indices, dtype=np.int64).ravel()

    @property
    def triangle_count(self) -> int:
        if self.positions is None:
            return 0
        if self.indices is not None and len(self.indices) >= 3:
            return len(self.indices) // 3
        return len(self.positions) // 3

    def triangle_indices(self, tri: int) -> tuple[int, int, int]:
        """Vertex indices of triangle ``tri``."""
        base = tri * 3
        if self.indices is not None and len(self.indices) >= 3:
            i0, i1, i2 = self.indices[base:base + 3]
            return int(i0), int(i1), int(i2)
        return base, base + 1, base + 2


def translation_matrix(offset) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = np.asarray(offset, dtype=float)
    return m


def transform_points(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Apply a 4x4 affine transform to an (N, 3) array of points."""
    pts = np.asarray(points, dtype=float).reshape(-1, 3)
    return pts @ matrix[:3, :3].T + matrix[:3, 3]


class SceneNode:
    """A named node with a local transform, visibility flag and children."""

    def __init__(self, name: str = "", matrix: np.ndarray | None = None) -> None:
        self.name = name
        self.visible = True
        self.matrix = np.eye(4) if matrix is None else np.asarray(matrix, dtype=float)
        self.parent: SceneNode | None = None
        self.children: list[SceneNode] = []
        self.render_order = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, children={len(self.children)})"

    # -- Hierarchy ---------------------------------------------------------

    def add(self, child: SceneNode) -> None:
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)

    def remove(self, child: SceneNode) -> bool:
        try:
            self.children.remove(child)
        except ValueError:
            return False
        child.parent = None
        return True

    def traverse(self) -> Iterator[SceneNode]:
        """Depth-first walk over this node and all descendants."""
        yield self
        for child in list(self.children):
            yield from child.traverse()

    def meshes(self) -> Iterator[MeshNode]:
        for node in self.traverse():
            if isinstance(node, MeshNode):
                yield node

    # -- Transform ---------------------------------------------------------

    @property
    def position(self) -> np.ndarray:
        return self.matrix[:3, 3].copy()

    @position.setter
    def position(self, value) -> None:
        self.matrix = self.matrix.copy()
        self.matrix[:3, 3] = np.asarray(value, dtype=float)

    def translate(self, offset) -> None:
        """Move the node by ``offset`` in its parent's frame."""
        self.matrix = translation_matrix(offset) @ self.matrix

    def world_matrix(self) -> np.ndarray:
        m = self.matrix
        node = self.parent
        while node is not None:
            m = node.matrix @ m
            node = node.parent
        return m


class MeshNode(SceneNode):
    """A node carrying a triangulated surface and its materials."""

    def __init__(
        self,
        name: str,
        geometry: Geometry | None,
        materials: list[BasicMaterial] | None = None,
        matrix: np.ndarray | None = None,
    ) -> None:
        super().__init__(name, matrix)
        self.geometry = geometry
        self.materials: list[BasicMaterial] = materials if materials is not None else [TintableMaterial()]

    def world_positions(self) -> np.ndarray | None:
        if self.geometry is None or self.geometry.positions is None:
            return None
        return transform_points(self.world_matrix(), self.geometry.positions)
