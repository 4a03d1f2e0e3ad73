"""WorldAssembler — post-load framing, grid alignment and sample cache.

Runs exactly once, after the load coordinator has settled every task.
Each step reads the registry as it stands at that moment:

  1. frame()              recenter the world root on its bounding box and
                          derive camera distance / clip planes from it
  2. build_sample_cache() flatten every Street surface into
                          (surface, district title) pairs
  3. align_grid()         put the reference grid one unit under the
                          union bounds of the ground layers

An empty world is not an error: framing is skipped (camera untouched),
the cache stays empty, the grid keeps its elevation.

The sample cache is a snapshot.  Later visibility toggles do not rebuild
it, so hidden streets still receive scanner events.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from loguru import logger

from districtview.layers.layer import LayerKind
from districtview.scene.bounds import Box3

if TYPE_CHECKING:
    from districtview.layers.manager import LayerRegistry
    from districtview.scene.camera import CameraRig
    from districtview.scene.graph import MeshNode, SceneNode
    from districtview.world.grid import ReferenceGrid


@dataclass(frozen=True)
class SampleEntry:
    """One sample-eligible surface and the title of its district."""

    surface: MeshNode
    district_title: str


@dataclass(frozen=True)
class Framing:
    center: np.ndarray
    size: np.ndarray
    distance: float
    near: float
    far: float


@dataclass
class AssemblyReport:
    framing: Framing | None
    grid_base_z: float | None
    sample_count: int
    layer_count: int

    def to_dict(self) -> dict:
        return {
            "framed": self.framing is not None,
            "distance": self.framing.distance if self.framing else None,
            "grid_base_z": self.grid_base_z,
            "sample_count": self.sample_count,
            "layer_count": self.layer_count,
        }


def framing_distance(max_dim: float, fov_degrees: float, margin: float = 1.4) -> float:
    """Distance at which a cube of side ``max_dim`` fills the vertical fov."""
    fov = math.radians(fov_degrees)
    return max_dim / (2.0 * math.tan(fov / 2.0)) * margin


class WorldAssembler:
    """One-shot post-load stage over the layer registry."""

    FRAMING_MARGIN = 1.4
    GRID_CLEARANCE = 1.0

    def __init__(
        self,
        registry: LayerRegistry,
        world_root: SceneNode,
        camera: CameraRig,
        grid: ReferenceGrid,
        ground_kind: LayerKind = LayerKind.LAND,
        sample_kind: LayerKind = LayerKind.STREET,
    ) -> None:
        self._registry = registry
        self._world_root = world_root
        self._camera = camera
        self._grid = grid
        self._ground_kind = ground_kind
        self._sample_kind = sample_kind
        self._sample_cache: tuple[SampleEntry, ...] = ()
        self._report: AssemblyReport | None = None

    @property
    def assembled(self) -> bool:
        return self._report is not None

    @property
    def report(self) -> AssemblyReport | None:
        return self._report

    @property
    def sample_cache(self) -> tuple[SampleEntry, ...]:
        return self._sample_cache

    def assemble(self) -> AssemblyReport:
        if self._report is not None:
            raise RuntimeError("World already assembled")
        framing = self.frame()
        self.build_sample_cache()
        base_z = self.align_grid()
        self._report = AssemblyReport(
            framing=framing,
            grid_base_z=base_z,
            sample_count=len(self._sample_cache),
            layer_count=len(self._registry),
        )
        logger.info(
            f"World assembled: {len(self._registry)} layers, "
            f"{len(self._sample_cache)} sample surfaces"
        )
        return self._report

    def frame(self) -> Framing | None:
        box = Box3.from_node(self._world_root)
        if box.is_empty():
            logger.info("World is empty; skipping camera framing")
            return None

        size = box.size()
        center = box.center()
        self._world_root.translate(-center)

        distance = framing_distance(box.max_dim(), self._camera.fov, self.FRAMING_MARGIN)
        cam = self._camera
        cam.near = max(0.01, distance / 1000.0)
        cam.far = max(distance * 20.0, 50000.0)
        cam.max_distance = cam.far * 0.8
        cam.set_pose((distance * 0.6, distance * 0.4, distance), (0.0, 0.0, 0.0))
        logger.info(f"Framed world: max dimension {size.max():.1f}, camera distance {distance:.1f}")
        return Framing(center=center, size=size, distance=distance, near=cam.near, far=cam.far)

    def build_sample_cache(self) -> tuple[SampleEntry, ...]:
        entries = []
        for layer in self._registry.by_kind(self._sample_kind):
            for mesh in layer.node.meshes():
                if mesh.geometry is not None:
                    entries.append(SampleEntry(mesh, layer.district.title))
        self._sample_cache = tuple(entries)
        return self._sample_cache

    def align_grid(self) -> float | None:
        ground = None
        for layer in self._registry.by_kind(self._ground_kind):
            box = Box3.from_node(layer.node)
            if box.is_empty():
                continue
            ground = box if ground is None else ground.union(box)
        if ground is None:
            return None
        self._grid.base_z = float(ground.min[2]) - self.GRID_CLEARANCE
        return self._grid.base_z
