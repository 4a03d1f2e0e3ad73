"""Geometry-load primitive backed by trimesh.

``GeometryLoader.load(url)`` fetches one OBJ / GLB / GLTF asset (local path
or http(s) URL), parses it with trimesh off the event loop, and converts the
resulting ``trimesh.Scene`` into a SceneNode subtree: one MeshNode per
geometry instance, with the instance transform as its local matrix.

Any fetch or parse error propagates to the caller; the load coordinator is
responsible for treating it as a per-layer failure.
"""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

import httpx
import numpy as np
import trimesh
from loguru import logger

from districtview.scene.graph import Geometry, MeshNode, SceneNode, TintableMaterial

_USER_AGENT = "districtview/0.1.0"


def _material_color(geom: trimesh.Trimesh) -> np.ndarray:
    """Base color of a trimesh geometry as RGB floats, white if unknown."""
    visual = getattr(geom, "visual", None)
    material = getattr(visual, "material", None)
    if material is not None:
        factor = getattr(material, "baseColorFactor", None)
        if factor is None:
            factor = getattr(material, "diffuse", None)
        if factor is not None:
            rgba = np.asarray(factor, dtype=float)[:3]
            return rgba / 255.0 if rgba.max() > 1.0 else rgba
    return np.ones(3)


def scene_to_node(scene: trimesh.Scene, name: str) -> SceneNode:
    """Convert a parsed trimesh scene into a SceneNode subtree."""
    root = SceneNode(name)
    for node_name in scene.graph.nodes_geometry:
        transform, geom_name = scene.graph[node_name]
        geom = scene.geometry.get(geom_name)
        if not isinstance(geom, trimesh.Trimesh):
            logger.debug(f"{name}: skipping non-surface geometry {geom_name}")
            continue
        mesh = MeshNode(
            f"{name}/{node_name}",
            Geometry(positions=geom.vertices, indices=geom.faces),
            [TintableMaterial(color=_material_color(geom))],
            matrix=np.asarray(transform, dtype=float),
        )
        root.add(mesh)
    return root


class GeometryLoader:
    """Async loader for district geometry files."""

    def __init__(self, timeout: float = 30.0) -> None:
        self._timeout = timeout

    async def load(self, url: str) -> SceneNode:
        name = Path(url.split("?", 1)[0]).stem
        file_type = Path(url.split("?", 1)[0]).suffix.lstrip(".").lower() or None
        if url.startswith(("http://", "https://")):
            data = await self._fetch(url)
            scene = await asyncio.to_thread(
                trimesh.load, io.BytesIO(data), file_type=file_type, force="scene",
            )
        else:
            path = Path(url)
            if not path.exists():
                raise FileNotFoundError(f"Geometry asset not found: {url}")
            scene = await asyncio.to_thread(trimesh.load, str(path), force="scene")
        return scene_to_node(scene, name)

    async def _fetch(self, url: str) -> bytes:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.get(url, headers={"User-Agent": _USER_AGENT})
            resp.raise_for_status()
        return resp.content

    async def __call__(self, url: str) -> SceneNode:
        return await self.load(url)
