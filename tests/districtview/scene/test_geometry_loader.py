"""Tests for GeometryLoader — trimesh-backed OBJ loading into scene nodes."""
from __future__ import annotations

import numpy as np
import pytest
import trimesh

from districtview.scene import Box3, MeshNode
from districtview.scene.loader import GeometryLoader, scene_to_node


@pytest.mark.unit
class TestSceneToNode:

    def test_one_mesh_per_geometry_instance(self):
        scene = trimesh.Scene()
        scene.add_geometry(trimesh.creation.box(extents=(2, 2, 2)), node_name="a")
        scene.add_geometry(
            trimesh.creation.box(extents=(2, 2, 2)),
            node_name="b",
            transform=trimesh.transformations.translation_matrix([10, 0, 0]),
        )
        node = scene_to_node(scene, "NS-Building")
        meshes = list(node.meshes())
        assert node.name == "NS-Building"
        assert len(meshes) == 2
        assert all(isinstance(m, MeshNode) for m in meshes)
        assert all(m.geometry.triangle_count == 12 for m in meshes)
        box = Box3.from_node(node)
        np.testing.assert_allclose(box.min, [-1, -1, -1])
        np.testing.assert_allclose(box.max, [11, 1, 1])


@pytest.mark.unit
class TestGeometryLoader:

    @pytest.mark.anyio
    async def test_load_local_obj(self, tmp_path):
        path = tmp_path / "NS-Street.obj"
        trimesh.creation.box(extents=(4, 4, 4)).export(str(path))

        node = await GeometryLoader().load(str(path))

        meshes = list(node.meshes())
        assert node.name == "NS-Street"
        assert len(meshes) == 1
        assert meshes[0].geometry.triangle_count == 12
        np.testing.assert_allclose(Box3.from_node(node).size(), [4, 4, 4])

    @pytest.mark.anyio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await GeometryLoader()(str(tmp_path / "missing.obj"))
