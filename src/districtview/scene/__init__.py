"""Scene graph primitives, bounds, and the default geometry loader."""

from districtview.scene.bounds import Box3
from districtview.scene.graph import (
    BasicMaterial,
    Geometry,
    MeshNode,
    SceneNode,
    TintableMaterial,
    transform_points,
    translation_matrix,
)

__all__ = [
    "BasicMaterial",
    "Box3",
    "Geometry",
    "MeshNode",
    "SceneNode",
    "TintableMaterial",
    "transform_points",
    "translation_matrix",
]
