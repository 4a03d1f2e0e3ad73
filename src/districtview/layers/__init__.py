"""District layers — data model, catalogue, registry and styling."""

from districtview.layers.catalogue import DISTRICTS, LAYER_KINDS, SCANNER_MESSAGES
from districtview.layers.layer import District, GeometryLayer, LayerKind, layer_key
from districtview.layers.manager import LayerRegistry

__all__ = [
    "DISTRICTS",
    "LAYER_KINDS",
    "SCANNER_MESSAGES",
    "District",
    "GeometryLayer",
    "LayerKind",
    "LayerRegistry",
    "layer_key",
]
