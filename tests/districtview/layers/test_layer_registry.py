"""Unit tests for LayerRegistry — registration, remembered visibility, districts."""
from __future__ import annotations

import pytest

from districtview.layers import District, GeometryLayer, LayerKind, LayerRegistry
from districtview.scene.graph import SceneNode

NS = District("north-star", "NORTH STAR", "NORTH STAR", "NS")


def _layer(kind: LayerKind, district: District = NS) -> GeometryLayer:
    key = f"{district.prefix}-{kind.value}"
    return GeometryLayer(key, district, kind, SceneNode(key))


@pytest.fixture
def registry():
    return LayerRegistry()


@pytest.mark.unit
class TestRegistration:

    def test_register_and_get(self, registry):
        layer = _layer(LayerKind.STREET)
        assert registry.register(layer) == "NS-Street"
        assert registry.get("NS-Street") is layer
        assert "NS-Street" in registry
        assert len(registry) == 1

    def test_duplicate_key_rejected(self, registry):
        registry.register(_layer(LayerKind.STREET))
        with pytest.raises(ValueError):
            registry.register(_layer(LayerKind.STREET))

    def test_arrival_order(self, registry):
        registry.register(_layer(LayerKind.LAND))
        registry.register(_layer(LayerKind.BUILDING))
        assert [l.key for l in registry.list_layers()] == ["NS-Land", "NS-Building"]

    def test_by_kind(self, registry):
        registry.register(_layer(LayerKind.STREET))
        registry.register(_layer(LayerKind.LAND))
        assert [l.key for l in registry.by_kind(LayerKind.LAND)] == ["NS-Land"]

    def test_get_missing(self, registry):
        assert registry.get("NS-Plot") is None


@pytest.mark.unit
class TestVisibility:

    def test_set_visibility_on_loaded_layer(self, registry):
        layer = _layer(LayerKind.STREET)
        registry.register(layer)
        assert registry.set_visibility("NS-Street", False) is True
        assert layer.node.visible is False
        assert registry.is_visible("NS-Street") is False

    def test_toggle_before_load_is_remembered(self, registry):
        """Hiding a key that has not loaded yet applies when it arrives."""
        assert registry.set_visibility("NS-Plot", False) is False
        assert registry.is_visible("NS-Plot") is False
        layer = _layer(LayerKind.PLOT)
        registry.register(layer)
        assert layer.visible is False

    def test_toggle_for_never_loaded_key_is_harmless(self, registry):
        assert registry.set_visibility("ZZ-Street", False) is False
        assert registry.is_visible("ZZ-Street") is False
        assert len(registry) == 0

    def test_default_visibility(self, registry):
        assert registry.is_visible("NS-Land") is True

    def test_district_visibility(self, registry):
        registry.register(_layer(LayerKind.STREET))
        registry.register(_layer(LayerKind.LAND))
        changed = registry.set_district_visibility("NS", False)
        assert sorted(changed) == ["NS-Land", "NS-Street"]
        assert registry.is_visible("NS-Building") is False
        assert all(not l.visible for l in registry.list_layers())

    def test_district_visibility_limited_kinds(self, registry):
        registry.register(_layer(LayerKind.STREET))
        registry.register(_layer(LayerKind.LAND))
        changed = registry.set_district_visibility("NS", False, [LayerKind.LAND])
        assert changed == ["NS-Land"]
        assert registry.is_visible("NS-Street") is True
