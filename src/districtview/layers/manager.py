"""LayerRegistry — registry of loaded geometry layers.

Holds GeometryLayer objects keyed by ``"{prefix}-{kind}"`` and remembers the
desired visibility of every key, including keys whose layer has not loaded
yet (or never will).  A layer registered later picks up its remembered
visibility on arrival.
"""

from __future__ import annotations

from districtview.layers.layer import GeometryLayer, LayerKind, layer_key


class LayerRegistry:
    """Registry of loaded district layers plus desired-visibility memory."""

    def __init__(self) -> None:
        self._layers: dict[str, GeometryLayer] = {}
        self._desired: dict[str, bool] = {}

    def __len__(self) -> int:
        return len(self._layers)

    def __contains__(self, key: object) -> bool:
        return key in self._layers

    def register(self, layer: GeometryLayer) -> str:
        """Register a freshly loaded layer and apply remembered visibility.

        Args:
            layer: The layer to register.

        Returns:
            The layer key.

        Raises:
            ValueError: If a layer is already registered under the key.
        """
        if layer.key in self._layers:
            raise ValueError(f"Layer already registered: {layer.key}")
        desired = self._desired.get(layer.key)
        if desired is not None:
            layer.visible = desired
        self._layers[layer.key] = layer
        return layer.key

    def get(self, key: str) -> GeometryLayer | None:
        return self._layers.get(key)

    def list_layers(self) -> list[GeometryLayer]:
        """All registered layers in registration (arrival) order."""
        return list(self._layers.values())

    def by_kind(self, kind: LayerKind) -> list[GeometryLayer]:
        return [layer for layer in self.list_layers() if layer.kind is kind]

    def is_visible(self, key: str) -> bool:
        """Effective visibility: the loaded layer's flag, else the desired one."""
        layer = self._layers.get(key)
        if layer is not None:
            return layer.visible
        return self._desired.get(key, True)

    def set_visibility(self, key: str, visible: bool) -> bool:
        """Set the visibility of a layer, loaded or not.

        Returns:
            True if a loaded layer was changed, False if only the desired
            state was remembered.
        """
        self._desired[key] = visible
        layer = self._layers.get(key)
        if layer is None:
            return False
        layer.visible = visible
        return True

    def set_district_visibility(
        self, prefix: str, visible: bool, kinds: tuple[LayerKind, ...] | list[LayerKind] = tuple(LayerKind),
    ) -> list[str]:
        """Show or hide every layer kind of one district.

        Returns:
            Keys of the loaded layers that were changed.
        """
        changed = []
        for kind in kinds:
            key = layer_key(prefix, kind)
            if self.set_visibility(key, visible):
                changed.append(key)
        return changed
