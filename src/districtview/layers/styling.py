"""Per-kind material policy and district tint derivation.

Opacity by kind: Overpass 0.95, Plot 0.6, Land 0.5, everything else 0.75.
Tint intensity: Land is darkened (x0.5), Overpass brightened (x1.5).
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass

from districtview.layers.layer import LayerKind

RGB = tuple[float, float, float]

_OPACITY = {
    LayerKind.OVERPASS: 0.95,
    LayerKind.PLOT: 0.6,
    LayerKind.LAND: 0.5,
}
_DEFAULT_OPACITY = 0.75

_TINT_SCALE = {
    LayerKind.LAND: 0.5,
    LayerKind.OVERPASS: 1.5,
}


@dataclass(frozen=True)
class LayerStyle:
    """Material settings applied to every surface of a layer."""

    opacity: float
    tint: RGB | None
    double_sided: bool = True
    transparent: bool = True


def hex_to_rgb(value: int) -> RGB:
    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


def rgb_to_hex(rgb: RGB) -> int:
    r, g, b = (max(0, min(255, round(c * 255))) for c in rgb)
    return (r << 16) | (g << 8) | b


def adjust_district_color(value: int) -> int:
    """Lighten and desaturate a district base color for use as a tint."""
    h, s, v = colorsys.rgb_to_hsv(*hex_to_rgb(value))
    s = min(1.0, max(0.0, s - 0.2))
    v = min(1.0, max(0.0, v + 1.0))
    return rgb_to_hex(colorsys.hsv_to_rgb(h, s, v))


def opacity_for(kind: LayerKind) -> float:
    return _OPACITY.get(kind, _DEFAULT_OPACITY)


def tint_for(kind: LayerKind, district_tint: int | None) -> RGB | None:
    """Scaled tint for one layer kind (components may exceed 1.0)."""
    if district_tint is None:
        return None
    scale = _TINT_SCALE.get(kind, 1.0)
    r, g, b = hex_to_rgb(district_tint)
    return (r * scale, g * scale, b * scale)


def style_for(kind: LayerKind, district_color: int | None) -> LayerStyle:
    tint = adjust_district_color(district_color) if district_color is not None else None
    return LayerStyle(opacity=opacity_for(kind), tint=tint_for(kind, tint))


def apply_style(node, style: LayerStyle) -> int:
    """Apply a LayerStyle to every material under ``node``.

    Tintable materials take the tint; non-tintable materials keep their
    color and only receive opacity and face settings.

    Returns:
        Number of materials updated.
    """
    count = 0
    for mesh in node.meshes():
        for material in mesh.materials:
            material.double_sided = style.double_sided
            material.transparent = style.transparent
            material.opacity = style.opacity
            if style.tint is not None and material.tintable:
                material.set_color(style.tint)
            material.mark_dirty()
            count += 1
    return count
