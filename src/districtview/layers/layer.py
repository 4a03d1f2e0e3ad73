"""District, LayerKind and GeometryLayer — the static map data model.

A district is a named map region with its own asset folder and color
identity.  Each district ships one geometry file per layer kind; a loaded
file becomes a GeometryLayer keyed ``"{prefix}-{kind}"`` (e.g. ``NS-Street``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from districtview.scene.graph import SceneNode


class LayerKind(str, Enum):
    """Geometry category.  Declaration order is the display order."""

    BUILDING = "Building"
    OVERPASS = "Overpass"
    PLOT = "Plot"
    SIDEWALK = "Sidewalk"
    STREET = "Street"
    LAND = "Land"


@dataclass(frozen=True)
class District:
    """Static district configuration.

    Attributes:
        district_id: Stable identifier (lower-case slug).
        title: Display title shown in labels and the event list.
        folder: Asset folder name under the asset root.
        prefix: Short unique code used in layer keys.
        color: Base RGB color as a 0xRRGGBB integer.
    """

    district_id: str
    title: str
    folder: str
    prefix: str
    color: int = 0xFFFFFF


def layer_key(prefix: str, kind: LayerKind | str) -> str:
    """Build the registry key for one district layer."""
    value = kind.value if isinstance(kind, LayerKind) else kind
    return f"{prefix}-{value}"


@dataclass
class GeometryLayer:
    """One loaded geometry layer, owned by the world root.

    Attributes:
        key: Registry key, ``"{prefix}-{kind}"``.
        district: Owning district.
        kind: Layer kind.
        node: Render handle (scene node attached under the world root).
        tint: RGB tint applied to tintable materials, or None.
    """

    key: str
    district: District
    kind: LayerKind
    node: SceneNode
    tint: tuple[float, float, float] | None = None

    @property
    def visible(self) -> bool:
        return self.node.visible

    @visible.setter
    def visible(self, value: bool) -> None:
        self.node.visible = value
