"""Default district catalogue, layer kinds and scanner message catalogue."""

from __future__ import annotations

from districtview.layers.layer import District, LayerKind

DISTRICTS: tuple[District, ...] = (
    District("north-star", "NORTH STAR", "NORTH STAR", "NS", 0x0B9A4C),
    District("flashing-lights", "FLASHING LIGHTS", "FLASHING LIGHTS", "FL", 0xFEB953),
    District("nexus", "NEXUS", "NEXUS", "NX", 0xB0B5C8),
    District("space-mind", "SPACE MIND", "SPACE MIND", "SM", 0x7B59FA),
    District("little-meow", "LITTLE MEOW", "LITTLE MEOW", "LM", 0xE63036),
    District("tranquility-gardens", "TRANQUILITY GARDENS", "TRANQUILITY GARDENS", "TG", 0x8FD558),
    District("haven-heights", "HAVEN HEIGHTS", "HAVEN HEIGHTS", "HH", 0x5A98FB),
    District("district-zero", "DISTRICT ZERO", "DISTRICT ZERO", "DZ", 0xFF5819),
)

LAYER_KINDS: tuple[LayerKind, ...] = tuple(LayerKind)

SCANNER_MESSAGES: tuple[str, ...] = (
    "Shots Fired",
    "Forum Breach",
    "Agent Eliminated",
    "Car Accident",
    "Loot Dropped",
    "Active Robbery",
    "Pedestrian Assault",
    "Street Race",
    "Suspicious Activity",
)


def district_by_prefix(
    prefix: str, districts: tuple[District, ...] | list[District] = DISTRICTS,
) -> District | None:
    for district in districts:
        if district.prefix == prefix:
            return district
    return None


def validate_catalogue(districts: tuple[District, ...] | list[District]) -> None:
    """Raise ValueError when two districts share a prefix."""
    seen: set[str] = set()
    for district in districts:
        if district.prefix in seen:
            raise ValueError(f"Duplicate district prefix: {district.prefix}")
        if "-" in district.prefix:
            raise ValueError(f"District prefix may not contain '-': {district.prefix}")
        seen.add(district.prefix)
