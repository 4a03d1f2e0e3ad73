"""World assembly pipeline: load coordination, post-load assembly, grid."""

from districtview.world.assembler import AssemblyReport, SampleEntry, WorldAssembler
from districtview.world.coordinator import (
    AssetLoadCoordinator,
    AuxiliaryAsset,
    LoadOutcome,
    LoadSummary,
    LoadTask,
)
from districtview.world.grid import ReferenceGrid
from districtview.world.progress import LoadProgress

__all__ = [
    "AssemblyReport",
    "AssetLoadCoordinator",
    "AuxiliaryAsset",
    "LoadOutcome",
    "LoadProgress",
    "LoadSummary",
    "LoadTask",
    "ReferenceGrid",
    "SampleEntry",
    "WorldAssembler",
]
