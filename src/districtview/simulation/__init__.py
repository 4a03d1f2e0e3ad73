"""Scanner simulation: sampling, cadence, event lifecycle, camera focus."""

from districtview.simulation.cadence import Burst, SpawnCadence, Steady, Stopped
from districtview.simulation.camera import CameraChoreographer, CameraPose, CameraTransition
from districtview.simulation.sampler import SpatialSampler
from districtview.simulation.scanner import ScannerConfig, ScannerEvent, ScannerEventEngine
from districtview.simulation.scheduler import LoopScheduler

__all__ = [
    "Burst",
    "CameraChoreographer",
    "CameraPose",
    "CameraTransition",
    "LoopScheduler",
    "ScannerConfig",
    "ScannerEvent",
    "ScannerEventEngine",
    "SpatialSampler",
    "SpawnCadence",
    "Steady",
    "Stopped",
]
