"""DistrictViewer — composition root of the viewer core.

Wires the pipeline in dependency order:

    AssetLoadCoordinator -> WorldAssembler -> ScannerEventEngine
                                                   |  select
                                                   v
                                           CameraChoreographer

and exposes the user intents (toggle a layer, hide a district, listen,
select an event) plus the per-frame ``tick`` the render loop calls.

Everything runs on one event loop.  ``load_world`` is the only coroutine;
it returns after every load has settled and the world has been assembled.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from loguru import logger

from districtview.comms.event_bus import WORLD_ASSEMBLED, EventBus
from districtview.layers.catalogue import DISTRICTS, LAYER_KINDS, validate_catalogue
from districtview.layers.layer import District, LayerKind, layer_key
from districtview.layers.manager import LayerRegistry
from districtview.scene.camera import CameraRig
from districtview.scene.graph import SceneNode
from districtview.simulation.camera import CameraChoreographer
from districtview.simulation.scanner import ScannerConfig, ScannerEventEngine
from districtview.simulation.scheduler import LoopScheduler
from districtview.world.assembler import AssemblyReport, WorldAssembler
from districtview.world.coordinator import AssetLoadCoordinator, AuxiliaryAsset
from districtview.world.grid import ReferenceGrid

if TYPE_CHECKING:
    import numpy as np

    from districtview.simulation.scheduler import Scheduler
    from districtview.world.coordinator import LoadFn, ProgressObserver
    from districtview.world.progress import LoadProgress


@dataclass(frozen=True)
class ViewerConfig:
    """Static viewer configuration.  Durations in seconds."""

    districts: tuple[District, ...] = DISTRICTS
    layer_kinds: tuple[LayerKind, ...] = LAYER_KINDS
    asset_root: str = "Blockout"
    asset_extension: str = "obj"
    auxiliary: tuple[AuxiliaryAsset, ...] = ()
    camera_fov: float = 45.0
    focus_duration: float = 1.8
    focus_min_distance: float = 72000.0
    focus_max_distance: float = 180000.0
    scanner: ScannerConfig = field(default_factory=ScannerConfig)


class DistrictViewer:
    """Owns the scene, the registries and every core component."""

    def __init__(
        self,
        config: ViewerConfig | None = None,
        load: LoadFn | None = None,
        scheduler: Scheduler | None = None,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        monotonic: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = datetime.now,
        on_progress: ProgressObserver | None = None,
    ) -> None:
        self.config = config or ViewerConfig()
        validate_catalogue(self.config.districts)
        self._monotonic = monotonic
        self.event_bus = event_bus or EventBus()

        self.scene = SceneNode("scene")
        self.world_root = SceneNode("world")
        self.scanner_group = SceneNode("scanner")
        self.scene.add(self.world_root)
        self.scene.add(self.scanner_group)
        self.camera = CameraRig(fov=self.config.camera_fov)
        self.grid = ReferenceGrid()
        self.registry = LayerRegistry()

        if load is None:
            from districtview.scene.loader import GeometryLoader
            load = GeometryLoader().load

        self.coordinator = AssetLoadCoordinator(
            load,
            self.registry,
            self.world_root,
            asset_root=self.config.asset_root,
            extension=self.config.asset_extension,
            auxiliary=self.config.auxiliary,
            on_progress=on_progress,
            event_bus=self.event_bus,
        )
        self.coordinator.plan(self.config.districts, self.config.layer_kinds)
        self.assembler = WorldAssembler(self.registry, self.world_root, self.camera, self.grid)
        self.choreographer = CameraChoreographer(
            duration=self.config.focus_duration,
            min_distance=self.config.focus_min_distance,
            max_distance=self.config.focus_max_distance,
        )
        self.scanner = ScannerEventEngine(
            scheduler or LoopScheduler(),
            self.scanner_group,
            config=self.config.scanner,
            rng=rng,
            monotonic=monotonic,
            wall_clock=wall_clock,
            on_select=self.focus_on,
            event_bus=self.event_bus,
        )
        self._load_started = False

    # -- Loading -------------------------------------------------------------

    @property
    def progress(self) -> LoadProgress:
        return self.coordinator.progress

    @property
    def ready(self) -> bool:
        return self.assembler.assembled

    async def load_world(self) -> AssemblyReport:
        """Load every layer, wait for all to settle, then assemble once."""
        if self._load_started:
            raise RuntimeError("World already assembled")
        self._load_started = True
        await self.coordinator.load_all(self.config.districts, self.config.layer_kinds)
        report = self.assembler.assemble()
        self.scanner.set_sample_cache(self.assembler.sample_cache)
        self.event_bus.publish(WORLD_ASSEMBLED, report.to_dict())
        return report

    # -- Layer intents -------------------------------------------------------

    def set_layer_visibility(self, key: str, visible: bool) -> bool:
        return self.registry.set_visibility(key, visible)

    def set_district_visibility(self, prefix: str, visible: bool) -> list[str]:
        return self.registry.set_district_visibility(prefix, visible, self.config.layer_kinds)

    def known_layer_keys(self) -> list[str]:
        return [
            layer_key(d.prefix, kind)
            for d in self.config.districts
            for kind in self.config.layer_kinds
        ]

    def layer_states(self) -> list[dict]:
        """Every configured layer key with its loaded / visible state."""
        states = []
        for district in self.config.districts:
            for kind in self.config.layer_kinds:
                key = layer_key(district.prefix, kind)
                states.append({
                    "key": key,
                    "district": district.title,
                    "kind": kind.value,
                    "loaded": key in self.registry,
                    "visible": self.registry.is_visible(key),
                })
        return states

    # -- Scanner / camera intents ----------------------------------------------

    def set_listening(self, listening: bool) -> None:
        self.scanner.set_listening(listening)

    def select_event(self, event_id: str) -> bool:
        return self.scanner.select_event(event_id)

    def focus_on(self, point: np.ndarray) -> None:
        self.choreographer.focus(point, self.camera.position, self.camera.target, self._monotonic())

    # -- Per-frame -------------------------------------------------------------

    def tick(self, now: float | None = None) -> None:
        """Advance camera transition, grid placement and marker pulses."""
        if now is None:
            now = self._monotonic()
        pose = self.choreographer.tick(now)
        if pose is not None:
            self.camera.set_pose(pose.position, pose.target)
        self.grid.follow(self.camera.position)
        self.scanner.tick(now)

    def close(self) -> None:
        self.scanner.close()
        logger.info("District viewer closed")
