"""AssetLoadCoordinator — concurrent, failure-tolerant layer loading.

Fan-out / fan-in
----------------
``load_all`` issues one load per (district, layer kind) pair plus any
auxiliary assets, all at once on the running event loop.  Each task is
wrapped so that it always *settles*: an error from the load or from
attaching its result is caught, logged and reported as a failed
LoadOutcome instead of propagating.  The aggregate ``asyncio.gather``
therefore returns only after every task has settled, which is what gates
world assembly.  Cancellation is never swallowed.

Per-task settlement
-------------------
Success: style the node (opacity / tint by kind), register it (remembered
visibility applies), attach it under the world root (arrival order), then
advance progress.  Failure: log a warning naming the key, advance
progress, publish ``layer_load_failed``.  No automatic retry.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable

from loguru import logger

from districtview.comms.event_bus import LAYER_LOAD_FAILED, LOAD_PROGRESS
from districtview.layers.layer import District, GeometryLayer, LayerKind, layer_key
from districtview.layers.styling import apply_style, style_for
from districtview.world.progress import LoadProgress

if TYPE_CHECKING:
    from districtview.comms.event_bus import EventBus
    from districtview.layers.manager import LayerRegistry
    from districtview.scene.graph import SceneNode

LoadFn = Callable[[str], Awaitable["SceneNode"]]
ProgressObserver = Callable[[LoadProgress], None]


@dataclass(frozen=True)
class AuxiliaryAsset:
    """A non-layer asset loaded alongside the districts (e.g. a center piece)."""

    name: str
    url: str


@dataclass(frozen=True)
class LoadTask:
    key: str
    url: str
    district: District | None = None
    kind: LayerKind | None = None

    @property
    def auxiliary(self) -> bool:
        return self.district is None


@dataclass
class LoadOutcome:
    task: LoadTask
    node: SceneNode | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class LoadSummary:
    """Result of one settle-all pass."""

    outcomes: list[LoadOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[LoadOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[LoadOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def failed_keys(self) -> list[str]:
        return [o.task.key for o in self.failed]


def asset_url(asset_root: str, district: District, kind: LayerKind, extension: str) -> str:
    name = f"{layer_key(district.prefix, kind)}.{extension}"
    root = asset_root.rstrip("/")
    if not root:
        return f"{district.folder}/{name}"
    return f"{root}/{district.folder}/{name}"


class AssetLoadCoordinator:
    """Issues and tracks one load per district layer."""

    def __init__(
        self,
        load: LoadFn,
        registry: LayerRegistry,
        world_root: SceneNode,
        asset_root: str = "",
        extension: str = "obj",
        auxiliary: list[AuxiliaryAsset] | tuple[AuxiliaryAsset, ...] = (),
        on_progress: ProgressObserver | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._load = load
        self._registry = registry
        self._world_root = world_root
        self._asset_root = asset_root
        self._extension = extension.lstrip(".")
        self._auxiliary = list(auxiliary)
        self._on_progress = on_progress
        self._event_bus = event_bus
        self.progress = LoadProgress(total=0)
        self.auxiliary_nodes: dict[str, SceneNode] = {}

    def build_tasks(
        self, districts: list[District] | tuple[District, ...],
        kinds: list[LayerKind] | tuple[LayerKind, ...],
    ) -> list[LoadTask]:
        tasks = [
            LoadTask(
                key=layer_key(district.prefix, kind),
                url=asset_url(self._asset_root, district, kind, self._extension),
                district=district,
                kind=kind,
            )
            for district in districts
            for kind in kinds
        ]
        tasks.extend(LoadTask(key=aux.name, url=aux.url) for aux in self._auxiliary)
        return tasks

    def plan(
        self, districts: list[District] | tuple[District, ...],
        kinds: list[LayerKind] | tuple[LayerKind, ...],
    ) -> list[LoadTask]:
        """Build the task list and reset progress to 0 / len(tasks)."""
        tasks = self.build_tasks(districts, kinds)
        self.progress = LoadProgress(total=len(tasks))
        return tasks

    async def load_all(
        self, districts: list[District] | tuple[District, ...],
        kinds: list[LayerKind] | tuple[LayerKind, ...],
    ) -> LoadSummary:
        """Load every layer concurrently; return once all have settled."""
        tasks = self.plan(districts, kinds)
        self._report()
        outcomes = await asyncio.gather(*(self._run(task) for task in tasks))
        summary = LoadSummary(list(outcomes))
        if summary.failed:
            logger.warning(f"Failed to load {len(summary.failed)} meshes")
        logger.info(f"Loaded {len(summary.succeeded)} / {len(tasks)} meshes")
        return summary

    async def _run(self, task: LoadTask) -> LoadOutcome:
        try:
            node = await self._load(task.url)
            self._attach(task, node)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Failed to load {task.key}: {e}")
            self._settle(ok=False)
            if self._event_bus is not None:
                self._event_bus.publish(LAYER_LOAD_FAILED, {"key": task.key, "error": str(e)})
            return LoadOutcome(task, error=e)
        self._settle(ok=True)
        return LoadOutcome(task, node=node)

    def _attach(self, task: LoadTask, node: SceneNode) -> None:
        """Style, register and attach one loaded node.

        A layer rejected by the registry is never attached to the world root.
        """
        if node is None:
            raise TypeError(f"Loader returned no scene for {task.url}")
        node.name = task.key
        if task.auxiliary:
            self._world_root.add(node)
            self.auxiliary_nodes[task.key] = node
            return
        style = style_for(task.kind, task.district.color)
        apply_style(node, style)
        self._registry.register(GeometryLayer(
            key=task.key,
            district=task.district,
            kind=task.kind,
            node=node,
            tint=style.tint,
        ))
        self._world_root.add(node)

    def _settle(self, ok: bool) -> None:
        self.progress.advance(ok)
        self._report()

    def _report(self) -> None:
        if self._on_progress is not None:
            self._on_progress(self.progress)
        if self._event_bus is not None:
            self._event_bus.publish(LOAD_PROGRESS, self.progress.to_dict())
