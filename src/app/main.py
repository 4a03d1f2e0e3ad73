"""DISTRICT SCANNER — interactive 3D district map viewer.

FastAPI shell around one DistrictViewer.  The lifespan handler builds the
viewer, starts world loading in the background, and runs the render tick
loop on the event loop; routers translate HTTP / WebSocket traffic into
viewer intents.
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.config import Settings, settings
from app.routers.camera import router as camera_router
from app.routers.layers import router as layers_router
from app.routers.scanner import router as scanner_router
from app.routers.ws import router as ws_router, start_event_bridge


def build_viewer_config(cfg: Settings):
    """Map flat settings onto the core's ViewerConfig."""
    from districtview import ViewerConfig
    from districtview.simulation.scanner import ScannerConfig
    from districtview.world.coordinator import AuxiliaryAsset

    auxiliary = ()
    if cfg.center_asset:
        auxiliary = (AuxiliaryAsset("center", cfg.center_asset),)

    return ViewerConfig(
        asset_root=cfg.asset_root,
        asset_extension=cfg.asset_extension,
        auxiliary=auxiliary,
        camera_fov=cfg.camera_fov,
        focus_duration=cfg.focus_duration,
        focus_min_distance=cfg.focus_min_distance,
        focus_max_distance=cfg.focus_max_distance,
        scanner=ScannerConfig(
            burst_count=cfg.scanner_burst_count,
            burst_delay=cfg.scanner_burst_delay,
            steady_min=cfg.scanner_steady_min,
            steady_max=cfg.scanner_steady_max,
            event_lifetime=cfg.scanner_event_lifetime,
            purge_on_stop=cfg.scanner_purge_on_stop,
        ),
    )


async def _render_loop(viewer, hz: float) -> None:
    """Drive viewer.tick() at the configured frame rate until cancelled."""
    period = 1.0 / max(hz, 1.0)
    while True:
        try:
            viewer.tick()
        except Exception as e:
            logger.error(f"Render tick failed: {e}")
        await asyncio.sleep(period)


async def _load_world(viewer) -> None:
    try:
        report = await viewer.load_world()
        logger.info(f"World ready: {report.to_dict()}")
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"World assembly failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    from districtview import DistrictViewer

    logger.info("=" * 60)
    logger.info(f"  {settings.app_name} - INITIALIZING")
    logger.info("=" * 60)

    viewer = DistrictViewer(build_viewer_config(settings))
    app.state.viewer = viewer

    background: list[asyncio.Task] = []
    if settings.load_on_startup:
        logger.info(f"Loading district layers from {settings.asset_root} (.{settings.asset_extension})")
        background.append(asyncio.create_task(_load_world(viewer), name="load-world"))
    background.append(asyncio.create_task(_render_loop(viewer, settings.render_hz), name="render-tick"))
    background.append(start_event_bridge(viewer.event_bus))
    logger.info(f"Render loop started ({settings.render_hz:.0f} Hz)")

    yield

    logger.info("Shutting down...")
    for task in background:
        task.cancel()
    for task in background:
        try:
            await task
        except asyncio.CancelledError:
            pass
    viewer.close()
    app.state.viewer = None
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Interactive 3D district map viewer with a simulated scanner feed",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(layers_router)
app.include_router(scanner_router)
app.include_router(camera_router)
app.include_router(ws_router)


@app.get("/health")
async def health():
    viewer = getattr(app.state, "viewer", None)
    return {
        "status": "ok",
        "ready": bool(viewer is not None and viewer.ready),
    }


def main() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    main()
