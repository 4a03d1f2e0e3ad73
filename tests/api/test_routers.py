"""Unit tests for the HTTP / WebSocket shell (/api/*, /ws/live).

Uses FastAPI TestClient over a minimal app holding a DistrictViewer built
on a fake loader and a manual scheduler; no assets or server needed.
"""
from __future__ import annotations

import asyncio
import random

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.routers.camera import router as camera_router
from app.routers.layers import router as layers_router
from app.routers.scanner import router as scanner_router
from app.routers.ws import drain_bus, router as ws_router
from districtview import DistrictViewer, ViewerConfig
from districtview.comms import EventBus
from districtview.layers import District, LayerKind
from tests.lib.fakes import FakeClock, FakeLoader, FakeScheduler, make_layer_node, square

DISTRICTS = (
    District("one", "ONE", "ONE", "D1", 0x112233),
    District("two", "TWO", "TWO", "D2", 0x445566),
)
KINDS = (LayerKind.STREET, LayerKind.LAND)


def _make_app(viewer=None):
    app = FastAPI()
    for router in (layers_router, scanner_router, camera_router, ws_router):
        app.include_router(router)
    app.state.viewer = viewer
    return app


def _make_viewer(load_world=True, failures=None):
    clock = FakeClock()
    scheduler = FakeScheduler(clock)
    viewer = DistrictViewer(
        ViewerConfig(districts=DISTRICTS, layer_kinds=KINDS, asset_root="assets"),
        load=FakeLoader(default=lambda url: make_layer_node(url, square(0, 0, 5000)),
                        failures=failures or {}),
        scheduler=scheduler,
        rng=random.Random(3),
        monotonic=clock,
        wall_clock=clock.wall,
    )
    if load_world:
        asyncio.run(viewer.load_world())
    return viewer, scheduler


@pytest.mark.unit
class TestNoViewer:

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/layers"),
        ("get", "/api/loading"),
        ("get", "/api/scanner"),
        ("get", "/api/scanner/events"),
        ("get", "/api/camera"),
    ])
    def test_503_without_viewer(self, method, path):
        client = TestClient(_make_app(None))
        resp = getattr(client, method)(path)
        assert resp.status_code == 503


@pytest.mark.unit
class TestLayersRouter:

    def test_list_layers(self):
        viewer, _ = _make_viewer(failures={"D2-Land": OSError("x")})
        client = TestClient(_make_app(viewer))
        data = client.get("/api/layers").json()
        assert len(data) == 4
        by_key = {row["key"]: row for row in data}
        assert by_key["D1-Street"] == {
            "key": "D1-Street", "district": "ONE", "kind": "Street", "loaded": True, "visible": True,
        }
        assert by_key["D2-Land"]["loaded"] is False

    def test_toggle_layer(self):
        viewer, _ = _make_viewer()
        client = TestClient(_make_app(viewer))
        resp = client.put("/api/layers/D1-Street/visibility", json={"visible": False})
        assert resp.status_code == 200
        assert resp.json() == {"key": "D1-Street", "visible": False, "loaded": True}
        assert viewer.registry.get("D1-Street").visible is False

    def test_toggle_before_load_is_remembered(self):
        viewer, _ = _make_viewer(load_world=False)
        client = TestClient(_make_app(viewer))
        resp = client.put("/api/layers/D2-Land/visibility", json={"visible": False})
        assert resp.json()["loaded"] is False
        asyncio.run(viewer.load_world())
        assert viewer.registry.get("D2-Land").visible is False

    def test_unknown_layer_404(self):
        viewer, _ = _make_viewer()
        client = TestClient(_make_app(viewer))
        resp = client.put("/api/layers/ZZ-Street/visibility", json={"visible": False})
        assert resp.status_code == 404

    def test_hide_district(self):
        viewer, _ = _make_viewer()
        client = TestClient(_make_app(viewer))
        resp = client.put("/api/layers/district/D2/visibility", json={"visible": False})
        assert resp.status_code == 200
        assert sorted(resp.json()["changed"]) == ["D2-Land", "D2-Street"]
        assert client.put("/api/layers/district/ZZ/visibility", json={"visible": False}).status_code == 404

    def test_loading_progress(self):
        viewer, _ = _make_viewer(failures={"D1-Land": OSError("x")})
        client = TestClient(_make_app(viewer))
        data = client.get("/api/loading").json()
        assert data["completed"] == 4
        assert data["total"] == 4
        assert data["failed"] == 1
        assert data["label"] == "4 / 4"
        assert data["ready"] is True

    def test_loading_before_start(self):
        viewer, _ = _make_viewer(load_world=False)
        client = TestClient(_make_app(viewer))
        data = client.get("/api/loading").json()
        assert data["ready"] is False
        assert data["done"] is False
        assert data["label"] == "0 / 4"


@pytest.mark.unit
class TestScannerRouter:

    def test_listen_and_list(self):
        viewer, scheduler = _make_viewer()
        client = TestClient(_make_app(viewer))
        resp = client.post("/api/scanner/listen", json={"listening": True})
        assert resp.json() == {
            "listening": True, "cadence": "burst", "burst_remaining": 10, "live_events": 1,
        }
        scheduler.advance(2.0)
        events = client.get("/api/scanner/events").json()
        assert len(events) == 3
        assert set(events[0]) == {"id", "message", "district", "time"}

    def test_stop_listening(self):
        viewer, _ = _make_viewer()
        client = TestClient(_make_app(viewer))
        client.post("/api/scanner/listen", json={"listening": True})
        data = client.post("/api/scanner/listen", json={"listening": False}).json()
        assert data["listening"] is False
        assert data["cadence"] == "stopped"
        assert client.get("/api/scanner").json()["live_events"] == 1

    def test_select_event(self):
        viewer, _ = _make_viewer()
        client = TestClient(_make_app(viewer))
        client.post("/api/scanner/listen", json={"listening": True})
        event_id = client.get("/api/scanner/events").json()[0]["id"]
        resp = client.post(f"/api/scanner/events/{event_id}/select")
        assert resp.json() == {"id": event_id, "status": "focusing"}
        assert client.get("/api/camera").json()["transition_active"] is True

    def test_select_stale_event_404(self):
        viewer, _ = _make_viewer()
        client = TestClient(_make_app(viewer))
        assert client.post("/api/scanner/events/nope/select").status_code == 404


@pytest.mark.unit
class TestCameraRouter:

    def test_camera_pose(self):
        viewer, _ = _make_viewer()
        client = TestClient(_make_app(viewer))
        data = client.get("/api/camera").json()
        assert len(data["position"]) == 3
        assert data["target"] == [0.0, 0.0, 0.0]
        assert data["transition_active"] is False
        assert data["grid"]["base_z"] == viewer.grid.base_z
        assert data["grid"]["uniforms"]["uSpacing"] == 5000.0


@pytest.mark.unit
class TestWebSocket:

    def test_ping_pong(self):
        viewer, _ = _make_viewer(load_world=False)
        client = TestClient(_make_app(viewer))
        with client.websocket_connect("/ws/live") as ws:
            assert ws.receive_json()["type"] == "connected"
            ws.send_json({"type": "ping"})
            assert ws.receive_json()["type"] == "pong"
            ws.send_text("not json")
            assert ws.receive_json()["type"] == "error"

    @pytest.mark.anyio
    async def test_drain_bus(self):
        bus = EventBus()
        sub = bus.subscribe()
        bus.publish("load_progress", {"completed": 1})
        bus.publish("load_progress", {"completed": 2})
        assert await drain_bus(sub) == 2
        assert sub.empty()
