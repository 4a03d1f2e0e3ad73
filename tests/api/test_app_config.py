"""Unit tests for Settings and their mapping onto ViewerConfig."""
from __future__ import annotations

import pytest

from app.config import Settings
from app.main import build_viewer_config


@pytest.mark.unit
class TestSettings:

    def test_defaults(self):
        cfg = Settings(_env_file=None)
        assert cfg.asset_root == "Blockout"
        assert cfg.asset_extension == "obj"
        assert cfg.scanner_event_lifetime == 60.0
        assert cfg.focus_duration == 1.8
        assert cfg.scanner_purge_on_stop is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ASSET_EXTENSION", "glb")
        monkeypatch.setenv("SCANNER_BURST_COUNT", "3")
        cfg = Settings(_env_file=None)
        assert cfg.asset_extension == "glb"
        assert cfg.scanner_burst_count == 3


@pytest.mark.unit
class TestBuildViewerConfig:

    def test_maps_scanner_and_camera(self):
        cfg = Settings(
            _env_file=None,
            scanner_burst_count=4,
            scanner_steady_max=8.0,
            scanner_purge_on_stop=True,
            focus_duration=2.5,
            camera_fov=60.0,
        )
        viewer_cfg = build_viewer_config(cfg)
        assert viewer_cfg.scanner.burst_count == 4
        assert viewer_cfg.scanner.steady_max == 8.0
        assert viewer_cfg.scanner.purge_on_stop is True
        assert viewer_cfg.focus_duration == 2.5
        assert viewer_cfg.camera_fov == 60.0
        assert viewer_cfg.auxiliary == ()

    def test_center_asset_becomes_auxiliary(self):
        viewer_cfg = build_viewer_config(Settings(_env_file=None, center_asset="Blockout/center.glb"))
        assert len(viewer_cfg.auxiliary) == 1
        assert viewer_cfg.auxiliary[0].url == "Blockout/center.glb"
