"""Unit tests for the app's background render tick loop."""
from __future__ import annotations

import asyncio

import pytest

from app.main import _render_loop


class _FlakyViewer:
    """Viewer stand-in whose first tick raises."""

    def __init__(self):
        self.ticks = 0

    def tick(self):
        self.ticks += 1
        if self.ticks == 1:
            raise RuntimeError("bad frame")


@pytest.mark.unit
class TestRenderLoop:

    @pytest.mark.anyio
    async def test_tick_error_does_not_stop_loop(self):
        viewer = _FlakyViewer()
        task = asyncio.create_task(_render_loop(viewer, 1000.0))
        await asyncio.sleep(0.05)
        assert not task.done()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert viewer.ticks > 1
