"""Camera pose API."""

from __future__ import annotations

from fastapi import APIRouter, Request

from app.routers import get_viewer

router = APIRouter(prefix="/api/camera", tags=["camera"])


@router.get("")
async def get_camera(request: Request):
    """Current camera pose, transition state and grid placement."""
    viewer = get_viewer(request)
    data = viewer.camera.to_dict()
    data["transition_active"] = viewer.choreographer.active
    data["grid"] = {
        "position": viewer.grid.position.tolist(),
        "base_z": viewer.grid.base_z,
        "size": viewer.grid.size,
        "uniforms": viewer.grid.uniforms(),
    }
    return data
