"""Layer visibility and loading progress API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from app.routers import get_viewer
from districtview.layers.catalogue import district_by_prefix

router = APIRouter(prefix="/api", tags=["layers"])


class VisibilityRequest(BaseModel):
    visible: bool


@router.get("/layers")
async def list_layers(request: Request):
    """Every configured layer with loaded / visible flags."""
    viewer = get_viewer(request)
    return viewer.layer_states()


@router.put("/layers/district/{prefix}/visibility")
async def set_district_visibility(prefix: str, body: VisibilityRequest, request: Request):
    """Show or hide all layers of one district ("hide all")."""
    viewer = get_viewer(request)
    if district_by_prefix(prefix, viewer.config.districts) is None:
        raise HTTPException(404, f"Unknown district: {prefix}")
    changed = viewer.set_district_visibility(prefix, body.visible)
    return {"prefix": prefix, "visible": body.visible, "changed": changed}


@router.put("/layers/{key}/visibility")
async def set_layer_visibility(key: str, body: VisibilityRequest, request: Request):
    """Toggle one layer.  Layers still loading remember the request."""
    viewer = get_viewer(request)
    if key not in viewer.known_layer_keys():
        raise HTTPException(404, f"Unknown layer: {key}")
    loaded = viewer.set_layer_visibility(key, body.visible)
    return {"key": key, "visible": body.visible, "loaded": loaded}


@router.get("/loading")
async def loading_progress(request: Request):
    """Progress snapshot for the loading overlay."""
    viewer = get_viewer(request)
    data = viewer.progress.to_dict()
    data["ready"] = viewer.ready
    return data
