"""API routers and shared request helpers."""

from fastapi import HTTPException, Request


def get_viewer(request: Request):
    """Retrieve the DistrictViewer from app state or fail with 503."""
    viewer = getattr(request.app.state, "viewer", None)
    if viewer is None:
        raise HTTPException(503, "Viewer not available")
    return viewer
