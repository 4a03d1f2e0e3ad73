"""Scanner feed API — listen toggle, live event list, selection."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from app.routers import get_viewer

router = APIRouter(prefix="/api/scanner", tags=["scanner"])


class ListenRequest(BaseModel):
    listening: bool


def _status(scanner) -> dict:
    return {
        "listening": scanner.listening,
        "cadence": scanner.cadence_state,
        "burst_remaining": scanner.burst_remaining,
        "live_events": len(scanner),
    }


@router.get("")
async def scanner_status(request: Request):
    viewer = get_viewer(request)
    return _status(viewer.scanner)


@router.post("/listen")
async def set_listening(body: ListenRequest, request: Request):
    """Enable or disable the simulated scanner feed."""
    viewer = get_viewer(request)
    viewer.set_listening(body.listening)
    return _status(viewer.scanner)


@router.get("/events")
async def list_events(request: Request):
    """Live events, most recent first."""
    viewer = get_viewer(request)
    return viewer.scanner.feed.summaries()


@router.post("/events/{event_id}/select")
async def select_event(event_id: str, request: Request):
    """Fly the camera to a live event."""
    viewer = get_viewer(request)
    if not viewer.select_event(event_id):
        raise HTTPException(404, f"Event not live: {event_id}")
    return {"id": event_id, "status": "focusing"}
