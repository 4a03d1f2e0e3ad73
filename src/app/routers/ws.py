"""WebSocket endpoint mirroring viewer notifications to clients.

Bus messages are drained on the event loop by ``start_event_bridge`` and
fanned out to every open ``/ws/live`` socket with a UTC timestamp added.
"""

import asyncio
import json
import queue
from datetime import datetime, timezone

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

router = APIRouter(prefix="/ws", tags=["websocket"])


class LiveConnections:
    """Open /ws/live sockets."""

    def __init__(self):
        self._sockets: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sockets)

    async def attach(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._sockets.add(websocket)
        logger.info(f"Live socket attached ({len(self._sockets)} open)")

    async def detach(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._sockets.discard(websocket)
        logger.info(f"Live socket detached ({len(self._sockets)} open)")

    async def send_all(self, message: dict) -> int:
        """Send one message to every socket.  Returns the number reached."""
        async with self._lock:
            targets = list(self._sockets)
        if not targets:
            return 0

        payload = json.dumps(message)
        dead = []
        for websocket in targets:
            try:
                await websocket.send_text(payload)
            except Exception as e:
                logger.warning(f"Dropping live socket: {e}")
                dead.append(websocket)
        if dead:
            async with self._lock:
                self._sockets.difference_update(dead)
        return len(targets) - len(dead)


connections = LiveConnections()


def _stamp(msg: dict) -> dict:
    return {**msg, "timestamp": datetime.now(timezone.utc).isoformat()}


@router.websocket("/live")
async def websocket_live(websocket: WebSocket):
    """Live viewer notifications (progress, load failures, scanner list)."""
    await connections.attach(websocket)
    await websocket.send_json(_stamp({"type": "connected"}))
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue
            kind = message.get("type") if isinstance(message, dict) else None
            if kind == "ping":
                await websocket.send_json(_stamp({"type": "pong"}))
            else:
                await websocket.send_json({"type": "error", "message": f"Unknown message type: {kind}"})
    except WebSocketDisconnect:
        await connections.detach(websocket)


async def drain_bus(sub: queue.Queue) -> int:
    """Forward every queued bus message.  Returns the number drained."""
    drained = 0
    while True:
        try:
            msg = sub.get_nowait()
        except queue.Empty:
            return drained
        await connections.send_all(_stamp(msg))
        drained += 1


def start_event_bridge(event_bus, interval: float = 0.05) -> asyncio.Task:
    """Forward EventBus messages to WebSocket clients from the event loop."""
    sub = event_bus.subscribe()

    async def bridge_loop():
        try:
            while True:
                await drain_bus(sub)
                await asyncio.sleep(interval)
        finally:
            event_bus.unsubscribe(sub)

    return asyncio.create_task(bridge_loop(), name="ws-bridge")
