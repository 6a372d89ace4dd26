"""Broadcast-only WebSocket endpoint for like events."""

from __future__ import annotations

from fastapi import APIRouter, Depends, WebSocket

from services.realtime import LikeEventBroadcaster, get_like_broadcaster

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def like_events(
    websocket: WebSocket,
    broadcaster: LikeEventBroadcaster = Depends(get_like_broadcaster),
) -> None:
    await websocket.accept()
    await broadcaster.subscribe(websocket)
    try:
        # Inbound frames are read only to notice the disconnect.
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        await broadcaster.unsubscribe(websocket)
