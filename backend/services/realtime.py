"""Realtime like notifications broadcast to every connected listener.

Listeners are WebSocket connections (or anything with an async
``send_json``). Delivery is fire-and-forget: frames are not acknowledged,
retried or persisted. A listener whose send fails, or does not finish
within ``SEND_TIMEOUT`` seconds, is dropped; sends run outside the lock so
one slow socket never holds up subscribers or other broadcasts.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from .schemas import (
    LikeAddedEvent,
    LikeCountUpdateEvent,
    LikePayload,
    LikeRemovedEvent,
    RealtimePayload,
)

LIKE_ADDED_EVENT = "likeAdded"
LIKE_REMOVED_EVENT = "likeRemoved"
LIKE_COUNT_UPDATE_EVENT = "likeCountUpdate"

logger = logging.getLogger(__name__)


@runtime_checkable
class SupportsSendJson(Protocol):
    async def send_json(self, data: Any) -> None: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class LikeEventBroadcaster:
    """Fan out like events to all subscribed listeners."""

    # Seconds a listener may take to accept a frame before it is dropped.
    SEND_TIMEOUT = 1.0

    def __init__(self) -> None:
        self._listeners: list[SupportsSendJson] = []
        self._lock = asyncio.Lock()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def subscribe(self, listener: SupportsSendJson) -> None:
        async with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)
        logger.info(
            "Realtime listener connected",
            extra={"listener_count": self.listener_count},
        )

    async def unsubscribe(self, listener: SupportsSendJson) -> None:
        async with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
        logger.info(
            "Realtime listener disconnected",
            extra={"listener_count": self.listener_count},
        )

    async def broadcast(self, event: str, payload: RealtimePayload) -> None:
        """Send one frame to every listener; slow or broken listeners are dropped."""
        frame = {"event": event, "data": payload.to_wire()}
        async with self._lock:
            listeners = list(self._listeners)
        if not listeners:
            return

        outcomes = await asyncio.gather(
            *(self._deliver(listener, event, frame) for listener in listeners)
        )
        dropped = [listener for listener, delivered in zip(listeners, outcomes) if not delivered]
        if dropped:
            async with self._lock:
                for listener in dropped:
                    if listener in self._listeners:
                        self._listeners.remove(listener)

    async def _deliver(
        self,
        listener: SupportsSendJson,
        event: str,
        frame: dict[str, Any],
    ) -> bool:
        try:
            await asyncio.wait_for(listener.send_json(frame), timeout=self.SEND_TIMEOUT)
        except TimeoutError:
            logger.warning(
                "Dropping realtime listener after send timed out",
                extra={"event": event, "timeout": self.SEND_TIMEOUT},
            )
            return False
        except Exception as send_error:
            logger.warning(
                "Dropping realtime listener after failed send",
                extra={"event": event},
                exc_info=send_error,
            )
            return False
        return True

    async def emit_like_added(self, post_id: int, like: LikePayload) -> None:
        await self.broadcast(
            LIKE_ADDED_EVENT,
            LikeAddedEvent(post_id=post_id, like=like, timestamp=_now()),
        )

    async def emit_like_removed(self, post_id: int, user_id: int) -> None:
        await self.broadcast(
            LIKE_REMOVED_EVENT,
            LikeRemovedEvent(post_id=post_id, user_id=user_id, timestamp=_now()),
        )

    async def emit_like_count_update(self, post_id: int, like_count: int) -> None:
        await self.broadcast(
            LIKE_COUNT_UPDATE_EVENT,
            LikeCountUpdateEvent(post_id=post_id, like_count=like_count, timestamp=_now()),
        )


_cached_broadcaster: LikeEventBroadcaster | None = None


def get_like_broadcaster() -> LikeEventBroadcaster:
    """Singleton accessor for the process-wide broadcaster."""
    global _cached_broadcaster
    if _cached_broadcaster is None:
        _cached_broadcaster = LikeEventBroadcaster()
    return _cached_broadcaster


def set_like_broadcaster(broadcaster: LikeEventBroadcaster | None) -> None:
    """Override the cached broadcaster (primarily for tests)."""
    global _cached_broadcaster
    _cached_broadcaster = broadcaster


__all__ = [
    "LIKE_ADDED_EVENT",
    "LIKE_REMOVED_EVENT",
    "LIKE_COUNT_UPDATE_EVENT",
    "SupportsSendJson",
    "LikeEventBroadcaster",
    "get_like_broadcaster",
    "set_like_broadcaster",
]
