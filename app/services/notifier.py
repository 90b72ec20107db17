"""
Real-time notifications.

Handlers depend on the Notifier capability (get_notifier) and call
emit(event, payload, room) after their write has committed. The websocket
implementation hands delivery to the event loop that owns the sockets and
returns immediately; nothing it does can fail the calling request.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

ADMIN_ROOM = "admin-room"


class Notifier(ABC):
    """Publish primitive: emit a named event with a payload to everyone, or to one room."""

    @abstractmethod
    def emit(self, event: str, payload: dict[str, Any], room: str | None = None) -> None:
        ...


class ConnectionManager:
    """Tracks open websockets and the rooms each one has joined. Used from the event loop only."""

    def __init__(self) -> None:
        self._rooms: dict[WebSocket, set[str]] = {}

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._rooms[websocket] = set()
        logger.debug("Websocket connected (%d open)", len(self._rooms))

    def disconnect(self, websocket: WebSocket) -> None:
        self._rooms.pop(websocket, None)
        logger.debug("Websocket disconnected (%d open)", len(self._rooms))

    def join(self, websocket: WebSocket, room: str) -> None:
        if websocket in self._rooms:
            self._rooms[websocket].add(room)

    def leave(self, websocket: WebSocket, room: str) -> None:
        if websocket in self._rooms:
            self._rooms[websocket].discard(room)

    def recipients(self, room: str | None = None) -> list[WebSocket]:
        if room is None:
            return list(self._rooms)
        return [ws for ws, rooms in self._rooms.items() if room in rooms]

    @property
    def connection_count(self) -> int:
        return len(self._rooms)

    async def broadcast(self, event: str, payload: Any, room: str | None = None) -> int:
        """Send to every recipient; sockets that fail are dropped. Returns deliveries made."""
        message = {"event": event, "data": payload}
        delivered = 0
        for websocket in self.recipients(room):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning("Dropping websocket after failed send of %s: %s", event, e)
                self.disconnect(websocket)
        return delivered


class WebSocketNotifier(Notifier):
    def __init__(self, manager: ConnectionManager) -> None:
        self.manager = manager
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def emit(self, event: str, payload: dict[str, Any], room: str | None = None) -> None:
        try:
            loop = self._loop
            if loop is None or loop.is_closed():
                logger.debug("No websocket listeners yet; %s not delivered", event)
                return
            body = jsonable_encoder(payload)
            asyncio.run_coroutine_threadsafe(self.manager.broadcast(event, body, room), loop)
            logger.debug("Queued %s for room=%s", event, room or "*")
        except Exception:
            logger.exception("Failed to publish %s notification", event)


manager = ConnectionManager()
notifier = WebSocketNotifier(manager)


def get_notifier() -> Notifier:
    return notifier


def publish(notifier: Notifier, event: str, payload: dict[str, Any], room: str | None = None) -> None:
    """Emit through any Notifier; a failing implementation is logged, never raised to the caller."""
    try:
        notifier.emit(event, payload, room)
    except Exception:
        logger.exception("Notifier %s raised while emitting %s", type(notifier).__name__, event)
