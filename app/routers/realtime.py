import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from app.core.security import decode_access_token
from app.database import SessionLocal
from app.repos.user_repo import get_by_id
from app.services.notifier import ADMIN_ROOM, manager, notifier

logger = logging.getLogger(__name__)
router = APIRouter(tags=["realtime"])


def _is_admin_token(token: str | None) -> bool:
    user_id = decode_access_token(token) if token else None
    if not user_id:
        return False
    db = SessionLocal()
    try:
        user = get_by_id(db, user_id)
        return bool(user and user.is_active and user.is_admin)
    finally:
        db.close()


@router.websocket("/ws")
async def realtime_events(websocket: WebSocket):
    """
    Event stream. Every client receives job events; send
    {"action": "join", "room": "admin-room", "token": "<jwt>"} with an admin
    token to also receive new-feedback events.
    """
    notifier.bind_loop(asyncio.get_running_loop())
    await manager.connect(websocket)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                await websocket.send_json({"event": "error", "data": {"message": "Expected a text frame"}})
                continue
            try:
                msg = json.loads(raw)
            except ValueError:
                await websocket.send_json({"event": "error", "data": {"message": "Invalid JSON"}})
                continue
            if not isinstance(msg, dict):
                await websocket.send_json({"event": "error", "data": {"message": "Expected an object"}})
                continue

            action = msg.get("action")
            room = msg.get("room")
            if action == "join" and room == ADMIN_ROOM:
                if await run_in_threadpool(_is_admin_token, msg.get("token")):
                    manager.join(websocket, ADMIN_ROOM)
                    await websocket.send_json({"event": "joined", "data": {"room": ADMIN_ROOM}})
                else:
                    await websocket.send_json({"event": "error", "data": {"message": "Admin access required"}})
            elif action == "leave" and room:
                manager.leave(websocket, room)
                await websocket.send_json({"event": "left", "data": {"room": room}})
            else:
                await websocket.send_json({"event": "error", "data": {"message": "Unknown action"}})
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("Websocket handler failed")
    finally:
        manager.disconnect(websocket)
