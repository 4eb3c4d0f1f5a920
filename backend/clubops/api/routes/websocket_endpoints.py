"""
WebSocket endpoint for per-club real-time updates.

Auth: two modes, checked in order:
  1. Query-string: token passed as ``?token=...``.
  2. First-message: client sends ``{"event":"auth","token":"..."}`` as the
     first message after connecting.
Only members of the club may subscribe; others are closed with 4003.
"""
import asyncio
import json
import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from clubops.core.security import decode_access_token
from clubops.db.session import DbSession
from clubops.models.club import Club, UserClubRole
from clubops.services.websocket_service import EventType, WebSocketMessage, manager

logger = logging.getLogger(__name__)

router = APIRouter()

# Seconds the client has to send the first-message auth event.
_AUTH_TIMEOUT = 5.0


def validate_ws_token(token: Optional[str]) -> Optional[int]:
    """Return the user id carried by a valid, unrevoked token."""
    if not token:
        return None
    payload = decode_access_token(token)
    if not payload or payload.get("sub") is None:
        return None
    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        return None


async def authenticate_ws(websocket: WebSocket, query_token: Optional[str] = None) -> Optional[int]:
    """Accept the socket and authenticate it. Returns the user id, or None once closed."""
    await websocket.accept()

    if query_token:
        user_id = validate_ws_token(query_token)
        if user_id is None:
            await websocket.close(code=4001, reason="Invalid token")
        return user_id

    try:
        raw = await asyncio.wait_for(websocket.receive_text(), timeout=_AUTH_TIMEOUT)
        message = json.loads(raw)
    except asyncio.TimeoutError:
        await websocket.close(code=4001, reason="Authentication timeout")
        return None
    except json.JSONDecodeError:
        await websocket.close(code=4001, reason="Invalid auth message")
        return None
    except WebSocketDisconnect:
        return None

    if not isinstance(message, dict) or message.get("event") != "auth":
        await websocket.close(code=4001, reason="First message must be {\"event\":\"auth\",\"token\":\"...\"}")
        return None

    user_id = validate_ws_token(message.get("token"))
    if user_id is None:
        await websocket.close(code=4001, reason="Invalid token")
    return user_id


@router.websocket("/clubs/{club_id}")
async def club_websocket(
    websocket: WebSocket,
    club_id: int,
    db: DbSession,
    token: Optional[str] = Query(None, description="Auth token"),
):
    """
    Live events for one club: queue changes, VIP bookings and checkouts,
    new dancers and bar fees.

    Clients may send ``{"event": "ping"}`` and receive ``pong``.
    """
    user_id = await authenticate_ws(websocket, query_token=token)
    if user_id is None:
        return

    membership = (
        db.query(UserClubRole)
        .join(Club, UserClubRole.club_id == Club.id)
        .filter(
            UserClubRole.user_id == user_id,
            UserClubRole.club_id == club_id,
            Club.is_active.is_(True),
        )
        .first()
    )
    if not membership:
        logger.warning(f"WebSocket denied: user {user_id} is not a member of club {club_id}")
        await websocket.close(code=4003, reason="Not authorized for this club")
        return

    if not await manager.connect(websocket, club_id, user_id=user_id):
        return

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received: {data[:100]}")
                continue

            if isinstance(message, dict) and message.get("event") == "ping":
                await manager.send_personal(websocket, WebSocketMessage(
                    event=EventType.PONG,
                    data={"timestamp": message.get("timestamp")},
                    club_id=club_id,
                ))
    except WebSocketDisconnect:
        manager.disconnect(websocket)
