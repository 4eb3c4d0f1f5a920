"""
WebSocket Real-time Service
Live per-club updates for the queue, VIP rooms, roster and financials.
"""
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """WebSocket event types"""
    # Connection events
    CONNECTED = "connected"
    PONG = "pong"

    # Roster
    DANCER_CREATED = "dancer:created"

    # DJ queue
    QUEUE_UPDATED = "queue:updated"
    QUEUE_REORDERED = "queue:reordered"

    # VIP rooms
    VIP_BOOKED = "vip:booked"
    VIP_CHECKOUT = "vip:checkout"

    # Financial
    BAR_FEE = "financial:bar-fee"


@dataclass
class WebSocketMessage:
    """Standard WebSocket message format"""
    event: str
    data: Dict[str, Any]
    timestamp: Optional[str] = None
    club_id: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.event, EventType):
            self.event = self.event.value
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_json(self) -> str:
        return json.dumps(asdict(self), default=str)


class ConnectionManager:
    """
    Manages WebSocket connections grouped by club.
    Each club's subscribers form an isolated broadcast group.
    """

    MAX_CONNECTIONS_PER_CLUB = 500

    def __init__(self):
        self.club_connections: Dict[int, Set[WebSocket]] = {}
        self.connection_info: Dict[WebSocket, Dict[str, Any]] = {}
        self.stats = {
            "total_connections": 0,
            "messages_sent": 0,
            "messages_broadcast": 0,
        }

    async def connect(self, websocket: WebSocket, club_id: int, user_id: Optional[int] = None) -> bool:
        """Join an already-accepted WebSocket to its club's group.

        Returns False (and closes the socket) if the club is at capacity.
        """
        if len(self.club_connections.get(club_id, set())) >= self.MAX_CONNECTIONS_PER_CLUB:
            logger.warning(f"WebSocket rejected: club {club_id} at capacity")
            await websocket.close(code=1008, reason="Too many connections")
            return False

        self.club_connections.setdefault(club_id, set()).add(websocket)
        self.connection_info[websocket] = {
            "club_id": club_id,
            "user_id": user_id,
            "connected_at": datetime.now(timezone.utc).isoformat(),
        }
        self.stats["total_connections"] += 1

        await self.send_personal(websocket, WebSocketMessage(
            event=EventType.CONNECTED,
            data={"message": "Connected to real-time updates", "club_id": club_id},
            club_id=club_id,
        ))
        logger.info(f"WebSocket connected: club={club_id}, user={user_id}")
        return True

    def disconnect(self, websocket: WebSocket):
        """Remove a WebSocket connection"""
        info = self.connection_info.pop(websocket, {})
        club_id = info.get("club_id")

        if club_id in self.club_connections:
            self.club_connections[club_id].discard(websocket)
            if not self.club_connections[club_id]:
                del self.club_connections[club_id]

        logger.info(f"WebSocket disconnected: club={club_id}")

    async def send_personal(self, websocket: WebSocket, message: WebSocketMessage):
        """Send message to a specific connection"""
        try:
            await websocket.send_text(message.to_json())
            self.stats["messages_sent"] += 1
        except Exception as e:
            logger.error(f"Failed to send message: {e}")
            self.disconnect(websocket)

    async def broadcast_club(self, club_id: int, message: WebSocketMessage):
        """Broadcast message to every connection of one club.

        Best-effort: connections that fail are dropped, nothing is queued.
        """
        message.club_id = club_id
        connections = self.club_connections.get(club_id, set()).copy()
        if not connections:
            return

        payload = message.to_json()
        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(payload)
            except Exception:
                disconnected.append(websocket)

        for ws in disconnected:
            self.disconnect(ws)

        self.stats["messages_broadcast"] += 1

    def get_connection_count(self, club_id: Optional[int] = None) -> int:
        if club_id is not None:
            return len(self.club_connections.get(club_id, set()))
        return sum(len(c) for c in self.club_connections.values())

    def get_stats(self) -> Dict:
        """Get connection statistics"""
        return {
            **self.stats,
            "active_clubs": len(self.club_connections),
            "active_connections": self.get_connection_count(),
        }


# Global connection manager instance
manager = ConnectionManager()


async def emit_club_event(club_id: int, event: EventType, data: Dict[str, Any]):
    """Broadcast a domain event to a club. Scheduled as a background task after commit."""
    await manager.broadcast_club(club_id, WebSocketMessage(event=event, data=data))
