"""
WebSocket manager for live check-in updates
"""

import json
import logging
from typing import Dict, List
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages WebSocket connections, one room per show date"""

    def __init__(self):
        # ISO date -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, date: str):
        await websocket.accept()
        self.active_connections.setdefault(date, []).append(websocket)
        logger.info(f"WebSocket connected to {date}. Total connections: {len(self.active_connections[date])}")

    def disconnect(self, websocket: WebSocket, date: str):
        """Remove a connection; empty rooms are dropped"""
        connections = self.active_connections.get(date)
        if not connections or websocket not in connections:
            return
        connections.remove(websocket)
        logger.info(f"WebSocket disconnected from {date}. Remaining connections: {len(connections)}")
        if not connections:
            del self.active_connections[date]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        try:
            await websocket.send_text(json.dumps(message))
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast_to_date(self, date: str, message: dict):
        """Send a message to every client watching a date"""
        if date not in self.active_connections:
            logger.debug(f"No active connections for {date}")
            return

        disconnected = []
        for websocket in list(self.active_connections[date]):
            try:
                await websocket.send_text(json.dumps(message))
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, date)

    def get_connection_count(self, date: str) -> int:
        return len(self.active_connections.get(date, []))

    def get_all_connection_counts(self) -> Dict[str, int]:
        return {date: len(connections) for date, connections in self.active_connections.items()}

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

router = APIRouter()

@router.websocket("/checkin/{date}")
async def checkin_socket(websocket: WebSocket, date: str):
    """Live check-in feed for one show date"""
    await websocket_manager.connect(websocket, date)
    try:
        await websocket_manager.send_personal_message({
            "type": "connection",
            "date": date,
            "connection_count": websocket_manager.get_connection_count(date),
        }, websocket)

        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue
            # Heartbeat
            if client_message.get("type") == "ping":
                await websocket_manager.send_personal_message({
                    "type": "pong",
                    "timestamp": client_message.get("timestamp"),
                }, websocket)
    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, date)

@router.get("/stats")
async def websocket_stats():
    """Connection statistics per date"""
    counts = websocket_manager.get_all_connection_counts()
    return {
        "dates_with_connections": len(counts),
        "connection_counts": counts,
        "total_connections": sum(counts.values()),
    }
