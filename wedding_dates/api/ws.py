"""
WebSocket manager for real-time availability updates
"""

import json
import logging
from typing import Dict, List
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

AVAILABILITY_CHANNEL = "availability"

class WebSocketManager:
    """Manages WebSocket connections grouped by channel"""

    def __init__(self):
        # channel -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, channel: str):
        """Accept WebSocket connection and add it to the channel"""
        await websocket.accept()
        self.active_connections.setdefault(channel, []).append(websocket)
        logger.info(f"WebSocket connected to {channel}. Total connections: {len(self.active_connections[channel])}")

    def disconnect(self, websocket: WebSocket, channel: str):
        """Remove WebSocket connection from the channel"""
        connections = self.active_connections.get(channel)
        if not connections or websocket not in connections:
            return

        connections.remove(websocket)
        logger.info(f"WebSocket disconnected from {channel}. Remaining connections: {len(connections)}")

        # Clean up empty channels
        if not connections:
            del self.active_connections[channel]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast(self, channel: str, message: dict):
        """Broadcast message to every WebSocket on a channel"""
        if channel not in self.active_connections:
            logger.debug(f"No active connections for {channel}")
            return

        # Copy so disconnects during the loop don't shift the list
        connections = self.active_connections[channel].copy()

        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, channel)

    def get_connection_count(self, channel: str) -> int:
        """Get number of active connections for a channel"""
        return len(self.active_connections.get(channel, []))

    def get_all_connection_counts(self) -> Dict[str, int]:
        return {
            channel: len(connections)
            for channel, connections in self.active_connections.items()
        }

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

# Router for WebSocket endpoints
router = APIRouter()

@router.websocket("/availability")
async def availability_websocket(websocket: WebSocket):
    """Push availability changes to open calendars and admin views"""
    await websocket_manager.connect(websocket, AVAILABILITY_CHANNEL)

    try:
        welcome_message = {
            "type": "connection",
            "message": "Connected to availability updates",
            "connection_count": websocket_manager.get_connection_count(AVAILABILITY_CHANNEL)
        }
        await websocket_manager.send_personal_message(welcome_message, websocket)

        while True:
            data = await websocket.receive_text()

            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            # Heartbeat
            if client_message.get("type") == "ping":
                pong_message = {
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                }
                await websocket_manager.send_personal_message(pong_message, websocket)

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, AVAILABILITY_CHANNEL)

@router.get("/stats")
async def websocket_stats():
    """Get WebSocket connection statistics (for debugging)"""
    counts = websocket_manager.get_all_connection_counts()
    return {
        "total_channels_with_connections": len(counts),
        "connection_counts": counts,
        "total_connections": sum(counts.values())
    }
