"""
Tests for websocket broadcasting of availability changes
"""

import asyncio
import json

from wedding_dates.api.ws import AVAILABILITY_CHANNEL, WebSocketManager
from wedding_dates.schemas.guest import GuestIdentity, ResponseMode
from wedding_dates.services.broadcast_service import BroadcastService

class RecordingSocket:
    def __init__(self):
        self.sent = []

    async def send_text(self, text):
        self.sent.append(json.loads(text))

class BrokenSocket:
    async def send_text(self, text):
        raise RuntimeError("connection reset")

def test_response_toggle_is_broadcast():
    """Connected clients receive the toggle"""
    manager = WebSocketManager()
    socket = RecordingSocket()
    manager.active_connections[AVAILABILITY_CHANNEL] = [socket]

    asyncio.run(BroadcastService(manager).broadcast_response_toggled(
        guest=GuestIdentity(first_name="Alice", last_name="Smith"),
        date="2025-09-05",
        selected=True,
        response_mode=ResponseMode.UNAVAILABLE,
    ))

    message = socket.sent[0]
    assert message["type"] == "response_toggled"
    assert message["guest"] == {"first_name": "Alice", "last_name": "Smith"}
    assert message["selected"] is True
    assert message["response_mode"] == "unavailable"
    assert "timestamp" in message

def test_broken_sockets_are_dropped():
    """A failing connection is removed, healthy ones still receive"""
    manager = WebSocketManager()
    healthy = RecordingSocket()
    manager.active_connections[AVAILABILITY_CHANNEL] = [BrokenSocket(), healthy]

    asyncio.run(BroadcastService(manager).broadcast_date_toggled("2025-09-06", True))

    message = healthy.sent[0]
    assert (message["type"], message["date"], message["disabled"]) == ("date_toggled", "2025-09-06", True)
    assert manager.get_connection_count(AVAILABILITY_CHANNEL) == 1

def test_broadcast_without_listeners():
    """Nothing connected is not an error"""
    manager = WebSocketManager()

    asyncio.run(BroadcastService(manager).broadcast_mode_switched(
        guest=GuestIdentity(first_name="Alice", last_name="Smith"),
        response_mode=ResponseMode.AVAILABLE,
        cleared=3,
    ))

    assert manager.get_all_connection_counts() == {}
