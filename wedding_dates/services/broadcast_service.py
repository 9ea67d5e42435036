"""
Availability change broadcasting over the websocket hub
"""

from datetime import datetime

from wedding_dates.api.ws import AVAILABILITY_CHANNEL, WebSocketManager
from wedding_dates.schemas.guest import GuestIdentity, ResponseMode

class BroadcastService:
    """Tells connected clients that availability changed so they re-fetch"""

    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager

    async def _send(self, message: dict):
        message["timestamp"] = datetime.utcnow().isoformat()
        await self.websocket_manager.broadcast(AVAILABILITY_CHANNEL, message)

    async def broadcast_response_toggled(
        self,
        guest: GuestIdentity,
        date: str,
        selected: bool,
        response_mode: ResponseMode
    ):
        await self._send({
            "type": "response_toggled",
            "guest": {"first_name": guest.first_name, "last_name": guest.last_name},
            "date": date,
            "selected": selected,
            "response_mode": response_mode.value,
        })

    async def broadcast_mode_switched(
        self,
        guest: GuestIdentity,
        response_mode: ResponseMode,
        cleared: int
    ):
        await self._send({
            "type": "mode_switched",
            "guest": {"first_name": guest.first_name, "last_name": guest.last_name},
            "response_mode": response_mode.value,
            "cleared": cleared,
        })

    async def broadcast_date_toggled(self, date: str, disabled: bool):
        await self._send({
            "type": "date_toggled",
            "date": date,
            "disabled": disabled,
        })
