"""
Guest-related Pydantic schemas
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

__all__ = [
    "ResponseMode",
    "GuestIdentity",
    "SessionContext",
    "ToggleDateRequest",
    "SwitchModeRequest",
    "SubmitRequest",
    "RespondedGuest",
]

class ResponseMode(str, Enum):
    """How a guest's date selections should be read"""
    UNAVAILABLE = "unavailable"  # selected dates are the ones they cannot attend
    AVAILABLE = "available"  # selected dates are the ones they can attend

class GuestIdentity(BaseModel):
    """A guest, identified by the exact (first name, last name) pair"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    class Config:
        frozen = True
        str_strip_whitespace = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

class SessionContext(BaseModel):
    """Caller context passed explicitly into every toggle"""
    guest: Optional[GuestIdentity] = None
    is_admin: bool = False

    class Config:
        frozen = True

class ToggleDateRequest(GuestIdentity):
    """Guest toggle request"""
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    response_mode: ResponseMode

class SwitchModeRequest(GuestIdentity):
    """Switch a guest to the other response mode, clearing their selections"""
    response_mode: ResponseMode

class SubmitRequest(GuestIdentity):
    """Final "I'm done" submission"""

class RespondedGuest(BaseModel):
    """Guest directory entry"""
    first_name: str
    last_name: str
    response_count: int
    response_mode: Optional[ResponseMode] = None  # None when the guest's rows disagree
