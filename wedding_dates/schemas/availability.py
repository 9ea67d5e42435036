"""
Availability and calendar Pydantic schemas
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

__all__ = [
    "AttendanceStatus",
    "GuestDateStatus",
    "DateStats",
    "DateSummary",
    "CalendarMonth",
    "DisabledDateToggleRequest",
]

class AttendanceStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

class GuestDateStatus(BaseModel):
    """One guest's status on one date"""
    first_name: str
    last_name: str
    status: AttendanceStatus

class DateStats(BaseModel):
    """Aggregate availability for a single candidate date"""
    count: int = 0  # guests who cannot attend
    guests: List[GuestDateStatus] = Field(default_factory=list)

class DateSummary(BaseModel):
    """Display figures for a date cell"""
    count: int
    unavailable_count: int
    available_count: int
    has_responses: bool

class CalendarMonth(BaseModel):
    """A configured month and its candidate dates"""
    name: str  # e.g. "September 2025"
    year: int
    month: int  # 1-12
    dates: List[str]

class DisabledDateToggleRequest(BaseModel):
    """Admin request to disable or re-enable a date"""
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    reason: Optional[str] = Field(None, max_length=255)
