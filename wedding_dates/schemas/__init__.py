"""
Pydantic schemas package
"""

from .common import *
from .guest import *
from .availability import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "ResponseMode",
    "GuestIdentity",
    "SessionContext",
    "ToggleDateRequest",
    "SwitchModeRequest",
    "SubmitRequest",
    "RespondedGuest",
    "AttendanceStatus",
    "GuestDateStatus",
    "DateStats",
    "DateSummary",
    "CalendarMonth",
    "DisabledDateToggleRequest",
]
