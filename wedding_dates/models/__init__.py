"""
Database models package
"""

from .guest import Guest
from .response import GuestResponse
from .disabled_date import DisabledDate

__all__ = ["Guest", "GuestResponse", "DisabledDate"]
