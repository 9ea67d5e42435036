"""
Administrator-disabled date model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime

from wedding_dates.core.db import Base

class DisabledDate(Base):
    __tablename__ = "disabled_dates"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String(10), unique=True, nullable=False, index=True)  # YYYY-MM-DD
    month = Column(String(7), nullable=False, index=True)  # YYYY-MM
    reason = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
