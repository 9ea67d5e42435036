"""
Guest date response model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from wedding_dates.core.db import Base

class GuestResponse(Base):
    __tablename__ = "guest_responses"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    month = Column(String(7), nullable=False, index=True)  # YYYY-MM
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    guest = relationship("Guest", back_populates="responses")

    __table_args__ = (
        UniqueConstraint("guest_id", "date", name="uq_guest_response_date"),
    )
