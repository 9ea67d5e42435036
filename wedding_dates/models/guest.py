"""
Guest registry model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from wedding_dates.core.db import Base

class Guest(Base):
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    response_mode = Column(String(20), nullable=False)  # unavailable, available
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    responses = relationship("GuestResponse", back_populates="guest", cascade="all, delete-orphan")

    # Identity is the exact (first, last) pair
    __table_args__ = (
        UniqueConstraint("first_name", "last_name", name="uq_guest_name"),
    )
