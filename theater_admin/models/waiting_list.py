"""
Waiting list model
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text

from theater_admin.core.db import Base

class WaitingListEntry(Base):
    __tablename__ = "waiting_list"

    id = Column(String(36), primary_key=True, index=True)
    date = Column(String(10), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(50))
    guests = Column(Integer, nullable=False)
    status = Column(String(20), default="active")  # active, notified, converted, expired
    accept_partial_booking = Column(Boolean, default=False)
    source_channel = Column(String(20), default="website")
    notifications_sent = Column(Integer, default=0)
    reservation_id = Column(String(36))
    notes = Column(Text)
    added_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
