"""
Reservation model
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, JSON, Text

from theater_admin.core.db import Base

class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(String(36), primary_key=True, index=True)
    date = Column(String(10), nullable=False, index=True)
    contact_name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(50))
    company_name = Column(String(255))
    guests = Column(Integer, nullable=False)
    drink_package = Column(String(20), default="standard")
    pre_show_drinks = Column(Boolean, default=False)
    after_party = Column(Boolean, default=False)
    addons = Column(JSON, default=dict)
    remarks = Column(Text)
    allergies = Column(Text)
    promo_code = Column(String(50))
    discount_amount = Column(Float, default=0.0)
    total_price = Column(Float, default=0.0)
    checked_in = Column(Boolean, default=False)
    status = Column(String(20), default="pending", index=True)  # pending, confirmed, cancelled, rejected
    booking_source = Column(String(20), default="internal")
    approved_by = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
