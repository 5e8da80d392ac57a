"""
Show model
"""

from sqlalchemy import Column, Integer, String, Boolean

from theater_admin.core.db import Base

class Show(Base):
    __tablename__ = "shows"

    id = Column(String(36), primary_key=True, index=True)
    date = Column(String(10), nullable=False, unique=True, index=True)  # YYYY-MM-DD
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    is_closed = Column(Boolean, default=False)
    start_time = Column(String(5))  # HH:MM
    end_time = Column(String(5))
    manual_capacity_override = Column(Integer)
    external_bookings = Column(Integer, default=0)
