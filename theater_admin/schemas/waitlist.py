"""
Waiting list Pydantic schemas
"""

from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import EmailStr, Field

from .common import CamelModel
from .reservation import DrinkPackage
from .show import IsoDate

WaitlistStatus = Literal["active", "notified", "converted", "expired"]
SourceChannel = Literal["website", "phone", "email", "walk-in", "referral"]

class WaitingListEntry(CamelModel):
    """Request for seats on a full or closed date"""
    id: str
    date: IsoDate
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    guests: int = Field(gt=0)
    status: WaitlistStatus = "active"
    accept_partial_booking: bool = False
    source_channel: SourceChannel = "website"
    notifications_sent: int = 0
    reservation_id: Optional[str] = None
    notes: Optional[str] = None
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class WaitlistCreate(CamelModel):
    """Schema for the public waiting list form"""
    date: IsoDate
    name: str
    email: EmailStr
    phone: Optional[str] = None
    guests: int = Field(gt=0)
    accept_partial_booking: bool = False
    source_channel: SourceChannel = "website"
    notes: Optional[str] = None

class WaitlistConversion(CamelModel):
    """Options used when staff turn an entry into a reservation"""
    guests: Optional[int] = Field(default=None, gt=0)
    drink_package: DrinkPackage = "standard"
    approved_by: Optional[str] = None
