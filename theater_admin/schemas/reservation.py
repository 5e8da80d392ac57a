"""
Reservation-related Pydantic schemas
"""

from datetime import datetime, timezone
from typing import Dict, Literal, Optional
from pydantic import EmailStr, Field, field_validator

from .common import CamelModel
from .show import IsoDate

DrinkPackage = Literal["standard", "premium"]
ReservationStatus = Literal["pending", "confirmed", "cancelled", "rejected"]

class Reservation(CamelModel):
    """A booking against the show on a date"""
    id: str
    date: IsoDate
    contact_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    guests: int = Field(gt=0)
    drink_package: DrinkPackage = "standard"
    pre_show_drinks: bool = False
    after_party: bool = False
    addons: Dict[str, int] = Field(default_factory=dict)
    remarks: Optional[str] = None
    allergies: Optional[str] = None
    promo_code: Optional[str] = None
    discount_amount: float = 0.0
    total_price: float = 0.0
    checked_in: bool = False
    status: ReservationStatus = "pending"
    booking_source: Literal["internal", "external"] = "internal"
    approved_by: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class ReservationCreate(CamelModel):
    """Schema for the admin "add booking" form"""
    date: IsoDate
    contact_name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    guests: int = Field(gt=0)
    drink_package: DrinkPackage = "standard"
    pre_show_drinks: bool = False
    after_party: bool = False
    addons: Dict[str, int] = Field(default_factory=dict)
    remarks: Optional[str] = None
    allergies: Optional[str] = None
    promo_code: Optional[str] = None
    booking_source: Literal["internal", "external"] = "internal"

class ReservationUpdate(CamelModel):
    """Schema for editing a reservation"""
    contact_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    guests: Optional[int] = Field(default=None, gt=0)
    drink_package: Optional[DrinkPackage] = None
    pre_show_drinks: Optional[bool] = None
    after_party: Optional[bool] = None
    addons: Optional[Dict[str, int]] = None
    remarks: Optional[str] = None
    allergies: Optional[str] = None
    promo_code: Optional[str] = None

    @field_validator("contact_name", "guests", "drink_package", "pre_show_drinks", "after_party", "addons")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

class StatusChange(CamelModel):
    """Status transition request"""
    status: ReservationStatus
    approved_by: Optional[str] = None

class CheckInEntry(CamelModel):
    """One line of the printable check-in list"""
    reservation_id: str
    contact_name: str
    company_name: Optional[str] = None
    guests: int
    drink_package: DrinkPackage
    allergies: Optional[str] = None
    remarks: Optional[str] = None
    checked_in: bool
