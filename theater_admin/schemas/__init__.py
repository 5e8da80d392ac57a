"""
Pydantic schemas package
"""

from .common import *
from .show import *
from .reservation import *
from .waitlist import *
from .app_config import *
from .pricing import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "ShowEvent",
    "ShowCreate",
    "ShowBatchCreate",
    "ShowUpdate",
    "BulkDeleteCriteria",
    "DateOccupancy",
    "DateAvailability",
    "Reservation",
    "ReservationCreate",
    "ReservationUpdate",
    "StatusChange",
    "CheckInEntry",
    "WaitingListEntry",
    "WaitlistCreate",
    "WaitlistConversion",
    "AppConfig",
    "ShowType",
    "PromoCode",
    "TheaterVoucher",
    "ReservationDraft",
    "PriceQuoteRequest",
    "PriceBreakdown",
]
