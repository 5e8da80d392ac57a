"""
Pricing Pydantic schemas
"""

from typing import Dict, Optional
from pydantic import Field

from .common import CamelModel
from .reservation import DrinkPackage

class ReservationDraft(CamelModel):
    """What the booking form knows before a reservation is stored"""
    date: Optional[str] = None
    show_type: str
    guests: int = Field(gt=0)
    drink_package: DrinkPackage = "standard"
    pre_show_drinks: bool = False
    after_party: bool = False
    addons: Dict[str, int] = Field(default_factory=dict)

class PriceQuoteRequest(ReservationDraft):
    code: Optional[str] = None

class PriceBreakdown(CamelModel):
    subtotal: float
    discount: float = 0.0
    total: float
    applied_code: Optional[str] = None
    error: Optional[str] = None
