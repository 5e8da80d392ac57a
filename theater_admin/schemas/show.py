"""
Show-related Pydantic schemas
"""

from typing import Annotated, List, Literal, Optional
from pydantic import Field, StringConstraints, field_validator

from .common import CamelModel

IsoDate = Annotated[str, StringConstraints(pattern=r"^\d{4}-\d{2}-\d{2}$")]
ClockTime = Annotated[str, StringConstraints(pattern=r"^\d{2}:\d{2}$")]

class ShowEvent(CamelModel):
    """One scheduled performance; at most one per date"""
    id: str
    date: IsoDate
    name: str
    type: str
    capacity: int = Field(gt=0)
    is_closed: bool = False
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    manual_capacity_override: Optional[int] = Field(default=None, gt=0)
    external_bookings: int = Field(default=0, ge=0)

class ShowCreate(CamelModel):
    """Schema for adding a show; capacity and times default from the show type"""
    date: IsoDate
    name: str
    type: str
    capacity: Optional[int] = Field(default=None, gt=0)
    is_closed: bool = False
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None

class ShowBatchCreate(CamelModel):
    """Schema for adding the same show on several dates"""
    dates: List[IsoDate] = Field(min_length=1)
    name: str
    type: str
    capacity: Optional[int] = Field(default=None, gt=0)

class ShowUpdate(CamelModel):
    """Schema for editing a show"""
    name: Optional[str] = None
    type: Optional[str] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    is_closed: Optional[bool] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    manual_capacity_override: Optional[int] = Field(default=None, gt=0)
    external_bookings: Optional[int] = Field(default=None, ge=0)

    # null clears the times and the override; these must keep a value
    @field_validator("name", "type", "capacity", "is_closed", "external_bookings")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

class BulkDeleteCriteria(CamelModel):
    """Which shows to remove in one go"""
    kind: Literal["name", "type", "date_range"]
    value: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

class DateOccupancy(CamelModel):
    """Calendar cell data for one show date"""
    date: str
    show_id: str
    name: str
    type: str
    capacity: int
    booked: int
    available: int
    occupancy_rate: float
    is_closed: bool

class DateAvailability(CamelModel):
    """What the public booking page shows for one date"""
    date: str
    name: str
    type: str
    available: int = Field(ge=0)
    is_closed: bool
    fully_booked: bool
    bookable: bool
