"""
Show scheduling: calendar CRUD, bulk removal and availability
"""

import calendar
import logging
from datetime import date as date_type, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from theater_admin.core.errors import DuplicateShowError, InvalidBulkDeleteError, ShowNotFoundError
from theater_admin.schemas.app_config import AppConfig
from theater_admin.schemas.show import (
    BulkDeleteCriteria,
    DateAvailability,
    DateOccupancy,
    ShowBatchCreate,
    ShowCreate,
    ShowEvent,
    ShowUpdate,
)
from theater_admin.services import capacity_service
from theater_admin.services.repositories import ReservationRepo, ShowRepo, new_id

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


def month_bounds(month: str) -> Tuple[str, str]:
    """First and last ISO date of a YYYY-MM month"""
    year, month_no = (int(part) for part in month.split("-"))
    last_day = calendar.monthrange(year, month_no)[1]
    return f"{year:04d}-{month_no:02d}-01", f"{year:04d}-{month_no:02d}-{last_day:02d}"


def show_starts_at(show: ShowEvent, config: AppConfig) -> datetime:
    """Local start of a show; falls back to the show type time, then midday"""
    start = show.start_time
    if not start:
        show_type = config.show_type(show.type)
        start = show_type.default_start_time if show_type else None
    hours, minutes = (int(part) for part in (start or "12:00").split(":"))
    return datetime.combine(date_type.fromisoformat(show.date), datetime.min.time()).replace(
        hour=hours, minute=minutes
    )


def booking_open(show: ShowEvent, config: AppConfig, now: Optional[datetime] = None) -> bool:
    """Whether the cutoff before the show start has not passed yet"""
    now = now or datetime.now()
    cutoff = show_starts_at(show, config) - timedelta(hours=config.booking_settings.booking_cutoff_hours)
    return now < cutoff


class ScheduleService:
    """Service for show calendar operations"""

    def __init__(self, shows: ShowRepo, reservations: ReservationRepo, config: AppConfig):
        self.shows = shows
        self.reservations = reservations
        self.config = config

    def _build_show(self, date: str, name: str, type_name: str, capacity: Optional[int],
                    start_time: Optional[str] = None, end_time: Optional[str] = None,
                    is_closed: bool = False) -> ShowEvent:
        show_type = self.config.show_type(type_name)
        if show_type is None:
            logger.warning("Show type %r is not configured; using default capacity", type_name)
        return ShowEvent(
            id=new_id(),
            date=date,
            name=name,
            type=type_name,
            capacity=capacity or (show_type.default_capacity if show_type else DEFAULT_CAPACITY),
            is_closed=is_closed,
            start_time=start_time or (show_type.default_start_time if show_type else None),
            end_time=end_time or (show_type.default_end_time if show_type else None),
        )

    def get_show(self, show_id: str) -> ShowEvent:
        show = self.shows.get(show_id)
        if show is None:
            raise ShowNotFoundError(show_id)
        return show

    def list_shows(self, month: Optional[str] = None) -> List[ShowEvent]:
        if month:
            return self.shows.list_between(*month_bounds(month))
        return self.shows.list_all()

    def add_show(self, data: ShowCreate) -> ShowEvent:
        if self.shows.get_by_date(data.date) is not None:
            raise DuplicateShowError(data.date)
        show = self._build_show(
            data.date, data.name, data.type, data.capacity,
            data.start_time, data.end_time, data.is_closed,
        )
        logger.info("Adding show %s on %s", show.name, show.date)
        return self.shows.add(show)

    def add_shows(self, data: ShowBatchCreate) -> List[ShowEvent]:
        """Add one show per date; nothing is written if any date is taken"""
        dates = sorted(set(data.dates))
        for date in dates:
            if self.shows.get_by_date(date) is not None:
                raise DuplicateShowError(date)
        return [
            self.shows.add(self._build_show(date, data.name, data.type, data.capacity))
            for date in dates
        ]

    def update_show(self, show_id: str, data: ShowUpdate) -> ShowEvent:
        changes = data.model_dump(exclude_unset=True)
        updated = self.shows.update(show_id, changes)
        if updated is None:
            raise ShowNotFoundError(show_id)
        return updated

    def toggle_status(self, show_id: str) -> ShowEvent:
        show = self.get_show(show_id)
        logger.info("Show %s on %s is now %s", show.id, show.date, "open" if show.is_closed else "closed")
        return self.shows.update(show_id, {"is_closed": not show.is_closed})

    def delete_show(self, show_id: str) -> None:
        if not self.shows.delete(show_id):
            raise ShowNotFoundError(show_id)

    def bulk_delete(self, criteria: BulkDeleteCriteria) -> int:
        """Delete every show matching a name, a type or a date range within one month"""
        if criteria.kind in ("name", "type"):
            if not criteria.value:
                raise InvalidBulkDeleteError(f"A {criteria.kind} is required")
            targets = self.shows.list_where(criteria.kind, criteria.value)
        else:
            if not criteria.start_date or not criteria.end_date:
                raise InvalidBulkDeleteError("Start and end date are required")
            if criteria.start_date > criteria.end_date:
                raise InvalidBulkDeleteError("Start date must not be after end date")
            if criteria.start_date[:7] != criteria.end_date[:7]:
                raise InvalidBulkDeleteError("Date range must stay within one month")
            targets = self.shows.list_between(criteria.start_date, criteria.end_date)

        deleted = self.shows.delete_many([show.id for show in targets])
        logger.info("Bulk delete by %s removed %d shows", criteria.kind, deleted)
        return deleted

    def occupancy(self, month: str) -> Dict[str, DateOccupancy]:
        start, end = month_bounds(month)
        return capacity_service.occupancy_by_date(
            self.shows.list_between(start, end),
            self.reservations.list_between(start, end),
        )

    def availability(self, month: str, now: Optional[datetime] = None) -> List[DateAvailability]:
        """Guest-facing availability per show date, clamped at zero"""
        start, end = month_bounds(month)
        shows = self.shows.list_between(start, end)
        cells = capacity_service.occupancy_by_date(shows, self.reservations.list_between(start, end))
        result = []
        for show in shows:
            available = capacity_service.display_capacity(cells[show.date].available)
            result.append(DateAvailability(
                date=show.date,
                name=show.name,
                type=show.type,
                available=available,
                is_closed=show.is_closed,
                fully_booked=available == 0,
                bookable=not show.is_closed and available > 0 and booking_open(show, self.config, now),
            ))
        return result
