"""
Waiting list: requests for full or closed dates and their conversion to bookings
"""

import logging
from typing import Dict, List, Optional

from theater_admin.core.errors import (
    BookingRuleError,
    InvalidStatusTransitionError,
    ShowNotFoundError,
    WaitlistEntryNotFoundError,
    WaitlistNotNeededError,
)
from theater_admin.schemas.reservation import Reservation, ReservationCreate
from theater_admin.schemas.waitlist import WaitingListEntry, WaitlistConversion, WaitlistCreate
from theater_admin.services import capacity_service
from theater_admin.services.repositories import ReservationRepo, ShowRepo, WaitingListRepo, new_id
from theater_admin.services.reservation_service import ReservationService

logger = logging.getLogger(__name__)

WAITLIST_TRANSITIONS: Dict[str, set] = {
    "active": {"notified", "converted", "expired"},
    "notified": {"converted", "expired"},
    "converted": set(),
    "expired": set(),
}

OPEN_STATUSES = ("active", "notified")


def waitlist_candidates(entries: List[WaitingListEntry], available: int) -> List[WaitingListEntry]:
    """Open entries that could be served with the seats left, oldest first"""
    open_entries = [e for e in entries if e.status in OPEN_STATUSES]
    fitting = [
        e for e in open_entries
        if e.guests <= available or (e.accept_partial_booking and available > 0)
    ]
    return sorted(fitting, key=lambda e: e.added_at)


class WaitlistService:
    """Service for waiting list operations"""

    def __init__(self, entries: WaitingListRepo, shows: ShowRepo, reservations: ReservationRepo,
                 reservation_service: ReservationService):
        self.entries = entries
        self.shows = shows
        self.reservations = reservations
        self.reservation_service = reservation_service

    def get(self, entry_id: str) -> WaitingListEntry:
        entry = self.entries.get(entry_id)
        if entry is None:
            raise WaitlistEntryNotFoundError(entry_id)
        return entry

    def list_entries(self, date: Optional[str] = None, status: Optional[str] = None) -> List[WaitingListEntry]:
        items = self.entries.list_by_date(date) if date else self.entries.list_all()
        if status:
            items = [e for e in items if e.status == status]
        return sorted(items, key=lambda e: (e.date, e.added_at))

    def add_entry(self, data: WaitlistCreate) -> WaitingListEntry:
        """Queue a request; only accepted when the date cannot take the party"""
        show = self.shows.get_by_date(data.date)
        if show is None:
            raise ShowNotFoundError(data.date)
        available = capacity_service.available_capacity(show, self.reservations.list_by_date(data.date))
        if not show.is_closed and data.guests <= available:
            raise WaitlistNotNeededError(data.date, available)

        entry = WaitingListEntry(id=new_id(), **data.model_dump())
        logger.info("Waiting list entry %s added for %s (%d guests)", entry.id, entry.date, entry.guests)
        return self.entries.add(entry)

    def _move(self, entry: WaitingListEntry, target: str, extra: Optional[Dict] = None) -> WaitingListEntry:
        if target not in WAITLIST_TRANSITIONS.get(entry.status, set()):
            raise InvalidStatusTransitionError(entry.status, target)
        changes = {"status": target}
        changes.update(extra or {})
        return self.entries.update(entry.id, changes)

    def notify(self, entry_id: str) -> WaitingListEntry:
        entry = self.get(entry_id)
        return self._move(entry, "notified", {"notifications_sent": entry.notifications_sent + 1})

    def expire(self, entry_id: str) -> WaitingListEntry:
        return self._move(self.get(entry_id), "expired")

    def delete_entry(self, entry_id: str) -> None:
        if not self.entries.delete(entry_id):
            raise WaitlistEntryNotFoundError(entry_id)

    def candidates(self, date: str) -> List[WaitingListEntry]:
        available = capacity_service.display_capacity(self.reservation_service.available_for(date))
        return waitlist_candidates(self.entries.list_by_date(date), available)

    def convert(self, entry_id: str, options: WaitlistConversion) -> Reservation:
        """Turn an entry into a reservation and mark it converted.

        Without accept_partial_booking the whole party must be booked;
        otherwise any positive number up to the requested guests is fine.
        """
        entry = self.get(entry_id)
        if "converted" not in WAITLIST_TRANSITIONS.get(entry.status, set()):
            raise InvalidStatusTransitionError(entry.status, "converted")
        guests = options.guests or entry.guests
        if guests > entry.guests:
            raise BookingRuleError("Cannot book more guests than were requested")
        if guests < entry.guests and not entry.accept_partial_booking:
            raise BookingRuleError("This entry does not accept a partial booking")

        reservation = self.reservation_service.add_reservation(ReservationCreate(
            date=entry.date,
            contact_name=entry.name,
            email=entry.email,
            phone=entry.phone,
            guests=guests,
            drink_package=options.drink_package,
            remarks=entry.notes,
        ))
        if options.approved_by and reservation.status == "confirmed":
            reservation = self.reservations.update(reservation.id, {"approved_by": options.approved_by})
        self._move(entry, "converted", {"reservation_id": reservation.id})
        logger.info("Waiting list entry %s converted into reservation %s", entry_id, reservation.id)
        return reservation
