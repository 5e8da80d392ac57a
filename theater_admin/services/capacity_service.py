"""
Capacity accounting for show dates

Only confirmed reservations occupy seats. Pending, cancelled and rejected
bookings are ignored everywhere in this module so the calendar, the
approvals view and the waiting list agree on the same numbers.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from theater_admin.schemas.reservation import Reservation
from theater_admin.schemas.show import DateOccupancy, ShowEvent

CONFIRMED = "confirmed"


def effective_capacity(show: Optional[ShowEvent]) -> int:
    """Seats of a show after a manual override; no show means no seats"""
    if show is None:
        return 0
    return show.manual_capacity_override or show.capacity


def external_guests(show: Optional[ShowEvent]) -> int:
    return show.external_bookings if show is not None else 0


def confirmed_guests(reservations: Iterable[Reservation], date: Optional[str] = None) -> int:
    return sum(
        r.guests for r in reservations
        if r.status == CONFIRMED and (date is None or r.date == date)
    )


def available_capacity(show: Optional[ShowEvent], reservations_for_date: Iterable[Reservation]) -> int:
    """Remaining seats for a show date.

    The value is not clamped: a negative result means the date is
    overbooked. Use display_capacity() for guest-facing numbers.
    """
    date = show.date if show is not None else None
    booked = confirmed_guests(reservations_for_date, date) + external_guests(show)
    return effective_capacity(show) - booked


def display_capacity(available: int) -> int:
    return max(available, 0)


def guest_count_by_date(reservations: Iterable[Reservation]) -> Dict[str, int]:
    """Total confirmed guests per ISO date"""
    counts: Dict[str, int] = defaultdict(int)
    for reservation in reservations:
        if reservation.status == CONFIRMED:
            counts[reservation.date] += reservation.guests
    return dict(counts)


def occupancy_by_date(shows: Iterable[ShowEvent], reservations: Iterable[Reservation]) -> Dict[str, DateOccupancy]:
    """Calendar feed: capacity, bookings and fill rate for each show date"""
    booked_by_date = guest_count_by_date(reservations)
    result: Dict[str, DateOccupancy] = {}
    for show in shows:
        capacity = effective_capacity(show)
        booked = booked_by_date.get(show.date, 0) + show.external_bookings
        result[show.date] = DateOccupancy(
            date=show.date,
            show_id=show.id,
            name=show.name,
            type=show.type,
            capacity=capacity,
            booked=booked,
            available=capacity - booked,
            occupancy_rate=round(booked / capacity, 4) if capacity > 0 else 1.0,
            is_closed=show.is_closed,
        )
    return result


def approval_impact(
    show: Optional[ShowEvent],
    reservations_for_date: Iterable[Reservation],
    candidate: Reservation,
) -> Dict:
    """What approving a pending reservation would do to the date's capacity"""
    others: List[Reservation] = [r for r in reservations_for_date if r.id != candidate.id]
    capacity = effective_capacity(show)
    booked = confirmed_guests(others) + external_guests(show)
    remaining = capacity - booked - candidate.guests
    return {
        "capacity": capacity,
        "booked": booked,
        "requested": candidate.guests,
        "remaining": remaining,
        "would_exceed": remaining < 0,
        "exceeds_by": -remaining if remaining < 0 else 0,
    }
