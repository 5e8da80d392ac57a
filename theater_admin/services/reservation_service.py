"""
Reservation management: bookings, status transitions and check-in
"""

import logging
from typing import Dict, List, Optional

from theater_admin.core.errors import (
    BookingRuleError,
    InvalidStatusTransitionError,
    ReservationNotFoundError,
    ShowNotFoundError,
)
from theater_admin.schemas.pricing import PriceBreakdown, ReservationDraft
from theater_admin.schemas.reservation import (
    Reservation,
    ReservationCreate,
    ReservationUpdate,
    StatusChange,
)
from theater_admin.schemas.show import ShowEvent
from theater_admin.services import capacity_service, pricing_service
from theater_admin.services.config_store import ConfigStore
from theater_admin.services.repositories import ReservationRepo, ShowRepo, new_id

logger = logging.getLogger(__name__)

# current status -> statuses it may move to
STATUS_TRANSITIONS: Dict[str, set] = {
    "pending": {"confirmed", "rejected", "cancelled"},
    "confirmed": {"cancelled"},
    "cancelled": set(),
    "rejected": set(),
}


def can_transition(current: str, target: str) -> bool:
    return target in STATUS_TRANSITIONS.get(current, set())


class ReservationService:
    """Service for reservation operations"""

    def __init__(self, shows: ShowRepo, reservations: ReservationRepo, config_store: ConfigStore):
        self.shows = shows
        self.reservations = reservations
        self.config_store = config_store

    @property
    def config(self):
        return self.config_store.get()

    def _show_for(self, date: str) -> ShowEvent:
        show = self.shows.get_by_date(date)
        if show is None:
            raise ShowNotFoundError(date)
        return show

    def _check_guest_limits(self, guests: int) -> None:
        rules = self.config.booking_settings
        if guests < rules.min_guests:
            raise BookingRuleError(f"Minimum number of guests is {rules.min_guests}")
        if guests > rules.max_guests:
            raise BookingRuleError(f"Maximum number of guests is {rules.max_guests}")

    def _draft(self, show: ShowEvent, data) -> ReservationDraft:
        return ReservationDraft(
            date=show.date,
            show_type=show.type,
            guests=data.guests,
            drink_package=data.drink_package,
            pre_show_drinks=data.pre_show_drinks,
            after_party=data.after_party,
            addons=data.addons,
        )

    def _price(self, show: ShowEvent, data) -> PriceBreakdown:
        breakdown = pricing_service.compute_price(self._draft(show, data), self.config, data.promo_code)
        if breakdown.error:
            raise BookingRuleError(breakdown.error)
        return breakdown

    def get(self, reservation_id: str) -> Reservation:
        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    def list_reservations(self, date: Optional[str] = None, status: Optional[str] = None) -> List[Reservation]:
        items = self.reservations.list_by_date(date) if date else self.reservations.list_all()
        if status:
            items = [r for r in items if r.status == status]
        return sorted(items, key=lambda r: (r.date, r.created_at))

    def available_for(self, date: str) -> int:
        return capacity_service.available_capacity(
            self.shows.get_by_date(date), self.reservations.list_by_date(date)
        )

    def add_reservation(self, data: ReservationCreate) -> Reservation:
        """Store a booking.

        Bookings are never refused for lack of seats. One that does not fit
        the remaining capacity, or that targets a closed date, is stored as
        pending so staff can approve or reject it.
        """
        show = self._show_for(data.date)
        self._check_guest_limits(data.guests)
        price = self._price(show, data)

        available = capacity_service.available_capacity(show, self.reservations.list_by_date(data.date))
        status = "confirmed"
        if show.is_closed or data.guests > available:
            status = "pending"
            logger.warning(
                "Booking for %d guests on %s exceeds available capacity (%d); stored as pending",
                data.guests, data.date, available,
            )

        reservation = Reservation(
            id=new_id(),
            **data.model_dump(),
            discount_amount=price.discount,
            total_price=price.total,
            status=status,
        )
        created = self.reservations.add(reservation)
        if price.applied_code:
            self.config_store.record_code_use(price.applied_code, created.id)
        logger.info("Reservation %s created for %s (%s)", created.id, created.date, created.status)
        return created

    def update_reservation(self, reservation_id: str, data: ReservationUpdate) -> Reservation:
        current = self.get(reservation_id)
        changes = data.model_dump(exclude_unset=True)
        if "guests" in changes:
            self._check_guest_limits(changes["guests"])
        merged = current.model_copy(update=changes)
        show = self._show_for(current.date)
        code_changed = merged.promo_code != current.promo_code
        if code_changed:
            price = self._price(show, merged)
            discount = price.discount
        else:
            # an already redeemed code keeps the discount it was booked with
            price = pricing_service.compute_price(self._draft(show, merged), self.config, merged.promo_code)
            discount = price.discount if not price.error else min(current.discount_amount, price.subtotal)
        changes.update(
            discount_amount=discount,
            total_price=round(max(price.subtotal - discount, 0.0), 2),
        )
        updated = self.reservations.update(reservation_id, changes)
        if code_changed and price.applied_code:
            self.config_store.record_code_use(price.applied_code, reservation_id)
        return updated

    def change_status(self, reservation_id: str, change: StatusChange) -> Reservation:
        current = self.get(reservation_id)
        if not can_transition(current.status, change.status):
            raise InvalidStatusTransitionError(current.status, change.status)
        changes = {"status": change.status}
        if change.status == "confirmed":
            changes["approved_by"] = change.approved_by
            impact = capacity_service.approval_impact(
                self.shows.get_by_date(current.date),
                self.reservations.list_by_date(current.date),
                current,
            )
            if impact["would_exceed"]:
                logger.warning(
                    "Approving reservation %s overbooks %s by %d seats",
                    reservation_id, current.date, impact["exceeds_by"],
                )
        if change.status in ("cancelled", "rejected"):
            changes["checked_in"] = False
        logger.info("Reservation %s: %s -> %s", reservation_id, current.status, change.status)
        return self.reservations.update(reservation_id, changes)

    def approval_info(self, reservation_id: str) -> Dict:
        current = self.get(reservation_id)
        return capacity_service.approval_impact(
            self.shows.get_by_date(current.date),
            self.reservations.list_by_date(current.date),
            current,
        )

    def toggle_check_in(self, reservation_id: str) -> Reservation:
        current = self.get(reservation_id)
        if current.status != "confirmed":
            raise BookingRuleError("Only confirmed reservations can be checked in")
        return self.reservations.update(reservation_id, {"checked_in": not current.checked_in})

    def delete_reservation(self, reservation_id: str) -> None:
        if not self.reservations.delete(reservation_id):
            raise ReservationNotFoundError(reservation_id)
