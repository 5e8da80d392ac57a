"""
Door check-in service with real-time broadcasting
"""

from datetime import datetime, timezone
from typing import List

from theater_admin.api.ws import WebSocketManager
from theater_admin.schemas.reservation import CheckInEntry, Reservation
from theater_admin.services.reservation_service import ReservationService


def checkin_list(reservations: List[Reservation]) -> List[CheckInEntry]:
    """Confirmed reservations of a date, sorted by contact name"""
    confirmed = [r for r in reservations if r.status == "confirmed"]
    return [
        CheckInEntry(
            reservation_id=r.id,
            contact_name=r.contact_name,
            company_name=r.company_name,
            guests=r.guests,
            drink_package=r.drink_package,
            allergies=r.allergies,
            remarks=r.remarks,
            checked_in=r.checked_in,
        )
        for r in sorted(confirmed, key=lambda r: r.contact_name.lower())
    ]


class CheckInService:
    """Service for handling check-ins at the door"""

    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager

    def list_for_date(self, reservation_service: ReservationService, date: str) -> List[CheckInEntry]:
        return checkin_list(reservation_service.list_reservations(date=date))

    async def toggle(self, reservation_service: ReservationService, reservation_id: str) -> Reservation:
        """Flip the checked-in flag and broadcast it to clients watching the date"""
        reservation = reservation_service.toggle_check_in(reservation_id)

        message = {
            "type": "checkin",
            "reservation": {
                "id": reservation.id,
                "contactName": reservation.contact_name,
                "guests": reservation.guests,
                "checkedIn": reservation.checked_in,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        await self.websocket_manager.broadcast_to_date(reservation.date, message)
        return reservation

    async def broadcast_list_update(self, date: str, update_type: str = "checkin_list_update"):
        """Tell clients of a date that the list changed and should be reloaded"""
        message = {
            "type": update_type,
            "date": date,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        await self.websocket_manager.broadcast_to_date(date, message)
