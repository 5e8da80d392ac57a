"""
Admin API routes - requires authentication
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import Response
from pydantic import ValidationError

from theater_admin.api.deps import (
    get_config_store,
    get_reservation_service,
    get_schedule_service,
    get_waitlist_service,
)
from theater_admin.api.routes_public import MONTH_PATTERN
from theater_admin.api.ws import websocket_manager
from theater_admin.schemas.app_config import AppConfig
from theater_admin.schemas.pricing import PriceQuoteRequest
from theater_admin.schemas.reservation import ReservationCreate, ReservationUpdate, StatusChange
from theater_admin.schemas.show import BulkDeleteCriteria, ShowBatchCreate, ShowCreate, ShowUpdate
from theater_admin.schemas.waitlist import WaitlistConversion
from theater_admin.services import pricing_service
from theater_admin.services.checkin_service import CheckInService
from theater_admin.services.config_store import ConfigStore
from theater_admin.services.excel_service import ExcelService, XLSX_MEDIA_TYPE
from theater_admin.services.reservation_service import ReservationService
from theater_admin.services.schedule_service import ScheduleService
from theater_admin.services.waitlist_service import WaitlistService
from theater_admin.utils.security import verify_admin_token
from theater_admin.utils.responses import success_response, error_response

router = APIRouter()

# Initialize check-in service
checkin_service = CheckInService(websocket_manager)

def xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )

# -------- Shows --------

@router.get("/shows")
async def list_shows(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    """List shows, optionally limited to one month"""
    return success_response(message="Shows retrieved", data=schedule.list_shows(month))

@router.get("/shows/{show_id}")
async def get_show(
    show_id: str,
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    return success_response(message="Show retrieved", data=schedule.get_show(show_id))

@router.post("/shows")
async def create_show(
    show_data: ShowCreate,
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    """Schedule a show; capacity and times default from its show type"""
    show = schedule.add_show(show_data)
    return success_response(message="Show created successfully", data=show, status_code=201)

@router.post("/shows/batch")
async def create_shows(
    batch: ShowBatchCreate,
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    """Schedule the same show on several dates"""
    shows = schedule.add_shows(batch)
    return success_response(message=f"{len(shows)} shows created", data=shows, status_code=201)

@router.post("/shows/bulk-delete")
async def bulk_delete_shows(
    criteria: BulkDeleteCriteria,
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    deleted = schedule.bulk_delete(criteria)
    return success_response(message=f"{deleted} shows deleted", data={"deleted": deleted})

@router.patch("/shows/{show_id}")
async def update_show(
    show_id: str,
    show_update: ShowUpdate,
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    show = schedule.update_show(show_id, show_update)
    return success_response(message="Show updated successfully", data=show)

@router.post("/shows/{show_id}/toggle")
async def toggle_show(
    show_id: str,
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    """Open or close a date for bookings"""
    show = schedule.toggle_status(show_id)
    return success_response(message="Show closed" if show.is_closed else "Show opened", data=show)

@router.delete("/shows/{show_id}")
async def delete_show(
    show_id: str,
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    schedule.delete_show(show_id)
    return success_response(message="Show deleted")

@router.get("/calendar")
async def get_calendar(
    month: str = Query(..., pattern=MONTH_PATTERN),
    schedule: ScheduleService = Depends(get_schedule_service),
    token: str = Depends(verify_admin_token)
):
    """Occupancy per show date for the admin calendar"""
    return success_response(message="Calendar retrieved", data=schedule.occupancy(month))

# -------- Reservations --------

@router.get("/reservations")
async def list_reservations(
    date: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    return success_response(
        message="Reservations retrieved",
        data=reservations.list_reservations(date=date, status=status)
    )

@router.get("/reservations/export.xlsx")
async def export_reservations(
    date: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    """Export reservations to Excel"""
    content = ExcelService.export_reservations(reservations.list_reservations(date=date, status=status))
    return xlsx_response(content, f"reservations_{date or 'all'}.xlsx")

@router.get("/reservations/{reservation_id}")
async def get_reservation(
    reservation_id: str,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    return success_response(message="Reservation retrieved", data=reservations.get(reservation_id))

@router.post("/reservations")
async def create_reservation(
    reservation_data: ReservationCreate,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    """Add a booking; bookings that do not fit are stored as pending"""
    reservation = reservations.add_reservation(reservation_data)
    await checkin_service.broadcast_list_update(reservation.date)
    message = "Reservation created" if reservation.status == "confirmed" else "Reservation stored as pending"
    return success_response(message=message, data=reservation, status_code=201)

@router.patch("/reservations/{reservation_id}")
async def update_reservation(
    reservation_id: str,
    reservation_update: ReservationUpdate,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    reservation = reservations.update_reservation(reservation_id, reservation_update)
    await checkin_service.broadcast_list_update(reservation.date)
    return success_response(message="Reservation updated successfully", data=reservation)

@router.get("/reservations/{reservation_id}/approval")
async def get_approval_impact(
    reservation_id: str,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    """What confirming this reservation would do to the date's capacity"""
    return success_response(message="Approval impact", data=reservations.approval_info(reservation_id))

@router.post("/reservations/{reservation_id}/status")
async def change_reservation_status(
    reservation_id: str,
    change: StatusChange,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    reservation = reservations.change_status(reservation_id, change)
    await checkin_service.broadcast_list_update(reservation.date)
    return success_response(message=f"Reservation {reservation.status}", data=reservation)

@router.post("/reservations/{reservation_id}/checkin")
async def toggle_reservation_checkin(
    reservation_id: str,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    """Toggle check-in and push it to door clients"""
    reservation = await checkin_service.toggle(reservations, reservation_id)
    message = "Checked in" if reservation.checked_in else "Check-in undone"
    return success_response(message=message, data=reservation)

@router.delete("/reservations/{reservation_id}")
async def delete_reservation(
    reservation_id: str,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    reservation = reservations.get(reservation_id)
    reservations.delete_reservation(reservation_id)
    await checkin_service.broadcast_list_update(reservation.date)
    return success_response(message="Reservation deleted")

# -------- Check-in --------

@router.get("/checkin/{date}")
async def get_checkin_list(
    date: str,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    """Confirmed reservations of a date, sorted by name"""
    entries = checkin_service.list_for_date(reservations, date)
    return success_response(
        message="Check-in list retrieved",
        data={
            "entries": entries,
            "total_guests": sum(e.guests for e in entries),
            "checked_in_guests": sum(e.guests for e in entries if e.checked_in),
        }
    )

@router.get("/checkin/{date}/export.xlsx")
async def export_checkin_list(
    date: str,
    reservations: ReservationService = Depends(get_reservation_service),
    token: str = Depends(verify_admin_token)
):
    content = ExcelService.export_checkin_list(checkin_service.list_for_date(reservations, date), date)
    return xlsx_response(content, f"checkin_{date}.xlsx")

# -------- Waiting list --------

@router.get("/waitlist")
async def list_waitlist(
    date: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    waitlist: WaitlistService = Depends(get_waitlist_service),
    token: str = Depends(verify_admin_token)
):
    return success_response(
        message="Waiting list retrieved",
        data=waitlist.list_entries(date=date, status=status)
    )

@router.get("/waitlist/candidates/{date}")
async def list_waitlist_candidates(
    date: str,
    waitlist: WaitlistService = Depends(get_waitlist_service),
    token: str = Depends(verify_admin_token)
):
    """Open entries that fit the seats currently left on a date"""
    return success_response(message="Candidates retrieved", data=waitlist.candidates(date))

@router.post("/waitlist/{entry_id}/notify")
async def notify_waitlist_entry(
    entry_id: str,
    waitlist: WaitlistService = Depends(get_waitlist_service),
    token: str = Depends(verify_admin_token)
):
    return success_response(message="Entry marked as notified", data=waitlist.notify(entry_id))

@router.post("/waitlist/{entry_id}/expire")
async def expire_waitlist_entry(
    entry_id: str,
    waitlist: WaitlistService = Depends(get_waitlist_service),
    token: str = Depends(verify_admin_token)
):
    return success_response(message="Entry expired", data=waitlist.expire(entry_id))

@router.post("/waitlist/{entry_id}/convert")
async def convert_waitlist_entry(
    entry_id: str,
    options: WaitlistConversion,
    waitlist: WaitlistService = Depends(get_waitlist_service),
    token: str = Depends(verify_admin_token)
):
    """Book the entry and mark it converted"""
    reservation = waitlist.convert(entry_id, options)
    await checkin_service.broadcast_list_update(reservation.date)
    return success_response(message="Entry converted to reservation", data=reservation, status_code=201)

@router.delete("/waitlist/{entry_id}")
async def delete_waitlist_entry(
    entry_id: str,
    waitlist: WaitlistService = Depends(get_waitlist_service),
    token: str = Depends(verify_admin_token)
):
    waitlist.delete_entry(entry_id)
    return success_response(message="Entry deleted")

# -------- Pricing --------

@router.post("/pricing/quote")
async def quote_price(
    request: PriceQuoteRequest,
    config_store: ConfigStore = Depends(get_config_store),
    token: str = Depends(verify_admin_token)
):
    """Price a draft booking; an unusable code is reported, not raised"""
    breakdown = pricing_service.compute_price(request, config_store.get(), request.code)
    return success_response(message="Price calculated", data=breakdown)

# -------- Configuration --------

@router.get("/config")
async def get_config(
    config_store: ConfigStore = Depends(get_config_store),
    token: str = Depends(verify_admin_token)
):
    return success_response(message="Configuration retrieved", data=config_store.get())

@router.put("/config")
async def replace_config(
    config: AppConfig,
    config_store: ConfigStore = Depends(get_config_store),
    token: str = Depends(verify_admin_token)
):
    return success_response(message="Configuration saved", data=config_store.replace(config))

@router.patch("/config")
async def patch_config(
    patch: Dict[str, Any] = Body(...),
    config_store: ConfigStore = Depends(get_config_store),
    token: str = Depends(verify_admin_token)
):
    """Merge a partial camelCase config; lists replace whole lists"""
    try:
        config = config_store.update(patch)
    except ValidationError as e:
        return error_response(
            message="Configuration patch does not match the config schema",
            details=e.errors(include_url=False, include_context=False, include_input=False),
            status_code=422
        )
    return success_response(message="Configuration updated", data=config)
