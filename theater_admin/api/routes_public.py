"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends, Query, Request

from theater_admin.api.deps import get_schedule_service, get_waitlist_service
from theater_admin.schemas.waitlist import WaitlistCreate
from theater_admin.services.schedule_service import ScheduleService
from theater_admin.services.waitlist_service import WaitlistService
from theater_admin.utils.security import waitlist_limiter, get_client_ip
from theater_admin.utils.responses import success_response, rate_limit_error

router = APIRouter()

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/availability")
async def get_availability(
    month: str = Query(..., pattern=MONTH_PATTERN),
    schedule: ScheduleService = Depends(get_schedule_service)
):
    """Seats left per show date of a month, never below zero"""
    return success_response(
        message="Availability retrieved",
        data=schedule.availability(month)
    )

@router.post("/waitlist")
async def join_waitlist(
    entry: WaitlistCreate,
    request: Request,
    waitlist: WaitlistService = Depends(get_waitlist_service)
):
    """Join the waiting list for a full or closed date"""
    if not waitlist_limiter.allow(get_client_ip(request)):
        rate_limit_error()

    created = waitlist.add_entry(entry)
    return success_response(
        message="Added to the waiting list",
        data=created,
        status_code=201
    )
