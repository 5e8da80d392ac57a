"""
Request-scoped service wiring
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from theater_admin.core.db import get_db
from theater_admin.services.config_store import ConfigStore
from theater_admin.services.repositories import ReservationRepo, ShowRepo, WaitingListRepo
from theater_admin.services.reservation_service import ReservationService
from theater_admin.services.schedule_service import ScheduleService
from theater_admin.services.waitlist_service import WaitlistService

def get_config_store(request: Request) -> ConfigStore:
    return request.app.state.config_store

def get_schedule_service(
    db: Session = Depends(get_db),
    config_store: ConfigStore = Depends(get_config_store)
) -> ScheduleService:
    return ScheduleService(ShowRepo(db), ReservationRepo(db), config_store.get())

def get_reservation_service(
    db: Session = Depends(get_db),
    config_store: ConfigStore = Depends(get_config_store)
) -> ReservationService:
    return ReservationService(ShowRepo(db), ReservationRepo(db), config_store)

def get_waitlist_service(
    db: Session = Depends(get_db),
    reservation_service: ReservationService = Depends(get_reservation_service)
) -> WaitlistService:
    return WaitlistService(WaitingListRepo(db), ShowRepo(db), ReservationRepo(db), reservation_service)
