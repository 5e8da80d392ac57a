"""
Tests for the waiting list
"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from theater_admin.core.db import Base
from theater_admin.core.errors import (
    BookingRuleError,
    InvalidStatusTransitionError,
    WaitlistEntryNotFoundError,
    WaitlistNotNeededError,
)
from theater_admin.schemas.reservation import ReservationCreate
from theater_admin.schemas.show import ShowCreate
from theater_admin.schemas.waitlist import WaitingListEntry, WaitlistConversion, WaitlistCreate
from theater_admin.services.config_store import ConfigStore, LocalStorage
from theater_admin.services.repositories import ReservationRepo, ShowRepo, WaitingListRepo
from theater_admin.services.reservation_service import ReservationService
from theater_admin.services.schedule_service import ScheduleService
from theater_admin.services.waitlist_service import WaitlistService, waitlist_candidates

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_waitlist.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DATE = "2025-03-14"

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def reservations(db_session, tmp_path):
    store = ConfigStore(LocalStorage(str(tmp_path)), "appConfig")
    store.load()
    ScheduleService(ShowRepo(db_session), ReservationRepo(db_session), store.get()).add_show(
        ShowCreate(date=DATE, name="Nachtcafé", type="Lunch Theater", capacity=50)
    )
    return ReservationService(ShowRepo(db_session), ReservationRepo(db_session), store)

@pytest.fixture
def waitlist(db_session, reservations):
    return WaitlistService(WaitingListRepo(db_session), ShowRepo(db_session), ReservationRepo(db_session), reservations)

@pytest.fixture
def full_date(reservations):
    reservations.add_reservation(ReservationCreate(date=DATE, contact_name="Groot Gezelschap", guests=48))
    return DATE

def waitlist_request(guests=4, **kwargs):
    kwargs.setdefault("name", "Petra de Vries")
    kwargs.setdefault("email", "petra@theaterdebuurt.nl")
    return WaitlistCreate(date=DATE, guests=guests, **kwargs)

def entry(eid, guests, status="active", partial=False, minute=0):
    return WaitingListEntry(
        id=eid, date=DATE, name=eid, guests=guests, status=status,
        accept_partial_booking=partial, added_at=datetime(2025, 3, 1, 10, minute),
    )

class TestCandidates:
    """Who could be served from the seats left"""

    def test_fitting_entries_oldest_first(self):
        entries = [
            entry("late", 2, minute=30),
            entry("early", 3, minute=5),
            entry("too-big", 6, minute=1),
            entry("partial", 6, partial=True, minute=10),
            entry("done", 1, status="converted"),
            entry("notified", 1, status="notified", minute=20),
        ]

        names = [e.id for e in waitlist_candidates(entries, available=4)]

        assert names == ["early", "partial", "notified", "late"]

    def test_nothing_when_no_seats(self):
        assert waitlist_candidates([entry("a", 1, partial=True)], available=0) == []

class TestWaitlist:
    """Entry lifecycle"""

    def test_date_with_seats_does_not_need_waitlist(self, waitlist):
        with pytest.raises(WaitlistNotNeededError):
            waitlist.add_entry(waitlist_request(4))

    def test_full_date_accepts_entry(self, waitlist, full_date):
        created = waitlist.add_entry(waitlist_request(4))

        assert created.status == "active"
        assert waitlist.list_entries(date=full_date) == [created]

    def test_closed_date_accepts_entry(self, waitlist, db_session):
        show = ShowRepo(db_session).get_by_date(DATE)
        ShowRepo(db_session).update(show.id, {"is_closed": True})

        assert waitlist.add_entry(waitlist_request(2)).status == "active"

    def test_notify_then_expire(self, waitlist, full_date):
        created = waitlist.add_entry(waitlist_request(4))

        notified = waitlist.notify(created.id)
        assert notified.status == "notified"
        assert notified.notifications_sent == 1

        assert waitlist.expire(created.id).status == "expired"
        with pytest.raises(InvalidStatusTransitionError):
            waitlist.notify(created.id)

    def test_convert_books_and_links_reservation(self, waitlist, reservations, full_date):
        created = waitlist.add_entry(waitlist_request(4))

        reservation = waitlist.convert(created.id, WaitlistConversion(drink_package="premium"))

        assert reservation.guests == 4
        assert reservation.contact_name == "Petra de Vries"
        assert reservation.status == "pending"
        converted = waitlist.get(created.id)
        assert converted.status == "converted"
        assert converted.reservation_id == reservation.id

    def test_partial_conversion_requires_consent(self, waitlist, full_date):
        strict = waitlist.add_entry(waitlist_request(4))
        flexible = waitlist.add_entry(waitlist_request(4, accept_partial_booking=True))

        with pytest.raises(BookingRuleError):
            waitlist.convert(strict.id, WaitlistConversion(guests=2))

        reservation = waitlist.convert(flexible.id, WaitlistConversion(guests=2, approved_by="Jan"))
        assert reservation.guests == 2
        assert reservation.status == "confirmed"
        assert reservation.approved_by == "Jan"

    def test_cannot_book_more_than_requested(self, waitlist, full_date):
        created = waitlist.add_entry(waitlist_request(4, accept_partial_booking=True))
        with pytest.raises(BookingRuleError):
            waitlist.convert(created.id, WaitlistConversion(guests=5))

    def test_candidates_for_date(self, waitlist, full_date):
        waitlist.add_entry(waitlist_request(3))
        flexible = waitlist.add_entry(waitlist_request(4, accept_partial_booking=True))

        assert waitlist.candidates(full_date) == [flexible]

    def test_delete(self, waitlist, full_date):
        created = waitlist.add_entry(waitlist_request(4))
        waitlist.delete_entry(created.id)
        with pytest.raises(WaitlistEntryNotFoundError):
            waitlist.get(created.id)
