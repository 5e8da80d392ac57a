"""
Route tests for the public and admin API
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from theater_admin.api.deps import get_config_store
from theater_admin.api.ws import WebSocketManager
from theater_admin.core.config import settings
from theater_admin.core.db import Base, get_db
from theater_admin.services.config_store import ConfigStore, LocalStorage

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_api.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN = {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}

@pytest.fixture
def client(tmp_path):
    Base.metadata.create_all(bind=engine)
    store = ConfigStore(LocalStorage(str(tmp_path)), "appConfig")
    store.load()

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_config_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)

def create_show(client, date="2025-03-14", **kwargs):
    body = {"date": date, "name": "Nachtcafé", "type": "Lunch Theater", **kwargs}
    return client.post("/admin/shows", json=body, headers=ADMIN)

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}

def test_admin_routes_require_token(client):
    assert client.get("/admin/shows").status_code in (401, 403)
    assert client.get("/admin/shows", headers={"Authorization": "Bearer wrong"}).status_code == 401

def test_show_lifecycle(client):
    response = create_show(client, capacity=40)
    assert response.status_code == 201
    show = response.json()["data"]
    assert show["capacity"] == 40
    assert show["startTime"] == "12:00"

    duplicate = create_show(client)
    assert duplicate.status_code == 409
    assert duplicate.json()["error_code"] == "DUPLICATE_SHOW"

    toggled = client.post(f"/admin/shows/{show['id']}/toggle", headers=ADMIN)
    assert toggled.json()["data"]["isClosed"] is True

    assert client.get("/admin/shows/missing", headers=ADMIN).status_code == 404

def test_booking_flow_and_calendar(client):
    create_show(client, capacity=40)
    response = client.post("/admin/reservations", headers=ADMIN, json={
        "date": "2025-03-14", "contactName": "Familie Jansen", "guests": 30, "promoCode": "GROEP20",
    })
    assert response.status_code == 201
    reservation = response.json()["data"]
    assert reservation["status"] == "confirmed"
    assert reservation["totalPrice"] == 30 * 35 - 50

    pending = client.post("/admin/reservations", headers=ADMIN, json={
        "date": "2025-03-14", "contactName": "Smit", "guests": 20,
    }).json()["data"]
    assert pending["status"] == "pending"

    impact = client.get(f"/admin/reservations/{pending['id']}/approval", headers=ADMIN).json()["data"]
    assert impact["exceeds_by"] == 10

    calendar = client.get("/admin/calendar", params={"month": "2025-03"}, headers=ADMIN).json()["data"]
    assert calendar["2025-03-14"]["booked"] == 30
    assert calendar["2025-03-14"]["available"] == 10

    bad_transition = client.post(
        f"/admin/reservations/{reservation['id']}/status", json={"status": "pending"}, headers=ADMIN
    )
    assert bad_transition.status_code == 409

    checkin = client.post(f"/admin/reservations/{reservation['id']}/checkin", headers=ADMIN)
    assert checkin.json()["data"]["checkedIn"] is True

    door_list = client.get("/admin/checkin/2025-03-14", headers=ADMIN).json()["data"]
    assert door_list["total_guests"] == 30
    assert door_list["checked_in_guests"] == 30

    export = client.get("/admin/checkin/2025-03-14/export.xlsx", headers=ADMIN)
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("application/vnd.openxmlformats")

def test_booking_with_invalid_code(client):
    create_show(client)
    response = client.post("/admin/reservations", headers=ADMIN, json={
        "date": "2025-03-14", "contactName": "Smit", "guests": 2, "promoCode": "NOPE",
    })
    assert response.status_code == 422
    assert response.json()["error_code"] == "BOOKING_RULE_VIOLATION"

def test_public_availability_and_waitlist(client):
    create_show(client, capacity=10)
    client.post("/admin/reservations", headers=ADMIN, json={
        "date": "2025-03-14", "contactName": "Groot", "guests": 10,
    })

    days = client.get("/availability", params={"month": "2025-03"}).json()["data"]
    assert days[0]["available"] == 0
    assert days[0]["fullyBooked"] is True

    joined = client.post("/waitlist", json={
        "date": "2025-03-14", "name": "Petra", "email": "petra@theaterdebuurt.nl", "guests": 2,
    })
    assert joined.status_code == 201
    assert joined.json()["data"]["status"] == "active"

    assert client.get("/availability", params={"month": "2025-13"}).status_code == 422

def test_pricing_quote_reports_bad_code(client):
    response = client.post("/admin/pricing/quote", headers=ADMIN, json={
        "showType": "Lunch Theater", "guests": 3, "code": "GROEP20",
    })
    data = response.json()["data"]
    assert (data["subtotal"], data["discount"], data["total"]) == (105, 50, 55)

    data = client.post("/admin/pricing/quote", headers=ADMIN, json={
        "showType": "Lunch Theater", "guests": 3, "code": "groep20",
    }).json()["data"]
    assert data["discount"] == 0
    assert data["error"] == "Invalid code"

def test_config_patch(client):
    response = client.patch("/admin/config", headers=ADMIN, json={"bookingSettings": {"maxGuests": 12}})
    assert response.json()["data"]["bookingSettings"]["maxGuests"] == 12
    assert response.json()["data"]["bookingSettings"]["minGuests"] == 1

    invalid = client.patch("/admin/config", headers=ADMIN, json={"showTypes": [{"defaultCapacity": 3}]})
    assert invalid.status_code == 422

def test_checkin_socket_handshake(client):
    with client.websocket_connect("/ws/checkin/2025-03-14") as socket:
        hello = socket.receive_json()
        assert hello["type"] == "connection"
        assert hello["date"] == "2025-03-14"

        socket.send_json({"type": "ping", "timestamp": 1})
        assert socket.receive_json() == {"type": "pong", "timestamp": 1}

class FakeSocket:
    def __init__(self):
        self.sent = []

    async def accept(self):
        pass

    async def send_text(self, text):
        self.sent.append(text)

def test_broadcast_reaches_only_same_date():
    manager = WebSocketManager()
    same, other = FakeSocket(), FakeSocket()

    async def scenario():
        await manager.connect(same, "2025-03-14")
        await manager.connect(other, "2025-03-15")
        await manager.broadcast_to_date("2025-03-14", {"type": "checkin"})

    asyncio.run(scenario())

    assert same.sent == ['{"type": "checkin"}']
    assert other.sent == []
    manager.disconnect(same, "2025-03-14")
    assert manager.get_all_connection_counts() == {"2025-03-15": 1}
