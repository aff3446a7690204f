from datetime import time

import pytest

from fastapi.testclient import TestClient
from main import DEMO_REQUESTERS, create_app
from settings import BookingSettings


@pytest.fixture
def client():
    """Fresh app with an empty catalog for each test."""
    app = create_app(BookingSettings(seed_demo_data=False))
    return TestClient(app)


def register_room(client, name="Orchid", capacity=6, equipment=("PROJECTOR",), location="Floor 1") -> str:
    response = client.post(
        "/rooms",
        json={
            "display_name": name,
            "capacity": capacity,
            "equipment": list(equipment),
            "location": location,
        }
    )
    assert response.status_code == 201
    return response.json()["room_id"]


def book(client, room_id, start, end, requester_id="U1"):
    return client.post(
        "/bookings",
        json={
            "requester_id": requester_id,
            "room_id": room_id,
            "start": start,
            "end": end
        }
    )


def test_register_and_get_room(client):
    room_id = register_room(client, equipment=("WHITEBOARD", "PROJECTOR"))
    response = client.get(f"/rooms/{room_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["display_name"] == "Orchid"
    assert data["capacity"] == 6
    assert data["equipment"] == ["PROJECTOR", "WHITEBOARD"]
    assert data["location"] == "Floor 1"

def test_register_room_invalid_capacity(client):
    response = client.post("/rooms", json={"display_name": "Closet", "capacity": 0})
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "invalid_input"

def test_get_room_not_found(client):
    response = client.get("/rooms/room_missing")
    assert response.status_code == 404
    assert response.json()["detail"] == {
        "code": "resource_not_found",
        "message": "Room not found.",
        "resource_id": "room_missing",
    }

def test_list_rooms(client):
    register_room(client, name="Orchid")
    register_room(client, name="Lotus", capacity=12)
    response = client.get("/rooms")
    assert response.status_code == 200
    assert [r["display_name"] for r in response.json()] == ["Orchid", "Lotus"]

def test_create_booking_success(client):
    room_id = register_room(client)
    response = book(client, room_id, "2030-01-01 10:00", "2030-01-01 11:00")
    assert response.status_code == 201
    data = response.json()
    assert data["booking_id"]
    assert data["room_id"] == room_id
    assert data["requester_id"] == "U1"
    assert data["start"] == "2030-01-01 10:00"
    assert data["end"] == "2030-01-01 11:00"
    assert data["created_at"]

def test_create_booking_start_not_before_end(client):
    room_id = register_room(client)
    response = book(client, room_id, "2030-01-01 12:00", "2030-01-01 11:00")
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "invalid_interval"

def test_create_booking_start_in_past(client):
    room_id = register_room(client)
    response = book(client, room_id, "2000-01-01 10:00", "2000-01-01 11:00")
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Cannot book in the past."

def test_create_booking_outside_business_hours(client):
    room_id = register_room(client)
    response = book(client, room_id, "2030-01-01 17:30", "2030-01-01 18:30")
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "outside_business_hours"

def test_create_booking_unknown_room(client):
    response = book(client, "room_missing", "2030-01-01 10:00", "2030-01-01 11:00")
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "resource_not_found"

def test_create_booking_overlap_conflict(client):
    room_id = register_room(client)
    # First booking
    first = book(client, room_id, "2030-01-01 10:00", "2030-01-01 11:00").json()
    # Overlapping booking
    response = book(client, room_id, "2030-01-01 10:30", "2030-01-01 11:30", requester_id="U2")
    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["code"] == "overlap_conflict"
    assert detail["conflicting_booking_id"] == first["booking_id"]

def test_create_booking_back_to_back_no_conflict(client):
    room_id = register_room(client)
    book(client, room_id, "2030-01-01 10:00", "2030-01-01 11:00")
    response = book(client, room_id, "2030-01-01 11:00", "2030-01-01 12:00")
    assert response.status_code == 201
    assert response.json()["start"] == "2030-01-01 11:00"

def test_create_booking_invalid_timestamp(client):
    room_id = register_room(client)
    response = book(client, room_id, "2030-01-01T10:00:00Z", "2030-01-01 11:00")
    assert response.status_code == 422

def test_list_bookings_for_room_sorted_by_start(client):
    room_id = register_room(client)
    book(client, room_id, "2030-01-03 12:00", "2030-01-03 13:00")
    book(client, room_id, "2030-01-03 10:00", "2030-01-03 11:00")

    response = client.get(f"/rooms/{room_id}/bookings")
    assert response.status_code == 200
    data = response.json()
    assert [b["start"] for b in data] == ["2030-01-03 10:00", "2030-01-03 12:00"]

def test_list_bookings_empty_room(client):
    room_id = register_room(client)
    response = client.get(f"/rooms/{room_id}/bookings")
    assert response.status_code == 200
    assert response.json() == []

def test_list_bookings_for_requester(client):
    room_id = register_room(client)
    book(client, room_id, "2030-01-03 10:00", "2030-01-03 11:00", requester_id="U1")
    book(client, room_id, "2030-01-03 11:00", "2030-01-03 12:00", requester_id="U2")

    data = client.get("/requesters/U2/bookings").json()
    assert len(data) == 1
    assert data[0]["requester_id"] == "U2"

def test_cancel_booking_success(client):
    room_id = register_room(client)
    booking_id = book(client, room_id, "2030-01-02 10:00", "2030-01-02 11:00").json()["booking_id"]

    delete_response = client.delete(f"/bookings/{booking_id}", params={"requester_id": "U1"})
    assert delete_response.status_code == 204
    assert client.get(f"/rooms/{room_id}/bookings").json() == []

def test_cancel_booking_not_owner(client):
    owner, other = DEMO_REQUESTERS
    room_id = register_room(client)
    booking_id = book(
        client, room_id, "2030-01-02 10:00", "2030-01-02 11:00", requester_id=owner.requester_id
    ).json()["booking_id"]

    response = client.delete(f"/bookings/{booking_id}", params={"requester_id": other.requester_id})
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "not_owner"
    assert len(client.get(f"/rooms/{room_id}/bookings").json()) == 1

def test_cancel_booking_not_found(client):
    response = client.delete("/bookings/non_existent_booking", params={"requester_id": "U1"})
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"

def test_availability_search(client):
    a = register_room(client, name="A", capacity=6, equipment=("PROJECTOR",))
    b = register_room(client, name="B", capacity=12, equipment=("VC", "PROJECTOR"))
    register_room(client, name="C", capacity=4, equipment=())
    params = {
        "start": "2030-01-04 10:00",
        "end": "2030-01-04 11:00",
        "min_capacity": 5,
        "equipment": ["PROJECTOR"],
    }

    response = client.get("/availability", params=params)
    assert response.status_code == 200
    assert [r["room_id"] for r in response.json()] == [a, b]

    book(client, a, "2030-01-04 10:00", "2030-01-04 11:00")
    assert [r["room_id"] for r in client.get("/availability", params=params).json()] == [b]

def test_availability_search_rejects_reversed_window(client):
    response = client.get("/availability", params={"start": "2030-01-04 11:00", "end": "2030-01-04 10:00"})
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "invalid_interval"

def test_availability_search_rejects_bad_timestamp(client):
    response = client.get("/availability", params={"start": "2030-01-04T10:00", "end": "2030-01-04 11:00"})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "invalid_input"
    assert detail["field"] == "start"

def test_demo_seeding():
    client = TestClient(create_app(BookingSettings(seed_demo_data=True)))
    names = sorted(r["display_name"] for r in client.get("/rooms").json())
    assert names == ["Iris", "Lotus", "Orchid"]

def test_create_app_applies_business_hours_from_settings():
    settings = BookingSettings(seed_demo_data=False, work_start=time(6, 0), work_end=time(20, 0))
    client = TestClient(create_app(settings))
    room_id = register_room(client)

    response = book(client, room_id, "2030-01-05 06:30", "2030-01-05 07:30")
    assert response.status_code == 201
    response = book(client, room_id, "2030-01-05 19:00", "2030-01-05 20:30")
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Booking is outside business hours: 06:00 - 20:00"
