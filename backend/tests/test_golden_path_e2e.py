import os
import sys
from uuid import uuid4

from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from servicebook.main import app

client = TestClient(app)


def test_golden_path_provider_booking_review_history():
    provider = client.post(
        "/providers",
        json={
            "name": f"Golden Gardens {uuid4().hex[:6]}",
            "service_type": "gardening",
            "contact_info": f"garden-{uuid4().hex[:8]}@example.com",
            "availability": [100, 200],
        },
    )
    assert provider.status_code == 200
    provider_id = provider.json()["id"]

    ada = client.post("/clients", json={"name": "Ada", "contact_info": f"ada-{uuid4().hex}@example.com"})
    grace = client.post("/clients", json={"name": "Grace", "contact_info": f"grace-{uuid4().hex}@example.com"})
    assert ada.status_code == 200
    assert grace.status_code == 200

    booking = client.post(
        "/bookings",
        json={
            "service_provider_id": provider_id,
            "client_id": ada.json()["id"],
            "service_date": 100,
            "service_type": "gardening",
        },
    )
    assert booking.status_code == 200
    booking_id = booking.json()["id"]
    assert booking.json()["status"] == "Pending"

    assert client.post(f"/bookings/{booking_id}/reschedule", json={"new_date": 200}).status_code == 200
    assert client.post(f"/bookings/{booking_id}/reschedule", json={"new_date": 300}).status_code == 409
    assert client.get(f"/bookings/{booking_id}").json()["service_date"] == 200

    for status in ("Confirmed", "Completed"):
        assert client.post(f"/bookings/{booking_id}/status", json={"status": status}).status_code == 200

    review = client.post("/reviews", json={"booking_id": booking_id, "rating": 5, "comment": "great"})
    assert review.status_code == 200
    assert client.get(f"/providers/{provider_id}").json()["average_rating"] == 5

    again = client.post("/reviews", json={"booking_id": booking_id, "rating": 1, "comment": "changed my mind"})
    assert again.status_code == 409

    second = client.post(
        "/bookings",
        json={
            "service_provider_id": provider_id,
            "client_id": grace.json()["id"],
            "service_date": 100,
            "service_type": "gardening",
        },
    ).json()
    for status in ("Confirmed", "Completed"):
        assert client.post(f"/bookings/{second['id']}/status", json={"status": status}).status_code == 200
    assert client.post("/reviews", json={"booking_id": second["id"], "rating": 2, "comment": ""}).status_code == 200
    assert client.get(f"/providers/{provider_id}").json()["average_rating"] == 3

    history = client.get(f"/providers/{provider_id}/history")
    assert history.status_code == 200
    assert [item["id"] for item in history.json()] == [booking_id, second["id"]]
    assert [item["status"] for item in history.json()] == ["Completed", "Completed"]
