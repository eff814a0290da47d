"""HTTP tests for /api/v1/availability."""

BASE = "/api/v1/availability"
WEEKLY = {
    "Monday": [
        {"time": "10:00", "technique": "potters_wheel"},
        {"time": "16:00", "technique": "painting"},
    ]
}


def test_settings_round_trip(client):
    response = client.put(f"{BASE}/settings", json={"weekly_availability": WEEKLY})

    assert response.status_code == 200
    body = response.json()
    assert body["weekly_availability"]["Monday"][0]["time"] == "10:00"
    assert body["weekly_availability"]["Monday"][1]["technique"] == "molding"
    assert body["weekly_availability"]["Friday"] == []
    assert body["class_capacity"]["molding"] == 22

    assert client.get(f"{BASE}/settings").json() == body


def test_settings_rejects_unknown_day(client):
    response = client.put(f"{BASE}/settings", json={"weekly_availability": {"Funday": []}})

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_day"


def test_capacity_update(client):
    response = client.put(f"{BASE}/settings", json={"class_capacity": {"potters_wheel": 6}})

    assert response.json()["class_capacity"]["potters_wheel"] == 6


def test_slots(client):
    client.put(f"{BASE}/settings", json={"weekly_availability": WEEKLY})

    response = client.get(
        f"{BASE}/slots",
        params={"technique": "potters_wheel", "start_date": "2030-01-07", "days_ahead": 7},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["technique"] == "potters_wheel"
    assert [(s["date"], s["time"], s["available"]) for s in body["slots"]] == [
        ("2030-01-07", "10:00", 7)
    ]


def test_slots_reject_unknown_technique(client):
    response = client.get(f"{BASE}/slots", params={"technique": "glassblowing"})

    assert response.status_code == 422


def test_calendar(client, wheel_product):
    client.post(
        "/api/v1/bookings",
        json={
            "product_id": wheel_product.id,
            "slots": [{"date": "2030-01-07", "time": "10:00"}],
            "user_info": {"email": "ana@example.com", "first_name": "Ana"},
            "participants": 2,
        },
    )

    response = client.get(
        f"{BASE}/calendar", params={"start_date": "2030-01-01", "end_date": "2030-01-31"}
    )

    slots = response.json()["slots"]
    assert len(slots) == 1
    assert slots[0]["total_participants"] == 2
    assert slots[0]["capacity"] == 8
    assert slots[0]["attendees"][0]["name"] == "Ana"


def test_calendar_rejects_inverted_range(client):
    response = client.get(
        f"{BASE}/calendar", params={"start_date": "2030-02-01", "end_date": "2030-01-01"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_range"
