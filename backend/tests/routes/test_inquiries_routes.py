"""HTTP tests for /api/v1/inquiries."""

BASE = "/api/v1/inquiries"
INQUIRY = {
    "name": "Marta Gil",
    "email": "marta@example.com",
    "participants": 8,
    "tentative_date": "2030-05-10",
    "tentative_time": "18:00",
    "inquiry_type": "couple",
}


def test_submit_and_move_through_statuses(client):
    created = client.post(BASE, json=INQUIRY)
    assert created.status_code == 201
    inquiry = created.json()
    assert inquiry["status"] == "New"
    assert inquiry["inquiry_type"] == "couple"

    notifications = client.get("/api/v1/notifications").json()["notifications"]
    assert [n["type"] for n in notifications] == ["new_inquiry"]
    assert notifications[0]["data"]["inquiry_id"] == inquiry["id"]

    response = client.patch(f"{BASE}/{inquiry['id']}", json={"status": "Proposal Sent"})
    assert response.status_code == 200
    assert response.json()["status"] == "Proposal Sent"

    listing = client.get(BASE, params={"status": "Proposal Sent"}).json()
    assert [i["id"] for i in listing["inquiries"]] == [inquiry["id"]]
    assert client.get(BASE, params={"status": "New"}).json()["total"] == 0


def test_validation(client):
    assert client.post(BASE, json={**INQUIRY, "inquiry_type": "wedding"}).status_code == 422
    assert client.post(BASE, json={**INQUIRY, "participants": 0}).status_code == 422
    assert client.post(BASE, json={**INQUIRY, "tentative_time": "late"}).status_code == 400
    assert client.patch(f"{BASE}/missing", json={"status": "Archived"}).status_code == 404


def test_delete(client):
    inquiry_id = client.post(BASE, json=INQUIRY).json()["id"]

    assert client.delete(f"{BASE}/{inquiry_id}").status_code == 204
    assert client.get(BASE).json()["total"] == 0
