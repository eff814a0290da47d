"""HTTP tests for /api/v1/deliveries."""

BASE = "/api/v1/deliveries"
PAYLOAD = {
    "customer_email": "ana@example.com",
    "customer_name": "Ana Torres",
    "description": "Juego de tazas",
    "scheduled_date": "2030-02-25",
}


def test_delivery_lifecycle(client):
    created = client.post(BASE, json=PAYLOAD)
    assert created.status_code == 201
    delivery = created.json()
    assert delivery["status"] == "pending"
    assert delivery["timeline"]["scheduled_status"] == "upcoming"
    assert delivery["timeline"]["ready_status"] is None

    ready = client.post(f"{BASE}/{delivery['id']}/ready")
    assert ready.status_code == 200
    assert ready.json()["status"] == "ready"
    assert ready.json()["timeline"]["ready_status"] == "ok"

    completed = client.post(f"{BASE}/{delivery['id']}/complete", json={"notes": "Retirado"})
    assert completed.json()["status"] == "completed"
    assert completed.json()["notes"] == "Retirado"

    listed = client.get(BASE, params={"status": "completed"}).json()
    assert listed["total"] == 1


def test_update_delivery(client):
    delivery_id = client.post(BASE, json=PAYLOAD).json()["id"]

    response = client.patch(f"{BASE}/{delivery_id}", json={"photos": ["taza.jpg"]})

    assert response.json()["photos"] == ["taza.jpg"]
    assert client.patch(f"{BASE}/{delivery_id}", json={"status": "lost"}).status_code == 422


def test_overdue_sweep(client):
    client.post(BASE, json={**PAYLOAD, "scheduled_date": "2020-01-01"})
    client.post(BASE, json=PAYLOAD)

    response = client.post(f"{BASE}/maintenance/overdue")

    assert response.json() == {"updated": 1}
    overdue = client.get(BASE, params={"status": "overdue"}).json()
    assert overdue["total"] == 1
    assert overdue["deliveries"][0]["timeline"]["scheduled_status"] == "overdue"


def test_delete_delivery(client):
    delivery_id = client.post(BASE, json=PAYLOAD).json()["id"]

    assert client.delete(f"{BASE}/{delivery_id}").status_code == 204
    response = client.delete(f"{BASE}/{delivery_id}")
    assert response.status_code == 404
    assert response.json()["code"] == "delivery_not_found"
