"""HTTP tests for health, metrics, the root endpoint and notifications."""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "ok"


def test_metrics(client, wheel_product):
    client.post(
        "/api/v1/bookings",
        json={
            "product_id": wheel_product.id,
            "slots": [{"date": "2030-03-04", "time": "10:00"}],
            "user_info": {"email": "ana@example.com"},
        },
    )

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "studio_service_operations_total" in response.text
    assert "studio_bookings_created_total" in response.text


def test_root(client):
    body = client.get("/").json()

    assert body["docs"] == "/docs"


def test_unknown_route_is_problem_document(client):
    response = client.get("/api/v1/nowhere")

    assert response.status_code == 404
    assert response.json()["title"] == "Not Found"


def test_notifications_inbox(client, wheel_product):
    client.post(
        "/api/v1/bookings",
        json={
            "product_id": wheel_product.id,
            "slots": [{"date": "2030-03-04", "time": "10:00"}],
            "user_info": {"email": "ana@example.com"},
        },
    )

    inbox = client.get("/api/v1/notifications").json()
    assert inbox["unread_count"] == 1
    notification_id = inbox["notifications"][0]["id"]
    assert inbox["notifications"][0]["type"] == "new_booking"

    read = client.post(f"/api/v1/notifications/{notification_id}/read")
    assert read.json()["read"] is True
    assert client.get("/api/v1/notifications", params={"unread_only": True}).json() == {
        "notifications": [],
        "unread_count": 0,
    }
