"""HTTP tests for /api/v1/customers."""

BASE = "/api/v1/customers"
BOOKINGS = "/api/v1/bookings"


def _checkout(client, product, email, slot_date="2030-03-04", **extra):
    response = client.post(
        BOOKINGS,
        json={
            "product_id": product.id,
            "slots": [{"date": slot_date, "time": "10:00"}],
            "user_info": {"email": email, "first_name": "Ana"},
            **extra,
        },
    )
    assert response.status_code == 201
    return response.json()["booking"]


def test_list_and_detail(client, wheel_product, painting_product):
    _checkout(client, wheel_product, "ana@example.com")
    _checkout(client, painting_product, "ana@example.com", slot_date="2030-03-11")
    client.post(
        "/api/v1/deliveries",
        json={
            "customer_email": "ana@example.com",
            "description": "Jarrón",
            "scheduled_date": "2030-04-01",
        },
    )

    listing = client.get(BASE).json()
    assert listing["total"] == 1
    assert listing["page"] == 1
    assert listing["customers"][0]["email"] == "ana@example.com"
    assert listing["customers"][0]["total_bookings"] == 2
    assert listing["customers"][0]["total_spent"] == 0.0

    detail = client.get(f"{BASE}/ana@example.com")
    assert detail.status_code == 200
    body = detail.json()
    assert len(body["bookings"]) == 2
    assert [d["description"] for d in body["deliveries"]] == ["Jarrón"]


def test_update_info(client, wheel_product):
    _checkout(client, wheel_product, "ana@example.com")

    response = client.patch(f"{BASE}/ana@example.com", json={"phone": "600", "last_name": "Ruiz"})

    assert response.status_code == 200
    info = response.json()["user_info"]
    assert info["phone"] == "600"
    assert info["first_name"] == "Ana"

    assert client.patch(f"{BASE}/ana@example.com", json={"email": "x@y.com"}).status_code == 422


def test_delete_customer(client, wheel_product):
    _checkout(
        client,
        wheel_product,
        "ana@example.com",
        invoice_data={
            "company_name": "Cerámica SL",
            "tax_id": "B123",
            "address": "Calle 1",
            "email": "facturas@example.com",
        },
    )

    response = client.delete(f"{BASE}/ana@example.com")

    assert response.status_code == 200
    assert response.json() == {"bookings": 1, "deliveries": 0, "invoice_requests": 1}
    assert client.get(BASE).json()["total"] == 0
    assert client.get("/api/v1/invoices").json()["total"] == 0
    assert client.delete(f"{BASE}/ana@example.com").json()["code"] == "customer_not_found"
