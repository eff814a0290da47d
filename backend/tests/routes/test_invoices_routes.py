"""HTTP tests for /api/v1/invoices."""

BASE = "/api/v1/invoices"
INVOICE = {
    "company_name": "Cerámica Norte SL",
    "tax_id": "B12345678",
    "address": "Calle Mayor 1",
    "email": "facturas@example.com",
}


def _checkout(client, product, **extra):
    response = client.post(
        "/api/v1/bookings",
        json={
            "product_id": product.id,
            "slots": [{"date": "2030-03-04", "time": "10:00"}],
            "user_info": {"email": "ana@example.com"},
            **extra,
        },
    )
    return response


def test_checkout_invoice_then_process(client, wheel_product):
    booking = _checkout(client, wheel_product, invoice_data=INVOICE).json()["booking"]

    listing = client.get(BASE).json()
    assert listing["total"] == 1
    invoice = listing["invoices"][0]
    assert invoice["booking_code"] == booking["booking_code"]
    assert invoice["status"] == "Pending"

    processed = client.post(f"{BASE}/{invoice['id']}/process")
    assert processed.status_code == 200
    assert processed.json()["status"] == "Processed"
    assert processed.json()["processed_at"] is not None

    assert client.post(f"{BASE}/{invoice['id']}/process").status_code == 409
    assert client.get(BASE, params={"status": "Pending"}).json()["total"] == 0


def test_invalid_invoice_data_is_rejected(client, wheel_product):
    response = _checkout(client, wheel_product, invoice_data={**INVOICE, "email": "nope"})

    assert response.status_code == 422
    assert client.get("/api/v1/bookings").json()["total"] == 0


def test_delete_and_unknown(client, wheel_product):
    _checkout(client, wheel_product, invoice_data=INVOICE)
    invoice_id = client.get(BASE).json()["invoices"][0]["id"]

    assert client.delete(f"{BASE}/{invoice_id}").status_code == 204
    assert client.delete(f"{BASE}/{invoice_id}").status_code == 404
    assert client.get(BASE, params={"status": "Lost"}).status_code == 422
