"""HTTP tests for /api/v1/products."""

BASE = "/api/v1/products"


def test_create_and_list(client):
    response = client.post(
        BASE, json={"name": "Clase suelta de Torno", "type": "SINGLE_CLASS", "price": "30"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["price"] == 30.0
    assert body["sessions"] == 1
    assert body["is_active"] is True

    listing = client.get(BASE).json()
    assert listing["total"] == 1
    assert listing["products"][0]["id"] == body["id"]


def test_filter_by_type(client, wheel_product, painting_product):
    response = client.get(BASE, params={"type": "CLASS_PACKAGE"})

    assert [p["id"] for p in response.json()["products"]] == [wheel_product.id]


def test_update_and_archive(client, wheel_product):
    response = client.patch(f"{BASE}/{wheel_product.id}", json={"price": 200})
    assert response.status_code == 200
    assert response.json()["price"] == 200.0

    response = client.delete(f"{BASE}/{wheel_product.id}")
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    assert client.get(BASE).json()["total"] == 0
    assert client.get(BASE, params={"include_inactive": True}).json()["total"] == 1


def test_unknown_product_returns_problem(client):
    response = client.get(f"{BASE}/missing")

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "product_not_found"
    assert body["status"] == 404
    assert body["instance"] == f"{BASE}/missing"


def test_rejects_unknown_type(client):
    response = client.post(BASE, json={"name": "Raro", "type": "MYSTERY", "price": 1})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_rejects_extra_fields(client):
    response = client.post(BASE, json={"name": "Raro", "price": 1, "color": "red"})

    assert response.status_code == 422
