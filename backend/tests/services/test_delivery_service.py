"""Tests for DeliveryService lifecycle and the overdue sweep."""

from datetime import date, datetime, timezone

import pytest

from app.core.exceptions import NotFoundException, ValidationException
from app.services.delivery_service import DeliveryService, delivery_timeline

TODAY = date(2030, 2, 20)


@pytest.fixture
def service(db):
    return DeliveryService(db)


def _create(service, scheduled="2030-02-25", email="Ana@Example.com"):
    return service.create_delivery(
        {
            "customer_email": email,
            "customer_name": "Ana Torres",
            "description": "Juego de tazas esmaltadas",
            "scheduled_date": scheduled,
        }
    )


def test_create_delivery(service):
    delivery = _create(service)

    assert delivery.customer_email == "ana@example.com"
    assert delivery.status == "pending"
    assert delivery.scheduled_date == date(2030, 2, 25)
    assert delivery.photos == []


def test_create_requires_fields(service):
    with pytest.raises(ValidationException) as exc_info:
        service.create_delivery({"customer_email": "ana@example.com"})
    assert exc_info.value.code == "missing_fields"


def test_update_delivery(service):
    delivery = _create(service)

    updated = service.update_delivery(
        delivery.id,
        {"scheduled_date": "2030-03-01", "photos": ["a.jpg"], "notes": "Frágil", "id": "x"},
    )

    assert updated.scheduled_date == date(2030, 3, 1)
    assert updated.photos == ["a.jpg"]
    assert updated.notes == "Frágil"
    assert updated.id == delivery.id


def test_update_rejects_unknown_status(service):
    delivery = _create(service)

    with pytest.raises(ValidationException) as exc_info:
        service.update_delivery(delivery.id, {"status": "lost"})
    assert exc_info.value.code == "invalid_status"


def test_ready_then_completed(service):
    delivery = _create(service)
    ready_at = datetime(2030, 2, 1, 15, 0, tzinfo=timezone.utc)

    delivery = service.mark_ready(delivery.id, ready_at=ready_at)
    assert delivery.status == "ready"
    assert delivery.ready_at == ready_at

    delivery = service.mark_completed(delivery.id, notes="Retirado por su hermana")
    assert delivery.status == "completed"
    assert delivery.delivered_at is not None
    assert delivery.completed_at is not None
    assert delivery.notes == "Retirado por su hermana"

    with pytest.raises(ValidationException) as exc_info:
        service.mark_ready(delivery.id)
    assert exc_info.value.code == "already_completed"


def test_list_filters(service):
    _create(service)
    other = _create(service, email="luis@example.com", scheduled="2030-02-22")
    service.mark_ready(other.id)

    assert len(service.list_deliveries()) == 2
    assert [d.id for d in service.list_deliveries(email="LUIS@example.com")] == [other.id]
    assert [d.id for d in service.list_deliveries(status="ready")] == [other.id]


def test_delete_delivery(service):
    delivery = _create(service)

    service.delete_delivery(delivery.id)

    assert service.list_deliveries() == []
    with pytest.raises(NotFoundException):
        service.get_delivery(delivery.id)
    with pytest.raises(NotFoundException):
        service.delete_delivery(delivery.id)


def test_mark_overdue(service):
    late = _create(service, scheduled="2030-02-18")
    due_today = _create(service, scheduled="2030-02-20", email="luis@example.com")
    ready = _create(service, scheduled="2030-02-10", email="marta@example.com")
    service.mark_ready(ready.id)

    assert service.mark_overdue(today=TODAY) == 1

    assert service.get_delivery(late.id).status == "overdue"
    assert service.get_delivery(due_today.id).status == "pending"
    assert service.get_delivery(ready.id).status == "ready"
    assert service.mark_overdue(today=TODAY) == 0


def test_timeline(service):
    delivery = _create(service)
    assert delivery_timeline(delivery, TODAY) == {
        "days_until_scheduled": 5,
        "scheduled_status": "upcoming",
        "ready_expires_at": None,
        "ready_status": None,
        "critically_urgent": False,
    }

    delivery = service.mark_ready(
        delivery.id, ready_at=datetime(2030, 2, 1, 15, 0, tzinfo=timezone.utc)
    )
    timeline = delivery_timeline(delivery, TODAY)

    assert timeline["ready_expires_at"] == datetime(2030, 4, 2, 15, 0, tzinfo=timezone.utc)
    assert timeline["ready_status"] == "ok"
    assert timeline["critically_urgent"] is False
