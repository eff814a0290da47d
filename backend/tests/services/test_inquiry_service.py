"""Tests for InquiryService."""

from datetime import date

import pytest

from app.core.exceptions import NotFoundException, ValidationException
from app.models.inquiry import Inquiry
from app.models.notification import Notification
from app.services.inquiry_service import InquiryService

INQUIRY = {
    "name": "Marta Gil",
    "email": " Marta@Example.com ",
    "phone": "600111222",
    "country_code": "+34",
    "participants": 12,
    "tentative_date": date(2030, 5, 10),
    "tentative_time": "18:0",
    "event_type": "Cumpleaños",
    "inquiry_type": "team_building",
    "message": "Somos un equipo de diseño",
}


@pytest.fixture
def service(db):
    return InquiryService(db)


def test_create_queues_notification(service, db):
    inquiry = service.create_inquiry(dict(INQUIRY))

    assert inquiry.status == "New"
    assert inquiry.email == "marta@example.com"
    assert inquiry.tentative_time == "18:00"
    assert inquiry.inquiry_type == "team_building"

    notification = db.query(Notification).one()
    assert notification.type == "new_inquiry"
    assert notification.data == {"inquiry_id": inquiry.id, "participants": 12}


def test_type_defaults_to_group(service):
    inquiry = service.create_inquiry({"name": "Luis", "email": "luis@example.com"})

    assert inquiry.inquiry_type == "group"
    assert inquiry.participants == 1


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"email": ""}, "missing_email"),
        ({"name": " "}, "missing_name"),
        ({"inquiry_type": "wedding"}, "invalid_inquiry_type"),
        ({"participants": 0}, "invalid_participants"),
        ({"tentative_time": "evening"}, "invalid_time"),
    ],
)
def test_create_validation(service, db, overrides, code):
    with pytest.raises(ValidationException) as exc_info:
        service.create_inquiry({**INQUIRY, **overrides})

    assert exc_info.value.code == code
    assert db.query(Inquiry).count() == 0
    assert db.query(Notification).count() == 0


def test_status_pipeline_and_listing(service):
    first = service.create_inquiry(dict(INQUIRY))
    second = service.create_inquiry({**INQUIRY, "name": "Otro"})

    service.update_status(first.id, "Contacted")

    assert [i.id for i in service.list_inquiries("Contacted")] == [first.id]
    assert {i.id for i in service.list_inquiries()} == {first.id, second.id}

    with pytest.raises(ValidationException):
        service.update_status(first.id, "Lost")
    with pytest.raises(ValidationException):
        service.list_inquiries("Lost")


def test_delete(service, db):
    inquiry = service.create_inquiry(dict(INQUIRY))

    service.delete_inquiry(inquiry.id)

    assert db.query(Inquiry).count() == 0
    with pytest.raises(NotFoundException) as exc_info:
        service.delete_inquiry(inquiry.id)
    assert exc_info.value.code == "inquiry_not_found"
