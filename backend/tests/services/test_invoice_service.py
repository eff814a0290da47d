"""Tests for invoice requests raised at checkout and their processing."""

import pytest

from app.core.exceptions import ConflictException, NotFoundException, ValidationException
from app.models.booking import Booking
from app.models.invoice import InvoiceRequest
from app.models.notification import Notification
from app.services.booking_service import BookingService
from app.services.invoice_service import InvoiceService

INVOICE = {
    "company_name": "Cerámica Norte SL",
    "tax_id": "B12345678",
    "address": "Calle Mayor 1, Madrid",
    "email": "Facturas@Example.com",
}


def _checkout(db, product, **extra):
    booking, _ = BookingService(db).create_booking(
        {
            "product_id": product.id,
            "slots": [{"date": "2030-03-04", "time": "10:00"}],
            "user_info": {"email": "ana@example.com", "first_name": "Ana"},
            **extra,
        }
    )
    return booking


@pytest.fixture
def service(db):
    return InvoiceService(db)


def test_checkout_with_invoice_data(db, wheel_product):
    booking = _checkout(db, wheel_product, invoice_data=dict(INVOICE))

    invoice = db.query(InvoiceRequest).one()
    assert invoice.booking_id == booking.id
    assert invoice.status == "Pending"
    assert invoice.email == "facturas@example.com"
    assert invoice.requested_at is not None
    assert [n.type for n in db.query(Notification).order_by(Notification.type).all()] == [
        "new_booking",
        "new_invoice_request",
    ]


def test_checkout_without_invoice_data(db, wheel_product):
    _checkout(db, wheel_product)

    assert db.query(InvoiceRequest).count() == 0


def test_incomplete_invoice_data_aborts_checkout(db, wheel_product):
    with pytest.raises(ValidationException) as exc_info:
        _checkout(db, wheel_product, invoice_data={**INVOICE, "tax_id": " "})

    assert exc_info.value.code == "invalid_invoice_data"
    assert exc_info.value.details == {"missing": ["tax_id"]}
    assert db.query(Booking).count() == 0
    assert db.query(Notification).count() == 0


def test_mark_processed(service, db, wheel_product):
    booking = _checkout(db, wheel_product, invoice_data=dict(INVOICE))
    invoice = db.query(InvoiceRequest).one()

    processed = service.mark_processed(invoice.id)

    assert processed.status == "Processed"
    assert processed.processed_at is not None
    assert InvoiceService.to_dict(processed)["booking_code"] == booking.booking_code
    with pytest.raises(ConflictException) as exc_info:
        service.mark_processed(invoice.id)
    assert exc_info.value.code == "invoice_already_processed"


def test_list_by_status_and_delete(service, db, wheel_product, painting_product):
    _checkout(db, wheel_product, invoice_data=dict(INVOICE))
    _checkout(
        db,
        painting_product,
        user_info={"email": "luis@example.com"},
        invoice_data={**INVOICE, "company_name": "Otra SL"},
    )
    first = service.list_requests()[-1]
    service.mark_processed(first.id)

    assert len(service.list_requests("Pending")) == 1
    assert [i.id for i in service.list_requests("Processed")] == [first.id]
    with pytest.raises(ValidationException):
        service.list_requests("Lost")

    service.delete_request(first.id)
    assert len(service.list_requests()) == 1
    with pytest.raises(NotFoundException):
        service.delete_request(first.id)
