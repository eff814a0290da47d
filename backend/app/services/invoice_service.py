# backend/app/services/invoice_service.py
"""
Invoice requests.

A customer can ask for a tax invoice during checkout. The request is stored
next to the booking and the admin marks it processed once the invoice has
been issued outside the system.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.enums import InvoiceStatus, NotificationType
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..core.timezone_utils import utc_now
from ..models.booking import Booking
from ..models.invoice import InvoiceRequest
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("company_name", "tax_id", "address", "email")


class InvoiceService(BaseService):
    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_invoice_request_repository(db)
        self.notifications = notification_service or NotificationService(db)

    def create_request_locked(
        self, booking: Booking, invoice_data: Mapping[str, Any]
    ) -> InvoiceRequest:
        """Store an invoice request inside the caller's checkout transaction."""
        fields = {k: str(invoice_data.get(k) or "").strip() for k in _REQUIRED_FIELDS}
        missing = [k for k, v in fields.items() if not v]
        if missing:
            raise ValidationException(
                "Invoice data is incomplete",
                code="invalid_invoice_data",
                details={"missing": missing},
            )
        fields["email"] = fields["email"].lower()
        invoice = self.repository.create(
            booking_id=booking.id,
            status=InvoiceStatus.PENDING.value,
            requested_at=utc_now(),
            **fields,
        )
        self.notifications.notify(
            NotificationType.NEW_INVOICE_REQUEST.value,
            "Invoice requested",
            f"{fields['company_name']} asked for an invoice",
            booking_id=booking.id,
            data={"invoice_request_id": invoice.id, "booking_code": booking.booking_code},
        )
        logger.info("Invoice request %s queued for booking %s", invoice.id, booking.id)
        return invoice

    def list_requests(self, status: Optional[str] = None) -> List[InvoiceRequest]:
        if status and status not in {s.value for s in InvoiceStatus}:
            raise ValidationException(f"Unknown invoice status: {status}", code="invalid_status")
        return self.repository.list_requests(status=status)

    def get_request(self, invoice_id: str, *, for_update: bool = False) -> InvoiceRequest:
        if for_update:
            invoice = self.repository.get_for_update(invoice_id)
        else:
            invoice = self.repository.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundException(
                f"Invoice request {invoice_id} not found", code="invoice_not_found"
            )
        return invoice

    @BaseService.measure_operation("process_invoice_request")
    def mark_processed(self, invoice_id: str) -> InvoiceRequest:
        with self.transaction():
            invoice = self.get_request(invoice_id, for_update=True)
            if invoice.status == InvoiceStatus.PROCESSED.value:
                raise ConflictException(
                    "Invoice request was already processed", code="invoice_already_processed"
                )
            invoice.status = InvoiceStatus.PROCESSED.value
            invoice.processed_at = utc_now()
            self.repository.flush()
        self.log_operation("process_invoice_request", invoice_id=invoice_id)
        return invoice

    def delete_request(self, invoice_id: str) -> None:
        with self.transaction():
            self.repository.delete_entity(self.get_request(invoice_id, for_update=True))
        self.log_operation("delete_invoice_request", invoice_id=invoice_id)

    @staticmethod
    def to_dict(invoice: InvoiceRequest) -> Dict[str, Any]:
        """Response document; carries the booking code for the admin list."""
        booking = invoice.booking
        return {
            "id": invoice.id,
            "booking_id": invoice.booking_id,
            "booking_code": booking.booking_code if booking is not None else None,
            "status": invoice.status,
            "company_name": invoice.company_name,
            "tax_id": invoice.tax_id,
            "address": invoice.address,
            "email": invoice.email,
            "requested_at": invoice.requested_at,
            "processed_at": invoice.processed_at,
        }
