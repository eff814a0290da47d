# backend/app/services/customer_service.py
"""
Customer directory.

There is no customer table: a customer is every booking that shares a
normalized email address. Listing, editing and deleting all work on that
grouping.
"""

from __future__ import annotations

from decimal import Decimal
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.enums import BookingStatus
from ..core.exceptions import NotFoundException, ValidationException
from ..models.booking import Booking
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .giftcard_service import GiftcardService

logger = logging.getLogger(__name__)

_EDITABLE_INFO = {"first_name", "last_name", "phone", "country_code", "birthday"}


def _normalize_email(email: str) -> str:
    normalized = (email or "").strip().lower()
    if not normalized:
        raise ValidationException("Customer email is required", code="missing_email")
    return normalized


def summarize(email: str, bookings: List[Booking]) -> Dict[str, Any]:
    """Aggregate one customer's bookings, given newest first."""
    ordered = list(bookings)
    return {
        "email": email,
        "user_info": dict(ordered[0].user_info or {}) if ordered else {"email": email},
        "total_bookings": len(ordered),
        "total_spent": sum((b.total_paid() for b in ordered), Decimal("0")),
        "last_booking_date": ordered[0].created_at if ordered else None,
        "bookings": ordered,
    }


class CustomerService(BaseService):
    def __init__(self, db: Session, giftcard_service: Optional[GiftcardService] = None):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.delivery_repository = RepositoryFactory.create_delivery_repository(db)
        self.invoice_repository = RepositoryFactory.create_invoice_request_repository(db)
        self.giftcard_service = giftcard_service or GiftcardService(db)

    @BaseService.measure_operation("list_customers")
    def list_customers(
        self, *, page: int = 1, limit: int = 50
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        One entry per customer email, most recently active first.

        Expired pre-reservations are left out; ``total_spent`` sums recorded
        payments rather than list prices.
        """
        if page < 1 or limit < 1:
            raise ValidationException("page and limit must be positive", code="invalid_page")
        grouped: Dict[str, List[Booking]] = {}
        for booking in self.booking_repository.list_bookings(limit=None):
            if booking.status == BookingStatus.EXPIRED.value or not booking.customer_email:
                continue
            grouped.setdefault(booking.customer_email, []).append(booking)
        # bookings arrive newest first, so customers come out by latest booking
        customers = [summarize(email, rows) for email, rows in grouped.items()]
        offset = (page - 1) * limit
        return customers[offset : offset + limit], len(customers)

    def get_customer(self, email: str) -> Dict[str, Any]:
        normalized = _normalize_email(email)
        bookings = self.booking_repository.list_bookings(email=normalized, limit=None)
        deliveries = self.delivery_repository.list_deliveries(email=normalized)
        if not bookings and not deliveries:
            raise NotFoundException(f"Customer {normalized} not found", code="customer_not_found")
        customer = summarize(normalized, bookings)
        customer["deliveries"] = deliveries
        return customer

    @BaseService.measure_operation("update_customer_info")
    def update_customer_info(self, email: str, info: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge contact details into ``user_info`` on every booking of the customer."""
        normalized = _normalize_email(email)
        unknown = set(info) - _EDITABLE_INFO
        if unknown:
            raise ValidationException(
                f"Cannot edit customer field(s): {', '.join(sorted(unknown))}",
                code="invalid_customer_field",
            )
        with self.transaction():
            bookings = self.booking_repository.list_bookings(email=normalized, limit=None)
            if not bookings:
                raise NotFoundException(
                    f"Customer {normalized} not found", code="customer_not_found"
                )
            for booking in bookings:
                booking.user_info = {**(booking.user_info or {}), **info, "email": normalized}
            self.booking_repository.flush()
        self.log_operation("update_customer_info", email=normalized, bookings=len(bookings))
        return summarize(normalized, bookings)

    @BaseService.measure_operation("delete_customer")
    def delete_customer(self, email: str) -> Dict[str, int]:
        """
        Remove the customer's invoice requests, deliveries and bookings.

        Giftcard holds still tied to those bookings are released first.
        """
        normalized = _normalize_email(email)
        with self.transaction():
            bookings = self.booking_repository.list_bookings(email=normalized, limit=None)
            deliveries = self.delivery_repository.list_deliveries(email=normalized)
            if not bookings and not deliveries:
                raise NotFoundException(
                    f"Customer {normalized} not found", code="customer_not_found"
                )
            invoices = self.invoice_repository.delete_for_bookings(b.id for b in bookings)
            for delivery in deliveries:
                self.delivery_repository.delete_entity(delivery)
            for booking in bookings:
                self.giftcard_service.release_booking_holds_locked(booking.id)
                self.booking_repository.delete_entity(booking)
        result = {
            "bookings": len(bookings),
            "deliveries": len(deliveries),
            "invoice_requests": invoices,
        }
        self.log_operation("delete_customer", email=normalized, **result)
        return result
