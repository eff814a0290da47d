# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected. Route tests replace
them through ``app.dependency_overrides``.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.customer_service import CustomerService
from ...services.delivery_service import DeliveryService
from ...services.giftcard_service import GiftcardService
from ...services.inquiry_service import InquiryService
from ...services.instructor_service import InstructorService
from ...services.invoice_service import InvoiceService
from ...services.notification_service import NotificationService
from ...services.product_service import ProductService
from ...services.timecard_service import TimecardService
from .database import get_db

logger = logging.getLogger(__name__)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(db)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_giftcard_service(db: Session = Depends(get_db)) -> GiftcardService:
    return GiftcardService(db)


def get_invoice_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> InvoiceService:
    return InvoiceService(db, notification_service)


def get_booking_service(
    db: Session = Depends(get_db),
    availability_service: AvailabilityService = Depends(get_availability_service),
    giftcard_service: GiftcardService = Depends(get_giftcard_service),
    notification_service: NotificationService = Depends(get_notification_service),
    invoice_service: InvoiceService = Depends(get_invoice_service),
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Args:
        db: Database session
        availability_service: Capacity checks for new and moved slots
        giftcard_service: Giftcard redemption at checkout
        notification_service: Admin inbox entries
        invoice_service: Invoice requests raised at checkout

    Returns:
        BookingService instance
    """
    return BookingService(
        db,
        availability_service=availability_service,
        giftcard_service=giftcard_service,
        notification_service=notification_service,
        invoice_service=invoice_service,
    )


def get_timecard_service(db: Session = Depends(get_db)) -> TimecardService:
    return TimecardService(db)


def get_delivery_service(db: Session = Depends(get_db)) -> DeliveryService:
    return DeliveryService(db)


def get_instructor_service(db: Session = Depends(get_db)) -> InstructorService:
    return InstructorService(db)


def get_customer_service(
    db: Session = Depends(get_db),
    giftcard_service: GiftcardService = Depends(get_giftcard_service),
) -> CustomerService:
    return CustomerService(db, giftcard_service=giftcard_service)


def get_inquiry_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> InquiryService:
    return InquiryService(db, notification_service)
