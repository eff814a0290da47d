# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for the studio platform.

This package provides the repository layer for data access,
separating business logic from database queries.

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_repository(db)
    booking = repository.get_by_code("C-ALMA-ABCD1234")
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .delivery_repository import DeliveryRepository
from .factory import RepositoryFactory
from .giftcard_repository import (
    GiftcardAuditRepository,
    GiftcardEventRepository,
    GiftcardHoldRepository,
    GiftcardRepository,
    GiftcardRequestRepository,
)
from .inquiry_repository import InquiryRepository
from .instructor_repository import InstructorRepository
from .invoice_repository import InvoiceRequestRepository
from .notification_repository import NotificationRepository
from .product_repository import ProductRepository
from .studio_setting_repository import StudioSettingRepository
from .timecard_repository import EmployeeRepository, TimecardRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "DeliveryRepository",
    "EmployeeRepository",
    "GiftcardAuditRepository",
    "GiftcardEventRepository",
    "GiftcardHoldRepository",
    "GiftcardRepository",
    "GiftcardRequestRepository",
    "InquiryRepository",
    "InstructorRepository",
    "InvoiceRequestRepository",
    "NotificationRepository",
    "ProductRepository",
    "RepositoryFactory",
    "StudioSettingRepository",
    "TimecardRepository",
]
