# backend/app/repositories/factory.py
"""
Repository Factory for the studio platform.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .delivery_repository import DeliveryRepository
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


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_product_repository(db: Session) -> "ProductRepository":
        from .product_repository import ProductRepository

        return ProductRepository(db)

    @staticmethod
    def create_instructor_repository(db: Session) -> "InstructorRepository":
        from .instructor_repository import InstructorRepository

        return InstructorRepository(db)

    @staticmethod
    def create_studio_setting_repository(db: Session) -> "StudioSettingRepository":
        from .studio_setting_repository import StudioSettingRepository

        return StudioSettingRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_giftcard_repository(db: Session) -> "GiftcardRepository":
        from .giftcard_repository import GiftcardRepository

        return GiftcardRepository(db)

    @staticmethod
    def create_giftcard_request_repository(db: Session) -> "GiftcardRequestRepository":
        from .giftcard_repository import GiftcardRequestRepository

        return GiftcardRequestRepository(db)

    @staticmethod
    def create_giftcard_hold_repository(db: Session) -> "GiftcardHoldRepository":
        from .giftcard_repository import GiftcardHoldRepository

        return GiftcardHoldRepository(db)

    @staticmethod
    def create_giftcard_audit_repository(db: Session) -> "GiftcardAuditRepository":
        from .giftcard_repository import GiftcardAuditRepository

        return GiftcardAuditRepository(db)

    @staticmethod
    def create_giftcard_event_repository(db: Session) -> "GiftcardEventRepository":
        from .giftcard_repository import GiftcardEventRepository

        return GiftcardEventRepository(db)

    @staticmethod
    def create_employee_repository(db: Session) -> "EmployeeRepository":
        from .timecard_repository import EmployeeRepository

        return EmployeeRepository(db)

    @staticmethod
    def create_timecard_repository(db: Session) -> "TimecardRepository":
        from .timecard_repository import TimecardRepository

        return TimecardRepository(db)

    @staticmethod
    def create_delivery_repository(db: Session) -> "DeliveryRepository":
        from .delivery_repository import DeliveryRepository

        return DeliveryRepository(db)

    @staticmethod
    def create_notification_repository(db: Session) -> "NotificationRepository":
        from .notification_repository import NotificationRepository

        return NotificationRepository(db)

    @staticmethod
    def create_inquiry_repository(db: Session) -> "InquiryRepository":
        from .inquiry_repository import InquiryRepository

        return InquiryRepository(db)

    @staticmethod
    def create_invoice_request_repository(db: Session) -> "InvoiceRequestRepository":
        from .invoice_repository import InvoiceRequestRepository

        return InvoiceRequestRepository(db)
