# backend/app/core/enums.py
"""
Core enums for the studio platform.

Values are stored as plain strings in the database, so every enum here
subclasses ``str`` and compares equal to its stored value.
"""

from enum import Enum


class Technique(str, Enum):
    """Class techniques offered by the studio."""

    POTTERS_WHEEL = "potters_wheel"
    HAND_MODELING = "hand_modeling"
    PAINTING = "painting"
    MOLDING = "molding"


class ProductType(str, Enum):
    CLASS_PACKAGE = "CLASS_PACKAGE"
    OPEN_STUDIO_SUBSCRIPTION = "OPEN_STUDIO_SUBSCRIPTION"
    INTRODUCTORY_CLASS = "INTRODUCTORY_CLASS"
    GROUP_EXPERIENCE = "GROUP_EXPERIENCE"
    COUPLES_EXPERIENCE = "COUPLES_EXPERIENCE"
    SINGLE_CLASS = "SINGLE_CLASS"
    GROUP_CLASS = "GROUP_CLASS"
    CUSTOM_GROUP_EXPERIENCE = "CUSTOM_GROUP_EXPERIENCE"

    @classmethod
    def class_types(cls) -> set["ProductType"]:
        """Product types that reserve seats in a scheduled class."""
        return {
            cls.CLASS_PACKAGE,
            cls.INTRODUCTORY_CLASS,
            cls.SINGLE_CLASS,
            cls.GROUP_CLASS,
        }


class BookingStatus(str, Enum):
    ACTIVE = "active"
    PAID = "paid"
    EXPIRED = "expired"


class BookingMode(str, Enum):
    FLEXIBLE = "flexible"
    MONTHLY = "monthly"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    TRANSFER = "Transfer"
    GIFTCARD = "Giftcard"


class AttendanceStatus(str, Enum):
    ATTENDED = "attended"
    NO_SHOW = "no-show"


class GiftcardRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DELETED = "deleted"


class GiftcardStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    DEPLETED = "depleted"


class GiftcardAuditAction(str, Enum):
    HOLD_CREATED = "hold_created"
    HOLD_RELEASED = "hold_released"
    HOLD_CONSUMED = "hold_consumed"
    REDEEMED = "redeemed"
    EXPIRE = "expire"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class NotificationType(str, Enum):
    NEW_BOOKING = "new_booking"
    PAYMENT_DELETED = "payment_deleted"
    BOOKING_EXPIRED = "booking_expired"
    GIFTCARD_REQUEST = "giftcard_request"
    NEW_INQUIRY = "new_inquiry"
    NEW_INVOICE_REQUEST = "new_invoice_request"


class InquiryType(str, Enum):
    GROUP = "group"
    COUPLE = "couple"
    TEAM_BUILDING = "team_building"


class InquiryStatus(str, Enum):
    NEW = "New"
    CONTACTED = "Contacted"
    PROPOSAL_SENT = "Proposal Sent"
    CONFIRMED = "Confirmed"
    ARCHIVED = "Archived"


class InvoiceStatus(str, Enum):
    PENDING = "Pending"
    PROCESSED = "Processed"
