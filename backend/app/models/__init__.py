"""
Database models for the studio platform.

Importing this package registers every table on ``Base.metadata``:
- Catalog: products, instructors, studio settings
- Bookings
- Giftcards: requests, cards, holds, audit trail, admin events
- Timecards: employees and daily records
- Deliveries
- Group inquiries and invoice requests
- Admin notifications
"""

from .booking import Booking
from .delivery import Delivery
from .giftcard import Giftcard, GiftcardAudit, GiftcardEvent, GiftcardHold, GiftcardRequest
from .inquiry import Inquiry
from .instructor import Instructor
from .invoice import InvoiceRequest
from .notification import Notification
from .product import Product
from .studio_setting import StudioSetting
from .timecard import Employee, Timecard

__all__ = [
    "Booking",
    "Delivery",
    "Employee",
    "Giftcard",
    "GiftcardAudit",
    "GiftcardEvent",
    "GiftcardHold",
    "GiftcardRequest",
    "Inquiry",
    "Instructor",
    "InvoiceRequest",
    "Notification",
    "Product",
    "StudioSetting",
    "Timecard",
]
