# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .database import get_db
from .maintenance import verify_maintenance_secret
from .services import (
    get_availability_service,
    get_booking_service,
    get_customer_service,
    get_delivery_service,
    get_giftcard_service,
    get_inquiry_service,
    get_instructor_service,
    get_invoice_service,
    get_notification_service,
    get_product_service,
    get_timecard_service,
)

__all__ = [
    # Database
    "get_db",
    # Guards
    "verify_maintenance_secret",
    # Services
    "get_availability_service",
    "get_booking_service",
    "get_customer_service",
    "get_delivery_service",
    "get_giftcard_service",
    "get_inquiry_service",
    "get_instructor_service",
    "get_invoice_service",
    "get_notification_service",
    "get_product_service",
    "get_timecard_service",
]
