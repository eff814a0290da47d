# backend/app/routes/v1/__init__.py
"""
API v1 routes.

Routers carry no prefix; main.py mounts them under /api/v1.
"""

from . import (
    availability,
    bookings,
    customers,
    deliveries,
    giftcards,
    health,
    inquiries,
    instructors,
    invoices,
    notifications,
    products,
    prometheus,
    timecards,
)

__all__ = [
    "availability",
    "bookings",
    "customers",
    "deliveries",
    "giftcards",
    "health",
    "inquiries",
    "instructors",
    "invoices",
    "notifications",
    "products",
    "prometheus",
    "timecards",
]
