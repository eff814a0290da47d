# backend/app/services/technique.py
"""
Technique helpers.

Product names carry the technique ("Clase de Torno", "Pintura de piezas"),
while bookings also store it in their own column. These helpers derive the
technique from the name, map techniques to shared capacity pools and report
bookings whose stored technique drifted from their product.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..core.constants import TECHNIQUE_KEYWORDS
from ..core.enums import Technique
from ..core.exceptions import TechniqueMismatchException

# Handwork techniques share the big tables, so one pool of seats
_MOLDING_POOL = {Technique.HAND_MODELING.value, Technique.PAINTING.value, Technique.MOLDING.value}

DEFAULT_TECHNIQUE = Technique.POTTERS_WHEEL.value


def slot_technique_key(technique: Optional[str]) -> str:
    """
    Capacity pool a technique draws seats from.

    Unknown techniques form their own pool; an empty value means the wheel.
    """
    value = (technique or "").strip().lower()
    if not value:
        return DEFAULT_TECHNIQUE
    if value in _MOLDING_POOL:
        return Technique.MOLDING.value
    return value


def technique_from_name(product_name: Optional[str]) -> Optional[str]:
    """Technique implied by a product name, if any keyword matches."""
    name = (product_name or "").lower()
    for keyword, technique in TECHNIQUE_KEYWORDS:
        if keyword in name:
            return technique
    return None


def derive_technique(
    product_name: Optional[str],
    fallback: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Resolve a booking's technique.

    The product name wins; then the explicitly stored technique; then the
    product details document; finally the potter's wheel.
    """
    from_name = technique_from_name(product_name)
    if from_name:
        return from_name
    if fallback:
        return fallback
    if details and details.get("technique"):
        return str(details["technique"])
    return DEFAULT_TECHNIQUE


def validate_booking_technique(product_name: Optional[str], technique: Optional[str]) -> str:
    """Return the effective technique, raising when it contradicts the product name."""
    expected = technique_from_name(product_name)
    if expected and technique and technique != expected:
        raise TechniqueMismatchException(product_name or "", expected, technique)
    return derive_technique(product_name, technique)


def find_technique_inconsistencies(bookings: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Bookings whose stored technique disagrees with their product name.

    Accepts ORM bookings; only ``id``, ``booking_code``, ``technique`` and
    the ``product`` snapshot are read.
    """
    issues: List[Dict[str, Any]] = []
    for booking in bookings:
        product = booking.product or {}
        expected = technique_from_name(product.get("name"))
        if expected and booking.technique != expected:
            issues.append(
                {
                    "booking_id": booking.id,
                    "booking_code": booking.booking_code,
                    "product_name": product.get("name"),
                    "stored": booking.technique,
                    "expected": expected,
                }
            )
    return issues
