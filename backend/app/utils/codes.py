"""Human-facing codes for bookings and giftcards."""

from datetime import datetime
import secrets
import string
from typing import Optional

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding needs a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def random_base36(length: int) -> str:
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


def generate_booking_code(prefix: str, now: Optional[datetime] = None) -> str:
    """
    Booking code: prefix + last 4 base36 digits of the epoch millis + 4 random.

    e.g. ``C-ALMA-K3ZQ7F2A``
    """
    moment = now or datetime.now()
    millis = int(moment.timestamp() * 1000)
    return f"{prefix}{to_base36(millis)[-4:]}{random_base36(4)}".upper()


def generate_giftcard_code(prefix: str, length: int = 6) -> str:
    """Giftcard code such as ``GC-7KQ2MZ``."""
    return f"{prefix}{random_base36(length)}"
