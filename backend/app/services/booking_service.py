# backend/app/services/booking_service.py
"""
Booking Service for the studio platform.

Handles all booking-related business logic including:
- Checkout (idempotent by booking code, duplicate-slot guard)
- Capacity and technique checks
- Giftcard redemption (by hold or by direct amount)
- Manual payments, slot edits and attendance
- Invoice requests raised at checkout
- Expiry of unpaid pre-reservations

Checkout runs as a single transaction: if any step fails (capacity,
giftcard balance, expired hold) nothing is written.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import (
    AttendanceStatus,
    BookingMode,
    BookingStatus,
    NotificationType,
    PaymentMethod,
    ProductType,
)
from ..core.exceptions import BusinessRuleException, NotFoundException, ValidationException
from ..core.timezone_utils import utc_now
from ..models.booking import Booking, payment_entry, slot_key
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..utils.codes import generate_booking_code
from .availability_service import AvailabilityService, normalize_time, slots_require_no_refund
from .base import BaseService
from .giftcard_service import GiftcardService
from .invoice_service import InvoiceService
from .notification_service import NotificationService
from .technique import find_technique_inconsistencies, validate_booking_technique

logger = logging.getLogger(__name__)

_PAYMENT_FIELDS = {"amount", "method", "note", "received_at"}
_PAYMENT_METHODS = {m.value for m in PaymentMethod}


def normalize_slot(slot: Mapping[str, Any]) -> Dict[str, Any]:
    """Canonical slot document: ISO date, HH:MM time, instructor id."""
    try:
        day = date.fromisoformat(str(slot["date"])[:10]).isoformat()
        slot_time = normalize_time(slot["time"])
    except (KeyError, ValueError, TypeError):
        raise ValidationException(f"Invalid slot: {dict(slot)}", code="invalid_slot")
    return {"date": day, "time": slot_time, "instructor_id": slot.get("instructor_id")}


def _same_slot(a: Mapping[str, Any], b: Mapping[str, Any], *, match_instructor: bool) -> bool:
    if a.get("date") != b.get("date"):
        return False
    if normalize_time(a.get("time")) != normalize_time(b.get("time")):
        return False
    if match_instructor and b.get("instructor_id") is not None:
        return a.get("instructor_id") == b.get("instructor_id")
    return True


class BookingService(BaseService):
    """Service layer for booking operations."""

    def __init__(
        self,
        db: Session,
        availability_service: Optional[AvailabilityService] = None,
        giftcard_service: Optional[GiftcardService] = None,
        notification_service: Optional[NotificationService] = None,
        invoice_service: Optional[InvoiceService] = None,
    ):
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_repository(db)
        self.product_repository = RepositoryFactory.create_product_repository(db)
        self.availability_service = availability_service or AvailabilityService(db)
        self.giftcard_service = giftcard_service or GiftcardService(db)
        self.notifications = notification_service or NotificationService(db)
        self.invoice_service = invoice_service or InvoiceService(db, self.notifications)

    # Queries

    def get_booking(self, booking_id: str, *, for_update: bool = False) -> Booking:
        if for_update:
            booking = self.repository.get_for_update(booking_id)
        else:
            booking = self.repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException(f"Booking {booking_id} not found", code="booking_not_found")
        return booking

    def list_bookings(
        self,
        *,
        status: Optional[str] = None,
        email: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Booking]:
        return self.repository.list_bookings(
            status=status, email=email, start_date=start_date, end_date=end_date
        )

    # Checkout

    def _resolve_product(self, data: Mapping[str, Any]) -> Tuple[Dict[str, Any], Optional[str]]:
        product_id = data.get("product_id")
        if product_id:
            product = self.product_repository.get_by_id(product_id)
            if product is None:
                raise NotFoundException(f"Product {product_id} not found", code="product_not_found")
            return product.snapshot(), product.id
        snapshot = dict(data.get("product") or {})
        if data.get("product_type") and not snapshot.get("type"):
            snapshot["type"] = data["product_type"]
        return snapshot, None

    def _find_duplicate(self, email: str, slots: List[Dict[str, Any]]) -> Optional[Booking]:
        for existing in self.repository.find_active_by_email(email):
            for slot in slots:
                if any(
                    _same_slot(s, slot, match_instructor=True) for s in existing.slots or []
                ):
                    return existing
        return None

    @BaseService.measure_operation("create_booking")
    def create_booking(self, data: Dict[str, Any]) -> Tuple[Booking, bool]:
        """
        Create a booking from a checkout payload.

        Returns ``(booking, created)``; ``created`` is False when an existing
        booking is returned for an idempotent retry or a duplicate slot.
        """
        booking_code = (data.get("booking_code") or "").strip().upper() or None
        if booking_code:
            existing = self.repository.get_by_code(booking_code)
            if existing is not None:
                self.logger.info("Idempotent checkout hit for %s", booking_code)
                return existing, False

        user_info = dict(data.get("user_info") or {})
        email = (user_info.get("email") or "").strip().lower()
        if not email:
            raise ValidationException("Customer email is required", code="missing_email")
        user_info["email"] = email

        product, product_id = self._resolve_product(data)
        product_type = product.get("type") or data.get("product_type")
        is_class = product_type in {t.value for t in ProductType.class_types()}
        slots = [normalize_slot(s) for s in data.get("slots") or []]
        if is_class and not slots:
            raise ValidationException("At least one class slot is required", code="missing_slots")

        participants = int(data.get("participants") or 1)
        if participants < 1:
            raise ValidationException(
                "participants must be at least 1", code="invalid_participants"
            )

        if is_class:
            duplicate = self._find_duplicate(email, slots)
            if duplicate is not None:
                self.logger.info(
                    "Duplicate booking for %s on existing %s", email, duplicate.booking_code
                )
                return duplicate, False

        technique = validate_booking_technique(product.get("name"), data.get("technique"))
        admin_override = bool(data.get("admin_override"))
        accepted_no_refund = bool(data.get("accepted_no_refund"))
        if slots and not admin_override:
            if slots_require_no_refund(slots) and not accepted_no_refund:
                raise BusinessRuleException(
                    "Classes starting within "
                    f"{settings.no_refund_horizon_hours} hours are non-refundable "
                    "and the policy must be accepted",
                    code="no_refund_acceptance_required",
                )

        raw_price = data.get("price")
        if raw_price is None:
            raw_price = product.get("price") or 0
        price = Decimal(str(raw_price))
        if price < 0:
            raise ValidationException("Price cannot be negative", code="invalid_price")

        mode = data.get("booking_mode") or BookingMode.FLEXIBLE.value
        if mode not in {m.value for m in BookingMode}:
            raise ValidationException(f"Unknown booking mode: {mode}", code="invalid_booking_mode")

        with self.transaction():
            if not admin_override:
                for slot in slots:
                    self.availability_service.check_slot_capacity(slot, technique, participants)

            now = utc_now()
            code = booking_code or self._new_booking_code()
            booking = self.repository.create(
                booking_code=code,
                product_id=product_id,
                product_type=product_type,
                product=product,
                technique=technique,
                slots=slots,
                user_info=user_info,
                customer_email=email,
                participants=participants,
                booking_mode=mode,
                booking_date=data.get("booking_date") or now.date(),
                client_note=data.get("client_note"),
                attendance={},
                accepted_no_refund=accepted_no_refund,
                price=price,
                is_paid=False,
                payment_details=[],
                status=BookingStatus.ACTIVE.value,
                expires_at=now + timedelta(hours=settings.prebooking_expiry_hours),
            )

            initial_payments = [
                self._build_payment(p) for p in data.get("payment_details") or []
            ]
            if initial_payments:
                booking.payment_details = initial_payments

            if data.get("giftcard_hold_id"):
                giftcard, amount = self.giftcard_service.redeem_hold_locked(
                    data["giftcard_hold_id"], booking.id
                )
                GiftcardService.apply_giftcard_payment(booking, giftcard, amount)
            elif data.get("giftcard_amount") and (
                data.get("giftcard_code") or data.get("giftcard_id")
            ):
                amount = Decimal(str(data["giftcard_amount"]))
                giftcard = self.giftcard_service.redeem_amount_locked(
                    amount,
                    code=data.get("giftcard_code"),
                    giftcard_id=data.get("giftcard_id"),
                    booking_id=booking.id,
                )
                GiftcardService.apply_giftcard_payment(booking, giftcard, amount)

            booking.refresh_payment_state()
            self.repository.flush()
            self.notifications.notify(
                NotificationType.NEW_BOOKING.value,
                "New booking",
                f"{user_info.get('first_name') or email} booked "
                f"{product.get('name') or product_type}",
                booking_id=booking.id,
                data={"booking_code": booking.booking_code, "slots": slots},
            )
            if data.get("invoice_data"):
                self.invoice_service.create_request_locked(booking, data["invoice_data"])

        prometheus_metrics.inc_booking_created(product_type)
        self.log_operation(
            "create_booking",
            booking_id=booking.id,
            booking_code=booking.booking_code,
            is_paid=booking.is_paid,
        )
        return booking, True

    def _new_booking_code(self) -> str:
        for _ in range(5):
            code = generate_booking_code(settings.booking_code_prefix)
            if not self.repository.code_exists(code):
                return code
        raise BusinessRuleException("Could not allocate a booking code", code="code_collision")

    # Payments

    @staticmethod
    def _build_payment(data: Mapping[str, Any]) -> Dict[str, Any]:
        amount = data.get("amount")
        if amount is None or Decimal(str(amount)) <= 0:
            raise ValidationException("Payment amount must be positive", code="invalid_amount")
        method = data.get("method") or PaymentMethod.CASH.value
        if method not in _PAYMENT_METHODS:
            raise ValidationException(f"Unknown payment method: {method}", code="invalid_method")
        received_at = data.get("received_at")
        if isinstance(received_at, str):
            received_at = datetime.fromisoformat(received_at)
        return payment_entry(
            Decimal(str(amount)),
            method,
            note=data.get("note"),
            received_at=received_at,
            payment_id=data.get("id"),
        )

    @BaseService.measure_operation("add_payment")
    def add_payment(self, booking_id: str, payment: Mapping[str, Any]) -> Booking:
        with self.transaction():
            booking = self.get_booking(booking_id, for_update=True)
            booking.payment_details = booking.payments + [self._build_payment(payment)]
            booking.refresh_payment_state()
            self.repository.flush()
        self.log_operation("add_payment", booking_id=booking_id, is_paid=booking.is_paid)
        return booking

    def update_payment(
        self, booking_id: str, payment_id: str, updates: Mapping[str, Any]
    ) -> Booking:
        with self.transaction():
            booking = self.get_booking(booking_id, for_update=True)
            payments = booking.payments
            for index, existing in enumerate(payments):
                if existing.get("id") == payment_id:
                    changes = {k: v for k, v in updates.items() if k in _PAYMENT_FIELDS}
                    merged = {**existing, **changes}
                    rebuilt = self._build_payment({**merged, "id": payment_id})
                    # giftcard links and other extras survive an edit
                    extras = {k: v for k, v in existing.items() if k not in rebuilt}
                    payments[index] = {**rebuilt, **extras}
                    break
            else:
                raise NotFoundException("Payment not found", code="payment_not_found")
            booking.payment_details = payments
            booking.refresh_payment_state()
            self.repository.flush()
        return booking

    @BaseService.measure_operation("delete_payment")
    def delete_payment(
        self, booking_id: str, payment_id: str, reason: Optional[str] = None
    ) -> Booking:
        with self.transaction():
            booking = self.get_booking(booking_id, for_update=True)
            payments = booking.payments
            removed = next((p for p in payments if p.get("id") == payment_id), None)
            if removed is None:
                raise NotFoundException("Payment not found", code="payment_not_found")
            booking.payment_details = [p for p in payments if p.get("id") != payment_id]
            booking.refresh_payment_state()
            self.repository.flush()
            self.notifications.notify(
                NotificationType.PAYMENT_DELETED.value,
                "Payment deleted",
                f"Removed {removed.get('method')} payment of {removed.get('amount')} "
                f"from {booking.booking_code}" + (f": {reason}" if reason else ""),
                booking_id=booking.id,
                data={"payment": removed, "reason": reason},
            )
        return booking

    def mark_unpaid(self, booking_id: str) -> Booking:
        """Clear every payment on a booking."""
        with self.transaction():
            booking = self.get_booking(booking_id, for_update=True)
            booking.payment_details = []
            booking.refresh_payment_state()
            self.repository.flush()
        return booking

    # Slots

    @BaseService.measure_operation("reschedule_slot")
    def reschedule_slot(
        self,
        booking_id: str,
        old_slot: Mapping[str, Any],
        new_slot: Mapping[str, Any],
        *,
        admin_override: bool = False,
    ) -> Booking:
        """Move one slot (matched on date and time) to a new date/time."""
        old = normalize_slot(old_slot)
        new = normalize_slot(new_slot)
        with self.transaction():
            booking = self.get_booking(booking_id, for_update=True)
            slots = list(booking.slots or [])
            index = next(
                (i for i, s in enumerate(slots) if _same_slot(s, old, match_instructor=False)),
                None,
            )
            if index is None:
                raise NotFoundException("Slot not found on booking", code="slot_not_found")
            if new["instructor_id"] is None:
                new["instructor_id"] = slots[index].get("instructor_id")
            if not admin_override:
                self.availability_service.check_slot_capacity(
                    new,
                    booking.technique or "",
                    booking.participants or 1,
                    exclude_booking_id=booking.id,
                )
            slots[index] = new
            booking.slots = slots
            attendance = dict(booking.attendance or {})
            if slot_key(old) in attendance:
                attendance[slot_key(new)] = attendance.pop(slot_key(old))
                booking.attendance = attendance
            self.repository.flush()
        self.log_operation("reschedule_slot", booking_id=booking_id, old=old, new=new)
        return booking

    def remove_slot(self, booking_id: str, slot: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Drop one slot from a booking.

        A booking left without slots is deleted.
        """
        target = normalize_slot(slot)
        with self.transaction():
            booking = self.get_booking(booking_id, for_update=True)
            remaining = [
                s for s in booking.slots or [] if not _same_slot(s, target, match_instructor=True)
            ]
            if len(remaining) == len(booking.slots or []):
                raise NotFoundException("Slot not found on booking", code="slot_not_found")
            if not remaining:
                self.repository.delete_entity(booking)
                return {"booking": None, "deleted": True}
            booking.slots = remaining
            self.repository.flush()
        return {"booking": booking, "deleted": False}

    @BaseService.measure_operation("delete_bookings_in_range")
    def delete_bookings_in_range(self, start_date: date, end_date: date) -> Dict[str, int]:
        """Remove every slot in [start, end]; delete bookings left empty."""
        if end_date < start_date:
            raise ValidationException(
                "end_date must not be before start_date", code="invalid_range"
            )
        start_str, end_str = start_date.isoformat(), end_date.isoformat()
        updated = deleted = 0
        with self.transaction():
            for booking in self.repository.list_bookings(
                start_date=start_date, end_date=end_date, limit=None
            ):
                remaining = [
                    s for s in booking.slots or [] if not start_str <= str(s.get("date")) <= end_str
                ]
                if not remaining:
                    self.repository.delete_entity(booking)
                    deleted += 1
                else:
                    booking.slots = remaining
                    updated += 1
            self.repository.flush()
        self.log_operation("delete_bookings_in_range", updated=updated, deleted=deleted)
        return {"updated": updated, "deleted": deleted}

    def update_attendance(
        self, booking_id: str, slot_date: str, slot_time: str, status: str
    ) -> Booking:
        if status not in {s.value for s in AttendanceStatus}:
            raise ValidationException(f"Unknown attendance status: {status}", code="invalid_status")
        target = normalize_slot({"date": slot_date, "time": slot_time})
        with self.transaction():
            booking = self.get_booking(booking_id, for_update=True)
            if not any(_same_slot(s, target, match_instructor=False) for s in booking.slots or []):
                raise ValidationException(
                    "Booking has no class at that time", code="slot_not_found"
                )
            booking.attendance = {**(booking.attendance or {}), slot_key(target): status}
            self.repository.flush()
        return booking

    def delete_booking(self, booking_id: str) -> None:
        with self.transaction():
            booking = self.get_booking(booking_id, for_update=True)
            self.giftcard_service.release_booking_holds_locked(booking.id)
            self.repository.delete_entity(booking)
        self.log_operation("delete_booking", booking_id=booking_id)

    # Maintenance

    @BaseService.measure_operation("expire_prebookings")
    def expire_prebookings(self, now: Optional[datetime] = None) -> int:
        """Mark unpaid pre-reservations past their expiry as expired."""
        current = now or utc_now()
        with self.transaction():
            expired = self.repository.get_expirable(current)
            for booking in expired:
                booking.expire(current)
            if expired:
                self.notifications.notify(
                    NotificationType.BOOKING_EXPIRED.value,
                    "Pre-reservations expired",
                    f"{len(expired)} unpaid booking(s) released their seats",
                    data={"booking_codes": [b.booking_code for b in expired]},
                )
            self.repository.flush()
        prometheus_metrics.inc_maintenance_rows("expire_prebookings", len(expired))
        return len(expired)

    def find_technique_inconsistencies(self) -> List[Dict[str, Any]]:
        return find_technique_inconsistencies(self.repository.list_bookings(limit=100000))

    def reconcile_techniques(self) -> List[Dict[str, Any]]:
        """Rewrite stored techniques that contradict the product name."""
        with self.transaction():
            issues = self.find_technique_inconsistencies()
            for issue in issues:
                booking = self.get_booking(issue["booking_id"])
                booking.technique = issue["expected"]
            self.repository.flush()
        if issues:
            self.logger.info("Reconciled technique on %d booking(s)", len(issues))
        return issues
