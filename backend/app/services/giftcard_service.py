# backend/app/services/giftcard_service.py
"""
Giftcard Service for the studio platform.

Handles the giftcard lifecycle:
- purchase requests and their admin approval / rejection
- issuing cards with unique codes
- validating codes at checkout
- balance holds: create, release, consume, expire
- direct redemption against a booking

Balance changes always lock the giftcard row (``SELECT ... FOR UPDATE``)
first, so two checkouts cannot spend the same balance.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import (
    GiftcardAuditAction,
    GiftcardRequestStatus,
    GiftcardStatus,
    NotificationType,
    PaymentMethod,
)
from ..core.exceptions import (
    ConflictException,
    HoldExpiredException,
    InsufficientBalanceException,
    NotFoundException,
    ServiceException,
    ValidationException,
)
from ..core.timezone_utils import utc_now
from ..models.booking import payment_entry
from ..models.giftcard import Giftcard, GiftcardEvent, GiftcardHold, GiftcardRequest
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..utils.codes import generate_giftcard_code
from ..utils.time_helpers import add_months
from .base import BaseService
from .notification_service import NotificationService

if TYPE_CHECKING:
    from ..models.booking import Booking

logger = logging.getLogger(__name__)

_REQUIRED_REQUEST_FIELDS = ("buyer_name", "buyer_email", "recipient_name")


def _money(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


class GiftcardService(BaseService):
    """Giftcard requests, issuance, validation and balance holds."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.giftcard_repository = RepositoryFactory.create_giftcard_repository(db)
        self.request_repository = RepositoryFactory.create_giftcard_request_repository(db)
        self.hold_repository = RepositoryFactory.create_giftcard_hold_repository(db)
        self.audit_repository = RepositoryFactory.create_giftcard_audit_repository(db)
        self.event_repository = RepositoryFactory.create_giftcard_event_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.notifications = NotificationService(db)

    # Requests

    @BaseService.measure_operation("create_giftcard_request")
    def create_request(self, data: Dict[str, Any]) -> GiftcardRequest:
        missing = [f for f in _REQUIRED_REQUEST_FIELDS if not data.get(f)]
        if data.get("amount") is None:
            missing.append("amount")
        if missing:
            raise ValidationException(
                "Missing required giftcard request fields",
                code="missing_fields",
                details={"missing": missing},
            )
        amount = _money(data["amount"])
        if amount <= 0:
            raise ValidationException("Amount must be greater than zero", code="invalid_amount")

        with self.transaction():
            request = self.request_repository.create(
                buyer_name=data["buyer_name"].strip(),
                buyer_email=data["buyer_email"].strip().lower(),
                recipient_name=data["recipient_name"].strip(),
                recipient_email=data.get("recipient_email"),
                recipient_whatsapp=data.get("recipient_whatsapp"),
                buyer_message=data.get("buyer_message"),
                amount=amount,
                code=(data.get("code") or generate_giftcard_code(settings.giftcard_code_prefix))
                .strip()
                .upper(),
                status=GiftcardRequestStatus.PENDING.value,
                request_metadata={},
            )
            self.notifications.notify(
                NotificationType.GIFTCARD_REQUEST.value,
                "New giftcard request",
                f"{request.buyer_name} requested a ${amount} giftcard for {request.recipient_name}",
                data={"giftcard_request_id": request.id},
            )
        self.log_operation("create_giftcard_request", request_id=request.id)
        return request

    def list_requests(self, status: Optional[str] = None) -> List[GiftcardRequest]:
        return self.request_repository.list_requests(status=status)

    def _get_request(self, request_id: str, *, for_update: bool = False) -> GiftcardRequest:
        if for_update:
            request = self.request_repository.get_for_update(request_id)
        else:
            request = self.request_repository.get_by_id(request_id)
        if request is None:
            raise NotFoundException("Giftcard request not found", code="request_not_found")
        return request

    def get_request(self, request_id: str) -> Tuple[GiftcardRequest, List[GiftcardEvent]]:
        """A request with its admin decisions, oldest first."""
        request = self._get_request(request_id)
        return request, self.event_repository.list_for_request(request.id)

    def _generate_unique_code(self) -> str:
        for _ in range(settings.giftcard_code_attempts):
            code = generate_giftcard_code(
                settings.giftcard_code_prefix, settings.giftcard_code_length
            )
            if not self.giftcard_repository.code_exists(code):
                return code
            logger.warning("Giftcard code collision on %s, retrying", code)
        raise ServiceException(
            "Could not generate a unique giftcard code", code="code_generation_failed"
        )

    @BaseService.measure_operation("approve_giftcard_request")
    def approve_request(
        self, request_id: str, admin_user: str, note: Optional[str] = None
    ) -> Tuple[GiftcardRequest, Giftcard]:
        """Approve a pending request and issue its giftcard."""
        if not admin_user:
            raise ValidationException("admin_user is required", code="missing_admin_user")
        with self.transaction():
            request = self._get_request(request_id, for_update=True)
            if request.status != GiftcardRequestStatus.PENDING.value:
                raise ConflictException(
                    f"Giftcard request is already {request.status}",
                    code="request_not_pending",
                )
            now = utc_now()
            request.status = GiftcardRequestStatus.APPROVED.value
            request.approved_by = admin_user
            request.approved_at = now
            self.event_repository.create(
                giftcard_request_id=request.id,
                event_type=GiftcardRequestStatus.APPROVED.value,
                admin_user=admin_user,
                note=note,
            )
            amount = _money(request.amount)
            giftcard = self.giftcard_repository.create(
                code=self._generate_unique_code(),
                initial_value=amount,
                balance=amount,
                status=GiftcardStatus.ACTIVE.value,
                expires_at=add_months(now, settings.giftcard_validity_months),
                giftcard_request_id=request.id,
                buyer_info={
                    "name": request.buyer_name,
                    "email": request.buyer_email,
                    "message": request.buyer_message,
                },
                recipient_info={
                    "name": request.recipient_name,
                    "email": request.recipient_email,
                    "whatsapp": request.recipient_whatsapp,
                },
                redeemed_history=[],
            )
            request.request_metadata = {
                **(request.request_metadata or {}),
                "approved_by": admin_user,
                "issued_code": giftcard.code,
                "issued_giftcard_id": giftcard.id,
            }
            self.request_repository.flush()
        self.log_operation(
            "approve_giftcard_request", request_id=request.id, giftcard_id=giftcard.id
        )
        return request, giftcard

    @BaseService.measure_operation("reject_giftcard_request")
    def reject_request(
        self, request_id: str, admin_user: str, reason: Optional[str] = None
    ) -> GiftcardRequest:
        if not admin_user:
            raise ValidationException("admin_user is required", code="missing_admin_user")
        with self.transaction():
            request = self._get_request(request_id, for_update=True)
            if request.status != GiftcardRequestStatus.PENDING.value:
                raise ConflictException(
                    f"Giftcard request is already {request.status}",
                    code="request_not_pending",
                )
            request.status = GiftcardRequestStatus.REJECTED.value
            request.rejected_by = admin_user
            request.rejected_at = utc_now()
            if reason:
                request.request_metadata = {**(request.request_metadata or {}), "reason": reason}
            self.event_repository.create(
                giftcard_request_id=request.id,
                event_type=GiftcardRequestStatus.REJECTED.value,
                admin_user=admin_user,
                note=reason,
            )
            self.request_repository.flush()
        return request

    def delete_request(self, request_id: str, admin_user: Optional[str] = None) -> GiftcardRequest:
        """Soft delete; issued giftcards stay valid."""
        with self.transaction():
            request = self._get_request(request_id, for_update=True)
            request.status = GiftcardRequestStatus.DELETED.value
            self.event_repository.create(
                giftcard_request_id=request.id,
                event_type=GiftcardRequestStatus.DELETED.value,
                admin_user=admin_user,
            )
            self.request_repository.flush()
        return request

    # Cards

    def list_giftcards(self, status: Optional[str] = None) -> List[Giftcard]:
        return self.giftcard_repository.list_giftcards(status=status)

    def get_available_balance(self, giftcard: Giftcard, now: Optional[datetime] = None) -> Decimal:
        """Balance minus every unexpired hold."""
        held = self.hold_repository.sum_active_holds(giftcard.id, now or utc_now())
        return _money(giftcard.balance) - held

    @BaseService.measure_operation("validate_giftcard")
    def validate(self, code: str) -> Dict[str, Any]:
        """
        Look a code up for checkout.

        Issued cards report balance and expiry; a code still attached to a
        pending/rejected request reports the request status instead.
        """
        if not code or not code.strip():
            raise ValidationException("code is required", code="missing_code")
        giftcard = self.giftcard_repository.get_by_code(code)
        if giftcard is not None:
            now = utc_now()
            expired = giftcard.is_expired(now)
            available = self.get_available_balance(giftcard, now)
            return {
                "valid": not expired and _money(giftcard.balance) > 0,
                "type": "issued",
                "giftcard_id": giftcard.id,
                "code": giftcard.code,
                "balance": _money(giftcard.balance),
                "available_balance": max(available, Decimal("0.00")),
                "initial_value": _money(giftcard.initial_value),
                "expires_at": giftcard.expires_at,
                "status": GiftcardStatus.EXPIRED.value if expired else giftcard.status,
            }
        request = self.request_repository.find_by_code(code)
        if request is None:
            raise NotFoundException("Giftcard code not found", code="not_found")
        return {
            "valid": False,
            "type": "request",
            "giftcard_id": (request.request_metadata or {}).get("issued_giftcard_id"),
            "code": request.code,
            "balance": _money(request.amount),
            "available_balance": Decimal("0.00"),
            "initial_value": _money(request.amount),
            "expires_at": None,
            "status": request.status,
        }

    def _locate_giftcard_for_update(
        self, code: Optional[str] = None, giftcard_id: Optional[str] = None
    ) -> Giftcard:
        if giftcard_id:
            giftcard = self.giftcard_repository.get_for_update(giftcard_id)
        elif code:
            giftcard = self.giftcard_repository.get_by_code(code, for_update=True)
        else:
            raise ValidationException("A giftcard code or id is required", code="missing_giftcard")
        if giftcard is None:
            raise NotFoundException("Giftcard not found", code="giftcard_not_found")
        return giftcard

    def get_audit_trail(self, giftcard_id: str) -> List[Any]:
        if self.giftcard_repository.get_by_id(giftcard_id) is None:
            raise NotFoundException("Giftcard not found", code="giftcard_not_found")
        return self.audit_repository.list_for_giftcard(giftcard_id)

    # Holds

    @BaseService.measure_operation("create_giftcard_hold")
    def create_hold(
        self,
        amount: Any,
        *,
        code: Optional[str] = None,
        giftcard_id: Optional[str] = None,
        ttl_minutes: Optional[int] = None,
        booking_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Reserve part of a giftcard balance for ``ttl_minutes``."""
        if amount is None or _money(amount) <= 0:
            raise ValidationException("Amount must be greater than zero", code="invalid_amount")
        if not code and not giftcard_id:
            raise ValidationException("A giftcard code or id is required", code="missing_giftcard")
        value = _money(amount)
        ttl = ttl_minutes or settings.giftcard_hold_ttl_minutes

        with self.transaction():
            giftcard = self._locate_giftcard_for_update(code, giftcard_id)
            now = utc_now()
            if giftcard.is_expired(now):
                raise ValidationException("Giftcard has expired", code="giftcard_expired")
            available = self.get_available_balance(giftcard, now)
            if available < value:
                raise InsufficientBalanceException(value, available, _money(giftcard.balance))
            hold = self.hold_repository.create(
                giftcard_id=giftcard.id,
                booking_id=booking_id,
                amount=value,
                expires_at=now + timedelta(minutes=ttl),
            )
            self.audit_repository.record(
                GiftcardAuditAction.HOLD_CREATED.value,
                giftcard_id=giftcard.id,
                hold_id=hold.id,
                booking_id=booking_id,
                amount=value,
                metadata={"ttl_minutes": ttl},
            )
        prometheus_metrics.inc_giftcard_hold("created")
        self.log_operation("create_giftcard_hold", hold_id=hold.id, giftcard_id=giftcard.id)
        return {
            "hold": hold,
            "available_balance": available - value,
            "balance": _money(giftcard.balance),
        }

    @BaseService.measure_operation("release_giftcard_hold")
    def release_hold(self, hold_id: str) -> GiftcardHold:
        with self.transaction():
            hold = self.hold_repository.get_for_update(hold_id)
            if hold is None:
                raise NotFoundException("Hold not found", code="hold_not_found")
            self.hold_repository.delete_entity(hold)
            self.audit_repository.record(
                GiftcardAuditAction.HOLD_RELEASED.value,
                giftcard_id=hold.giftcard_id,
                hold_id=hold.id,
                booking_id=hold.booking_id,
                amount=_money(hold.amount),
            )
        prometheus_metrics.inc_giftcard_hold("released")
        return hold

    def release_booking_holds_locked(self, booking_id: str) -> int:
        """Drop the holds tied to a booking inside the caller's transaction."""
        holds = self.hold_repository.list_for_booking(booking_id)
        for hold in holds:
            self.hold_repository.delete_entity(hold)
            self.audit_repository.record(
                GiftcardAuditAction.HOLD_RELEASED.value,
                giftcard_id=hold.giftcard_id,
                hold_id=hold.id,
                booking_id=booking_id,
                amount=_money(hold.amount),
                metadata={"reason": "booking_deleted"},
            )
        if holds:
            prometheus_metrics.inc_giftcard_hold("released")
        return len(holds)

    def _spend_locked(
        self,
        giftcard: Giftcard,
        amount: Decimal,
        *,
        booking_id: Optional[str],
        hold: Optional[GiftcardHold],
    ) -> Decimal:
        """
        Deduct from a locked giftcard and record history and audit.

        Runs inside the caller's transaction. A hold's own amount is already
        part of the reserved total, so only the raw balance is checked then.
        """
        now = utc_now()
        if giftcard.is_expired(now):
            raise ValidationException("Giftcard has expired", code="giftcard_expired")
        balance = _money(giftcard.balance)
        if hold is not None:
            available = balance
        else:
            available = self.get_available_balance(giftcard, now)
        if available < amount:
            raise InsufficientBalanceException(amount, available, balance)
        new_balance = giftcard.deduct(amount)
        giftcard.redeemed_history = list(giftcard.redeemed_history or []) + [
            {
                "amount": float(amount),
                "booking_id": booking_id,
                "hold_id": hold.id if hold is not None else None,
                "at": now.isoformat(),
            }
        ]
        self.audit_repository.record(
            (
                GiftcardAuditAction.HOLD_CONSUMED.value
                if hold is not None
                else GiftcardAuditAction.REDEEMED.value
            ),
            giftcard_id=giftcard.id,
            hold_id=hold.id if hold is not None else None,
            booking_id=booking_id,
            amount=amount,
            metadata={"balance_after": str(new_balance)},
        )
        if hold is not None:
            self.hold_repository.delete_entity(hold)
        self.giftcard_repository.flush()
        return _money(new_balance)

    def redeem_hold_locked(
        self, hold_id: str, booking_id: Optional[str] = None
    ) -> Tuple[Giftcard, Decimal]:
        """
        Consume a hold inside an open transaction.

        Returns the giftcard and the amount spent. Used by checkout, which
        owns the transaction and writes the booking payment itself.
        """
        hold = self.hold_repository.get_for_update(hold_id)
        if hold is None:
            raise NotFoundException("Hold not found", code="hold_not_found")
        if hold.is_expired():
            raise HoldExpiredException(hold.id)
        giftcard = self._locate_giftcard_for_update(giftcard_id=hold.giftcard_id)
        amount = _money(hold.amount)
        self._spend_locked(giftcard, amount, booking_id=booking_id or hold.booking_id, hold=hold)
        return giftcard, amount

    def redeem_amount_locked(
        self,
        amount: Any,
        *,
        code: Optional[str] = None,
        giftcard_id: Optional[str] = None,
        booking_id: Optional[str] = None,
    ) -> Giftcard:
        """Spend balance directly (no hold) inside an open transaction."""
        value = _money(amount)
        if value <= 0:
            raise ValidationException("Amount must be greater than zero", code="invalid_amount")
        giftcard = self._locate_giftcard_for_update(code, giftcard_id)
        self._spend_locked(giftcard, value, booking_id=booking_id, hold=None)
        return giftcard

    @BaseService.measure_operation("consume_giftcard_hold")
    def consume_hold(self, hold_id: str, booking_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Turn a hold into a real deduction.

        When the hold (or caller) names a booking, the amount is added to
        that booking as a Giftcard payment.
        """
        with self.transaction():
            hold = self.hold_repository.get_by_id(hold_id)
            if hold is None:
                raise NotFoundException("Hold not found", code="hold_not_found")
            target_booking_id = booking_id or hold.booking_id
            giftcard, amount = self.redeem_hold_locked(hold_id, target_booking_id)
            if target_booking_id:
                booking = self.booking_repository.get_for_update(target_booking_id)
                if booking is None:
                    raise NotFoundException("Booking not found", code="booking_not_found")
                self.apply_giftcard_payment(booking, giftcard, amount)
            self.giftcard_repository.flush()
        prometheus_metrics.inc_giftcard_hold("consumed")
        self.log_operation("consume_giftcard_hold", hold_id=hold_id, giftcard_id=giftcard.id)
        return {
            "giftcard_id": giftcard.id,
            "amount": amount,
            "new_balance": _money(giftcard.balance),
            "booking_id": target_booking_id,
        }

    @staticmethod
    def apply_giftcard_payment(booking: "Booking", giftcard: Giftcard, amount: Decimal) -> None:
        """Record a giftcard deduction on the booking and refresh its paid state."""
        booking.payment_details = booking.payments + [
            payment_entry(
                amount,
                PaymentMethod.GIFTCARD.value,
                note=f"Giftcard {giftcard.code}",
                giftcard_id=giftcard.id,
                giftcard_code=giftcard.code,
            )
        ]
        booking.giftcard_id = giftcard.id
        previous = _money(booking.giftcard_redeemed_amount or 0)
        booking.giftcard_redeemed_amount = previous + amount
        booking.refresh_payment_state()

    @BaseService.measure_operation("cleanup_expired_giftcard_holds")
    def cleanup_expired_holds(self, limit: Optional[int] = None) -> Dict[str, Any]:
        """Delete expired holds, oldest first, returning what was removed."""
        with self.transaction():
            now = utc_now()
            expired = self.hold_repository.get_expired(now, limit)
            removed = []
            for hold in expired:
                removed.append(
                    {
                        "id": hold.id,
                        "giftcard_id": hold.giftcard_id,
                        "booking_id": hold.booking_id,
                        "amount": _money(hold.amount),
                        "expires_at": hold.expires_at,
                    }
                )
                self.audit_repository.record(
                    GiftcardAuditAction.EXPIRE.value,
                    giftcard_id=hold.giftcard_id,
                    hold_id=hold.id,
                    booking_id=hold.booking_id,
                    amount=_money(hold.amount),
                    status="reverted",
                )
                self.hold_repository.delete_entity(hold)
        prometheus_metrics.inc_maintenance_rows("giftcard_holds", len(removed))
        if removed:
            self.logger.info("Expired %d giftcard hold(s)", len(removed))
        return {"deleted": len(removed), "holds": removed}
