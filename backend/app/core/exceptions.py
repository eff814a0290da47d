# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the studio platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ForbiddenException(DomainException):
    """Raised when the caller may not perform an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class InsufficientBalanceException(ValidationException):
    """Raised when a giftcard cannot cover the requested amount."""

    def __init__(
        self,
        requested: Decimal,
        available: Decimal,
        balance: Decimal,
        *,
        message: Optional[str] = None,
    ):
        super().__init__(
            message=message or "Insufficient giftcard balance",
            code="insufficient_funds",
            details={
                "requested": str(requested),
                "available": str(available),
                "balance": str(balance),
            },
        )


class HoldExpiredException(ValidationException):
    """Raised when a giftcard hold is used after its expiry."""

    def __init__(self, hold_id: str):
        super().__init__(
            message="Giftcard hold has expired",
            code="hold_expired",
            details={"hold_id": hold_id},
        )


class CapacityExceededException(ConflictException):
    """Raised when a booking would overfill a class slot."""

    def __init__(self, slot_date: str, slot_time: str, available: int, requested: int):
        super().__init__(
            message=(
                f"Only {available} seat(s) left on {slot_date} at {slot_time}, "
                f"{requested} requested"
            ),
            code="capacity_exceeded",
            details={
                "date": slot_date,
                "time": slot_time,
                "available": available,
                "requested": requested,
            },
        )


class TechniqueMismatchException(ValidationException):
    """Raised when a booking technique contradicts its product."""

    def __init__(self, product_name: str, expected: str, given: str):
        super().__init__(
            message=f"Product '{product_name}' is a {expected} class, not {given}",
            code="technique_mismatch",
            details={"product_name": product_name, "expected": expected, "given": given},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
