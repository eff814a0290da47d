# backend/app/services/inquiry_service.py
"""Group, couple and team-building inquiries."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import InquiryStatus, InquiryType, NotificationType
from ..core.exceptions import NotFoundException, ValidationException
from ..models.inquiry import Inquiry
from ..repositories.factory import RepositoryFactory
from .availability_service import normalize_time
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

_FIELDS = {
    "name",
    "email",
    "phone",
    "country_code",
    "participants",
    "tentative_date",
    "tentative_time",
    "event_type",
    "inquiry_type",
    "message",
}


class InquiryService(BaseService):
    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_inquiry_repository(db)
        self.notifications = notification_service or NotificationService(db)

    @BaseService.measure_operation("create_inquiry")
    def create_inquiry(self, data: Dict[str, Any]) -> Inquiry:
        fields = {k: v for k, v in data.items() if k in _FIELDS and v is not None}
        if not str(fields.get("name") or "").strip():
            raise ValidationException("Contact name is required", code="missing_name")
        fields["email"] = str(fields.get("email") or "").strip().lower()
        if not fields["email"]:
            raise ValidationException("Contact email is required", code="missing_email")
        inquiry_type = fields.setdefault("inquiry_type", InquiryType.GROUP.value)
        if inquiry_type not in {t.value for t in InquiryType}:
            raise ValidationException(
                f"Unknown inquiry type: {inquiry_type}", code="invalid_inquiry_type"
            )
        if int(fields.get("participants", 1)) < 1:
            raise ValidationException(
                "participants must be at least 1", code="invalid_participants"
            )
        if fields.get("tentative_time"):
            try:
                fields["tentative_time"] = normalize_time(fields["tentative_time"])
            except ValueError:
                raise ValidationException(
                    f"Invalid time: {fields['tentative_time']}", code="invalid_time"
                )

        with self.transaction():
            inquiry = self.repository.create(status=InquiryStatus.NEW.value, **fields)
            self.notifications.notify(
                NotificationType.NEW_INQUIRY.value,
                "New inquiry",
                f"{inquiry.name} asked about a {inquiry_type.replace('_', ' ')} experience",
                data={"inquiry_id": inquiry.id, "participants": inquiry.participants},
            )
        self.log_operation("create_inquiry", inquiry_id=inquiry.id, inquiry_type=inquiry_type)
        return inquiry

    def list_inquiries(self, status: Optional[str] = None) -> List[Inquiry]:
        if status:
            self._check_status(status)
        return self.repository.list_inquiries(status=status)

    def get_inquiry(self, inquiry_id: str, *, for_update: bool = False) -> Inquiry:
        if for_update:
            inquiry = self.repository.get_for_update(inquiry_id)
        else:
            inquiry = self.repository.get_by_id(inquiry_id)
        if inquiry is None:
            raise NotFoundException(f"Inquiry {inquiry_id} not found", code="inquiry_not_found")
        return inquiry

    @staticmethod
    def _check_status(status: str) -> None:
        if status not in {s.value for s in InquiryStatus}:
            raise ValidationException(f"Unknown inquiry status: {status}", code="invalid_status")

    def update_status(self, inquiry_id: str, status: str) -> Inquiry:
        self._check_status(status)
        with self.transaction():
            inquiry = self.get_inquiry(inquiry_id, for_update=True)
            previous = inquiry.status
            inquiry.status = status
            self.repository.flush()
        self.log_operation(
            "update_inquiry_status", inquiry_id=inquiry_id, previous=previous, status=status
        )
        return inquiry

    def delete_inquiry(self, inquiry_id: str) -> None:
        with self.transaction():
            self.repository.delete_entity(self.get_inquiry(inquiry_id, for_update=True))
        self.log_operation("delete_inquiry", inquiry_id=inquiry_id)
