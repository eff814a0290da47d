"""Schemas for invoice requests."""

from datetime import datetime
from typing import List, Optional

from ._strict_base import StrictModel


class InvoiceRequestResponse(StrictModel):
    id: str
    booking_id: str
    booking_code: Optional[str] = None
    status: str
    company_name: str
    tax_id: str
    address: str
    email: str
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None


class InvoiceRequestListResponse(StrictModel):
    invoices: List[InvoiceRequestResponse]
    total: int
