"""Shared response shapes."""

from typing import Dict

from ._strict_base import StrictModel


class DeleteResponse(StrictModel):
    success: bool = True
    message: str


class HealthResponse(StrictModel):
    status: str
    service: str
    environment: str
    database: str
    pool: Dict[str, int]
