"""Pydantic schemas for the product catalog."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..core.enums import ProductType
from ._strict_base import ORMResponseModel, StrictRequestModel
from .base import Money


class ProductCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: ProductType = ProductType.SINGLE_CLASS
    price: Money
    sessions: int = Field(1, ge=1)
    description: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    is_active: bool = True


class ProductUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[ProductType] = None
    price: Optional[Money] = None
    sessions: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class ProductResponse(ORMResponseModel):
    id: str
    name: str
    type: str
    price: Money
    sessions: int
    description: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    is_active: bool
    created_at: Optional[datetime] = None


class ProductListResponse(ORMResponseModel):
    products: List[ProductResponse]
    total: int
