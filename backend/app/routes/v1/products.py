# backend/app/routes/v1/products.py
"""
Product catalog routes - API v1

Endpoints:
    GET /                  → List products (active only unless asked)
    POST /                 → Create product
    GET /{product_id}      → Product detail
    PATCH /{product_id}    → Partial update
    DELETE /{product_id}   → Archive product (soft delete)
"""

import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_product_service
from ...core.enums import ProductType
from ...core.exceptions import DomainException
from ...schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from ...services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=ProductListResponse)
def list_products(
    include_inactive: bool = Query(False),
    product_type: Optional[ProductType] = Query(None, alias="type"),
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    products = service.list_products(
        include_inactive=include_inactive,
        product_type=product_type.value if product_type else None,
    )
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products], total=len(products)
    )


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    try:
        product = service.create_product(payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return ProductResponse.model_validate(product)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    try:
        return ProductResponse.model_validate(service.get_product(product_id))
    except DomainException as exc:
        handle_domain_exception(exc)


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    try:
        product = service.update_product(product_id, payload.model_dump(exclude_unset=True))
    except DomainException as exc:
        handle_domain_exception(exc)
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", response_model=ProductResponse)
def archive_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    try:
        product = service.archive_product(product_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return ProductResponse.model_validate(product)
