# backend/app/services/product_service.py
"""Product catalog management."""

from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import ProductType
from ..core.exceptions import NotFoundException, ValidationException
from ..models.product import Product
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"name", "type", "price", "sessions", "description", "details", "is_active"}


class ProductService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_product_repository(db)

    def list_products(
        self, *, include_inactive: bool = False, product_type: Optional[str] = None
    ) -> List[Product]:
        return self.repository.list_products(
            active_only=not include_inactive, product_type=product_type
        )

    def get_product(self, product_id: str) -> Product:
        product = self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundException(f"Product {product_id} not found", code="product_not_found")
        return product

    @staticmethod
    def _validate(data: Dict[str, Any]) -> None:
        if "type" in data and data["type"] not in {t.value for t in ProductType}:
            raise ValidationException(f"Unknown product type: {data['type']}")
        if "price" in data and Decimal(str(data["price"])) < 0:
            raise ValidationException("Price cannot be negative")

    @BaseService.measure_operation("create_product")
    def create_product(self, data: Dict[str, Any]) -> Product:
        self._validate(data)
        with self.transaction():
            product = self.repository.create(
                **{k: v for k, v in data.items() if k in _EDITABLE_FIELDS}
            )
        self.log_operation("create_product", product_id=product.id)
        return product

    @BaseService.measure_operation("update_product")
    def update_product(self, product_id: str, updates: Dict[str, Any]) -> Product:
        self._validate(updates)
        with self.transaction():
            product = self.get_product(product_id)
            for key, value in updates.items():
                if key in _EDITABLE_FIELDS:
                    setattr(product, key, value)
            self.repository.flush()
        return product

    def archive_product(self, product_id: str) -> Product:
        """Soft delete: bookings keep pointing at archived products."""
        return self.update_product(product_id, {"is_active": False})
