# backend/app/repositories/product_repository.py
"""Product catalog queries."""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import RepositoryException
from app.models.product import Product

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ProductRepository(BaseRepository[Product]):
    def __init__(self, db: Session):
        super().__init__(db, Product)

    def list_products(
        self, *, active_only: bool = True, product_type: Optional[str] = None
    ) -> List[Product]:
        try:
            query = self.query()
            if active_only:
                query = query.filter(Product.is_active.is_(True))
            if product_type:
                query = query.filter(Product.type == product_type)
            return query.order_by(Product.name.asc()).all()
        except SQLAlchemyError as exc:
            self.logger.error("Failed to list products: %s", str(exc))
            raise RepositoryException("Failed to list products") from exc
