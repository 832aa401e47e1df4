"""Product catalogue repository."""

from typing import Optional, List
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.product import Product


class ProductRepository(BaseRepository[Product]):

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, Product, correlation_id)

    def list_products(
        self,
        module: Optional[str] = None,
        category: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Product]:
        filters = {}
        if module:
            filters["module"] = module
        if category:
            filters["category"] = category
        return self.get_multi(skip=skip, limit=limit, filters=filters, order_by="name")
