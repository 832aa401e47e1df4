"""Cart item repository for personal and group cart lines."""

from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.repositories.base import BaseRepository
from app.db.models.cart_item import CartItem
from app.db.models.product import Product


class CartItemRepository(BaseRepository[CartItem]):
    """Repository for CartItem entity operations."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, CartItem, correlation_id)

    def add_item(self, user_id: int, product_id: int, quantity: int, group_id: Optional[int] = None) -> CartItem:
        return self.create({
            "user_id": user_id,
            "product_id": product_id,
            "quantity": quantity,
            "group_id": group_id,
        })

    def get_by_group(self, group_id: int) -> List[CartItem]:
        """Group cart lines with their product loaded, oldest first."""
        results = (
            self.db.query(self.model)
            .options(joinedload(self.model.product))
            .filter(self.model.group_id == group_id)
            .order_by(self.model.added_at, self.model.id)
            .all()
        )
        self._log_operation("get_by_group", group_id=group_id, count=len(results))
        return results

    def group_total(self, group_id: int) -> int:
        """Sum of ``price * quantity`` over the group's cart lines."""
        total = (
            self.db.query(func.coalesce(func.sum(Product.price * self.model.quantity), 0))
            .select_from(self.model)
            .join(Product, Product.id == self.model.product_id)
            .filter(self.model.group_id == group_id)
            .scalar()
        )
        return int(total or 0)
