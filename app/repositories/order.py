"""Order repository."""

from typing import Optional, List
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.order import Order


class OrderRepository(BaseRepository[Order]):
    """Repository for Order entity operations."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, Order, correlation_id)

    def create_order(
        self,
        user_id: int,
        total_amount: int,
        module: str,
        group_id: Optional[int] = None,
        status: str = "pending",
    ) -> Order:
        return self.create({
            "user_id": user_id,
            "group_id": group_id,
            "total_amount": total_amount,
            "module": module,
            "status": status,
        })

    def get_by_user(self, user_id: int, skip: int = 0, limit: int = 100) -> List[Order]:
        return self.get_multi(skip=skip, limit=limit, filters={"user_id": user_id}, order_by="created_at")

    def get_all(self, skip: int = 0, limit: int = 100) -> List[Order]:
        return self.get_multi(skip=skip, limit=limit, order_by="created_at")

    def compare_and_set_status(self, order_id: int, expected: str, new_status: str) -> bool:
        """Move ``expected`` to ``new_status`` only if the row still holds ``expected``.

        Returns False when another writer advanced the order first.
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == expected)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        applied = self.db.execute(stmt).rowcount == 1
        self._log_operation("compare_and_set_status", id=order_id, expected=expected, new_status=new_status, applied=applied)
        return applied
