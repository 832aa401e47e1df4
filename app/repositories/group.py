"""Shopping group repository."""

from typing import Optional, List, Tuple
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.shopping_group import ShoppingGroup
from app.db.models.group_member import GroupMember
from app.db.models.cart_item import CartItem
from app.db.models.product import Product


class GroupRepository(BaseRepository[ShoppingGroup]):
    """Repository for ShoppingGroup entity operations."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, ShoppingGroup, correlation_id)

    def room_code_exists(self, room_code: str) -> bool:
        return self.db.query(self.model.id).filter(self.model.room_code == room_code).first() is not None

    def get_for_update(self, group_id: int) -> Optional[ShoppingGroup]:
        """Load a group and hold its row lock until the transaction ends."""
        return self.db.query(self.model).filter(
            self.model.id == group_id,
            self.model.is_deleted == False  # noqa: E712
        ).with_for_update().first()

    def get_by_room_code(self, room_code: str) -> Optional[ShoppingGroup]:
        result = self.db.query(self.model).filter(
            func.upper(self.model.room_code) == room_code.upper(),
            self.model.is_deleted == False  # noqa: E712
        ).first()
        self._log_operation("get_by_room_code", room_code=room_code, found=result is not None)
        return result

    def create_group(
        self,
        name: str,
        description: str,
        creator_id: int,
        room_code: str,
        max_members: int,
    ) -> ShoppingGroup:
        return self.create({
            "name": name,
            "description": description,
            "creator_id": creator_id,
            "room_code": room_code,
            "max_members": max_members,
            "is_active": True,
        })

    def _summary_query(self):
        """Groups joined with their member count and group-cart total."""
        member_counts = (
            select(GroupMember.group_id, func.count(GroupMember.id).label("member_count"))
            .group_by(GroupMember.group_id)
            .subquery()
        )
        cart_totals = (
            select(
                CartItem.group_id,
                func.sum(Product.price * CartItem.quantity).label("total_cart"),
            )
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.group_id.is_not(None))
            .group_by(CartItem.group_id)
            .subquery()
        )
        return (
            self.db.query(
                self.model,
                func.coalesce(member_counts.c.member_count, 0),
                func.coalesce(cart_totals.c.total_cart, 0),
            )
            .outerjoin(member_counts, member_counts.c.group_id == self.model.id)
            .outerjoin(cart_totals, cart_totals.c.group_id == self.model.id)
            .filter(self.model.is_deleted == False)  # noqa: E712
        )

    def list_active_with_summary(self, skip: int = 0, limit: int = 100) -> List[Tuple[ShoppingGroup, int, int]]:
        """Active groups, newest first, as ``(group, member_count, total_cart)`` tuples."""
        rows = (
            self._summary_query()
            .filter(self.model.is_active == True)  # noqa: E712
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        self._log_operation("list_active_with_summary", count=len(rows))
        return [(g, int(mc), int(tc)) for g, mc, tc in rows]

    def list_for_user_with_summary(self, user_id: int) -> List[Tuple[ShoppingGroup, int, int]]:
        """Active groups the user belongs to, newest first."""
        rows = (
            self._summary_query()
            .join(GroupMember, GroupMember.group_id == self.model.id)
            .filter(GroupMember.user_id == user_id, self.model.is_active == True)  # noqa: E712
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .all()
        )
        self._log_operation("list_for_user_with_summary", user_id=user_id, count=len(rows))
        return [(g, int(mc), int(tc)) for g, mc, tc in rows]

    def get_with_summary(self, group_id: int) -> Optional[Tuple[ShoppingGroup, int, int]]:
        row = self._summary_query().filter(self.model.id == group_id).first()
        if row is None:
            return None
        group, member_count, total_cart = row
        return group, int(member_count), int(total_cart)
