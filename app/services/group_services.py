"""Group buying service: group lifecycle, membership and the shared group cart."""

import secrets
import string
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.models.shopping_group import ShoppingGroup
from app.repositories.group import GroupRepository
from app.repositories.group_member import GroupMemberRepository
from app.repositories.cart_item import CartItemRepository
from app.repositories.product import ProductRepository
from app.schemas.group import GroupRead, GroupMemberRead, CartItemRead, GroupCartRead
from app.services.base import BaseService
from app.services.exceptions import (
    AlreadyMemberError,
    GroupFullError,
    GroupNotFoundError,
    GroupPermissionError,
    MembershipNotFoundError,
    PersistenceError,
    ProductNotFoundError,
    ValidationError,
)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


class GroupService(BaseService):
    """Shopping group operations.

    ``member_count`` and ``total_cart`` are always computed by the database
    at read time. The room code is drawn once at creation and stored.
    """

    group_repo: GroupRepository
    member_repo: GroupMemberRepository
    cart_repo: CartItemRepository
    product_repo: ProductRepository

    def __init__(self, correlation_id: Optional[str] = None, **repositories):
        super().__init__(correlation_id)
        self._set_repositories(**repositories)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _to_read(group: ShoppingGroup, member_count: int, total_cart: int) -> GroupRead:
        return GroupRead(
            id=group.id,
            name=group.name,
            description=group.description or "",
            creator_id=group.creator_id,
            is_active=bool(group.is_active),
            max_members=group.max_members,
            room_code=group.room_code,
            member_count=member_count,
            total_cart=total_cart,
            created_at=group.created_at,
        )

    def _generate_room_code(self) -> str:
        for _ in range(settings.ROOM_CODE_MAX_ATTEMPTS):
            code = "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(settings.ROOM_CODE_LENGTH))
            if not self.group_repo.room_code_exists(code):
                return code
        raise PersistenceError(
            "generate_room_code",
            f"no free room code after {settings.ROOM_CODE_MAX_ATTEMPTS} attempts",
            self.correlation_id,
        )

    def _get_active_group(self, group_id: int, lock: bool = False) -> ShoppingGroup:
        group = self.group_repo.get_for_update(group_id) if lock else self.group_repo.get_by_id(group_id)
        if group is None or not group.is_active:
            raise GroupNotFoundError(group_id, self.correlation_id)
        return group

    def _require_member(self, group_id: int, user_id: int) -> None:
        if not self.member_repo.is_member(group_id, user_id):
            raise MembershipNotFoundError(group_id, user_id, self.correlation_id)

    def _read_group(self, group_id: int) -> GroupRead:
        row = self.group_repo.get_with_summary(group_id)
        if row is None:
            raise GroupNotFoundError(group_id, self.correlation_id)
        return self._to_read(*row)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def create_group(self, db: Session, name: str, description: str, creator_id: int) -> GroupRead:
        """Create an active group with the creator as its first member.

        Raises:
            ValidationError: Name is empty after trimming
            PersistenceError: Store failure; nothing is written
        """
        clean_name = (name or "").strip()
        if not clean_name:
            raise ValidationError("name", "must not be empty", self.correlation_id)

        def _create() -> ShoppingGroup:
            group = self.group_repo.create_group(
                name=clean_name,
                description=(description or "").strip(),
                creator_id=creator_id,
                room_code=self._generate_room_code(),
                max_members=settings.GROUP_MAX_MEMBERS,
            )
            self.member_repo.add_member(group.id, creator_id, role="creator")
            return group

        group = self.run_in_transaction(db, _create, "create_group")
        self.log_operation("create_group", group_id=group.id, creator_id=creator_id)
        return self._to_read(group, 1, 0)

    def close_group(self, db: Session, group_id: int, user_id: int) -> GroupRead:
        """Deactivate a group. Only its creator may close it."""

        def _close() -> None:
            group = self._get_active_group(group_id)
            if group.creator_id != user_id:
                raise GroupPermissionError(group_id, user_id, "close group", self.correlation_id)
            group.is_active = False
            db.flush()

        self.run_in_transaction(db, _close, "close_group")
        self.log_operation("close_group", group_id=group_id, user_id=user_id)
        return self._read_group(group_id)

    # ------------------------------------------------------------------
    # membership
    # ------------------------------------------------------------------

    def join_group(self, db: Session, group_id: int, user_id: int) -> GroupRead:
        """Add ``user_id`` as a member.

        Raises:
            GroupNotFoundError: Group missing or closed
            AlreadyMemberError: User is already a member
            GroupFullError: ``max_members`` reached
        """

        def _join() -> None:
            # Held until commit, so concurrent joins count members one at a time
            group = self._get_active_group(group_id, lock=True)
            if self.member_repo.is_member(group.id, user_id):
                raise AlreadyMemberError(group.id, user_id, self.correlation_id)
            if self.member_repo.count_members(group.id) >= group.max_members:
                raise GroupFullError(group.id, group.max_members, self.correlation_id)
            try:
                self.member_repo.add_member(group.id, user_id)
            except IntegrityError as exc:
                # Concurrent join for the same user won the unique constraint
                raise AlreadyMemberError(group.id, user_id, self.correlation_id) from exc

        self.run_in_transaction(db, _join, "join_group")
        self.log_operation("join_group", group_id=group_id, user_id=user_id)
        return self._read_group(group_id)

    def join_by_room_code(self, db: Session, room_code: str, user_id: int) -> GroupRead:
        code = (room_code or "").strip()
        group = self.group_repo.get_by_room_code(code) if code else None
        if group is None or not group.is_active:
            raise GroupNotFoundError(code, self.correlation_id)
        return self.join_group(db, group.id, user_id)

    def leave_group(self, db: Session, group_id: int, user_id: int) -> None:
        """Remove a non-creator membership."""

        def _leave() -> None:
            if self.group_repo.get_by_id(group_id) is None:
                raise GroupNotFoundError(group_id, self.correlation_id)
            membership = self.member_repo.get_membership(group_id, user_id)
            if membership is None:
                raise MembershipNotFoundError(group_id, user_id, self.correlation_id)
            if membership.role == "creator":
                raise ValidationError("user_id", "the group creator cannot leave the group", self.correlation_id)
            self.member_repo.remove_member(group_id, user_id)

        self.run_in_transaction(db, _leave, "leave_group")
        self.log_operation("leave_group", group_id=group_id, user_id=user_id)

    def list_members(self, group_id: int) -> List[GroupMemberRead]:
        if self.group_repo.get_by_id(group_id) is None:
            raise GroupNotFoundError(group_id, self.correlation_id)
        members = sorted(
            self.member_repo.list_members(group_id),
            key=lambda m: (m.role != "creator", m.joined_at, m.id),
        )
        return [
            GroupMemberRead(user_id=m.user_id, name=m.user.name, role=m.role, joined_at=m.joined_at)
            for m in members
        ]

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    def list_groups(self, skip: int = 0, limit: int = 100) -> List[GroupRead]:
        """All active groups, newest first."""
        return [self._to_read(*row) for row in self.group_repo.list_active_with_summary(skip, limit)]

    def list_user_groups(self, user_id: int) -> List[GroupRead]:
        return [self._to_read(*row) for row in self.group_repo.list_for_user_with_summary(user_id)]

    def get_group(self, group_id: int) -> GroupRead:
        return self._read_group(group_id)

    # ------------------------------------------------------------------
    # group cart
    # ------------------------------------------------------------------

    def add_cart_item(self, db: Session, group_id: int, user_id: int, product_id: int, quantity: int = 1) -> CartItemRead:
        if quantity < 1:
            raise ValidationError("quantity", "must be at least 1", self.correlation_id)

        def _add():
            self._get_active_group(group_id)
            self._require_member(group_id, user_id)
            product = self.product_repo.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id, self.correlation_id)
            return self.cart_repo.add_item(user_id, product.id, quantity, group_id=group_id), product

        item, product = self.run_in_transaction(db, _add, "add_cart_item")
        self.log_operation("add_cart_item", group_id=group_id, user_id=user_id, product_id=product_id, quantity=quantity)
        return CartItemRead(
            id=item.id,
            user_id=user_id,
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
            line_total=product.price * quantity,
        )

    def get_aggregate_cart(self, group_id: int) -> int:
        """Sum of price * quantity over the group's cart lines; 0 when empty."""
        return self.cart_repo.group_total(group_id)

    def get_group_cart(self, group_id: int) -> GroupCartRead:
        if self.group_repo.get_by_id(group_id) is None:
            raise GroupNotFoundError(group_id, self.correlation_id)
        items = [
            CartItemRead(
                id=line.id,
                user_id=line.user_id,
                product_id=line.product_id,
                product_name=line.product.name,
                unit_price=line.product.price,
                quantity=line.quantity,
                line_total=line.product.price * line.quantity,
            )
            for line in self.cart_repo.get_by_group(group_id)
        ]
        return GroupCartRead(group_id=group_id, items=items, total=self.get_aggregate_cart(group_id))
