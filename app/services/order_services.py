"""Order creation and the forward-only delivery status chain."""

from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from app.db.models.order import Order
from app.db.models.user import User
from app.repositories.order import OrderRepository
from app.repositories.group import GroupRepository
from app.repositories.group_member import GroupMemberRepository
from app.repositories.cart_item import CartItemRepository
from app.schemas.order import CheckoutResult, OrderRead, OrderStatus, OrderStatusChange
from app.services.base import BaseService
from app.services.notification_services import OrderNotifier
from app.services.wallet_services import PAYMENT_TYPE, WalletService
from app.services.exceptions import (
    GroupNotFoundError,
    InvalidStatusTransitionError,
    MembershipNotFoundError,
    OrderNotFoundError,
    OrderPermissionError,
    ValidationError,
)

STATUS_CHAIN: List[str] = [s.value for s in OrderStatus]
NEXT_STATUS: Dict[str, str] = dict(zip(STATUS_CHAIN, STATUS_CHAIN[1:]))
ORDER_MODULES = {"social", "space", "read", "mall"}


class OrderService(BaseService):
    """Orders move pending -> processing -> shipped -> out_for_delivery -> delivered.

    Each step commits before its notification is attempted, and a failed
    notification never undoes the step.
    """

    order_repo: OrderRepository
    group_repo: GroupRepository
    member_repo: GroupMemberRepository
    cart_repo: CartItemRepository

    def __init__(
        self,
        notifier: OrderNotifier,
        wallet_service: WalletService,
        correlation_id: Optional[str] = None,
        **repositories,
    ):
        super().__init__(correlation_id)
        self.notifier = notifier
        self.wallet_service = wallet_service
        self._set_repositories(**repositories)

    def create_order(
        self,
        db: Session,
        user_id: int,
        total_amount: int,
        module: str,
        group_id: Optional[int] = None,
    ) -> Order:
        if total_amount < 0:
            raise ValidationError("total_amount", "must not be negative", self.correlation_id)
        if module not in ORDER_MODULES:
            raise ValidationError("module", f"must be one of {sorted(ORDER_MODULES)}", self.correlation_id)
        if group_id is not None and self.group_repo.get_by_id(group_id) is None:
            raise GroupNotFoundError(group_id, self.correlation_id)

        order = self.run_in_transaction(
            db,
            lambda: self.order_repo.create_order(user_id, total_amount, module, group_id=group_id),
            "create_order",
        )
        self.log_operation("create_order", order_id=order.id, user_id=user_id, total_amount=total_amount)
        return order

    def checkout_group(
        self,
        db: Session,
        group_id: int,
        user_id: int,
        split_among_members: bool = False,
    ) -> CheckoutResult:
        """Pay for the group cart from the caller's wallet and place a pending order.

        The caller pays the whole cart, or with ``split_among_members`` an
        equal share rounded up. The wallet debit and the order insert commit
        together.

        Raises:
            GroupNotFoundError: group missing or closed
            MembershipNotFoundError: caller is not a member
            ValidationError: group cart is empty
            InsufficientFundsError: wallet cannot cover the amount; no order is placed
        """
        group = self.group_repo.get_by_id(group_id)
        if group is None or not group.is_active:
            raise GroupNotFoundError(group_id, self.correlation_id)
        if not self.member_repo.is_member(group_id, user_id):
            raise MembershipNotFoundError(group_id, user_id, self.correlation_id)

        total = self.cart_repo.group_total(group_id)
        if total <= 0:
            raise ValidationError("cart", "group cart is empty", self.correlation_id)
        member_count = self.member_repo.count_members(group_id)
        amount = -(-total // member_count) if split_among_members else total

        if split_among_members:
            description = f"Group share for {group.name} ({amount} of {total})"
        else:
            description = f"Purchase from {group.name}"

        def _checkout():
            debit = self.wallet_service.stage_delta(user_id, -amount, PAYMENT_TYPE, description, group_id=group_id)
            order = self.order_repo.create_order(user_id, amount, "social", group_id=group_id)
            return order, debit

        order, debit = self.run_in_transaction(db, _checkout, "checkout_group")
        self.log_operation(
            "checkout_group",
            order_id=order.id,
            group_id=group_id,
            user_id=user_id,
            amount=amount,
            cart_total=total,
        )
        return CheckoutResult(
            order=OrderRead.model_validate(order),
            amount_paid=amount,
            cart_total=total,
            member_count=member_count,
            balance=debit.balance,
            transaction=debit.transaction,
        )

    def get_order(self, order_id: int, user: User) -> Order:
        order = self.order_repo.get_by_id(order_id)
        if order is None or (order.user_id != user.id and not user.is_superuser):
            raise OrderNotFoundError(order_id, user.id, self.correlation_id)
        return order

    def list_orders(self, user: User, skip: int = 0, limit: int = 100) -> List[Order]:
        """Own orders newest first; administrators see every order."""
        if user.is_superuser:
            return self.order_repo.get_all(skip=skip, limit=limit)
        return self.order_repo.get_by_user(user.id, skip=skip, limit=limit)

    def advance_status(self, db: Session, order_id: int, new_status: str, actor: User) -> OrderStatusChange:
        """Move an order one step along the chain and send the matching email.

        Raises:
            OrderPermissionError: actor is not an administrator
            OrderNotFoundError: no such order
            InvalidStatusTransitionError: ``new_status`` is not the immediate successor
        """
        if not actor.is_superuser:
            raise OrderPermissionError(order_id, actor.id, self.correlation_id)

        target = new_status.value if isinstance(new_status, OrderStatus) else str(new_status)

        def _advance() -> str:
            order = self.order_repo.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(order_id, correlation_id=self.correlation_id)
            current = order.status
            if NEXT_STATUS.get(current) != target:
                raise InvalidStatusTransitionError(order_id, current, target, self.correlation_id)
            if not self.order_repo.compare_and_set_status(order_id, current, target):
                # Another writer moved the order between our read and write
                raise InvalidStatusTransitionError(order_id, current, target, self.correlation_id)
            return current

        previous = self.run_in_transaction(db, _advance, "advance_status")
        order = self.order_repo.get_by_id(order_id)
        self.log_operation("advance_status", order_id=order_id, previous_status=previous, status=target)

        sent = self.notifier.notify_status_change(order, target)
        return OrderStatusChange(
            order=OrderRead.model_validate(order),
            previous_status=previous,
            notification_sent=sent,
        )
