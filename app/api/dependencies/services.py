"""Service dependency providers for FastAPI dependency injection."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from typing import Optional

from app.api.dependencies.database import get_db
from app.core.observability import generate_correlation_id
from app.services.auth_services import AuthService
from app.services.group_services import GroupService
from app.services.wallet_services import WalletService
from app.services.payment_services import PaymentIntentService
from app.services.order_services import OrderService
from app.services.notification_services import OrderNotifier
from app.services.email_client import BrevoEmailClient, EmailClient
from app.repositories.user import UserRepository
from app.repositories.group import GroupRepository
from app.repositories.group_member import GroupMemberRepository
from app.repositories.cart_item import CartItemRepository
from app.repositories.product import ProductRepository
from app.repositories.wallet_transaction import WalletTransactionRepository
from app.repositories.order import OrderRepository


def get_correlation_id(request: Request) -> Optional[str]:
	"""Return the request's correlation ID, assigning one if the middleware did not."""
	cid = getattr(request.state, "correlation_id", None)
	if not cid:
		cid = generate_correlation_id(request.headers.get("X-Correlation-ID"))
		request.state.correlation_id = cid
	return cid


# Repository Dependencies
def get_user_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> UserRepository:
    return UserRepository(db=db, correlation_id=correlation_id)


def get_group_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> GroupRepository:
    return GroupRepository(db=db, correlation_id=correlation_id)


def get_group_member_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> GroupMemberRepository:
    return GroupMemberRepository(db=db, correlation_id=correlation_id)


def get_cart_item_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> CartItemRepository:
    return CartItemRepository(db=db, correlation_id=correlation_id)


def get_product_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> ProductRepository:
    return ProductRepository(db=db, correlation_id=correlation_id)


def get_wallet_transaction_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> WalletTransactionRepository:
    return WalletTransactionRepository(db=db, correlation_id=correlation_id)


def get_order_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> OrderRepository:
    return OrderRepository(db=db, correlation_id=correlation_id)


# Outbound clients
def get_email_client(
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> EmailClient:
    """Provide the transactional email client. Tests override this with a fake."""
    return BrevoEmailClient(correlation_id=correlation_id)


# Service Dependencies
def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> AuthService:
    return AuthService(correlation_id=correlation_id, user_repo=user_repo)


def get_group_service(
    group_repo: GroupRepository = Depends(get_group_repository),
    member_repo: GroupMemberRepository = Depends(get_group_member_repository),
    cart_repo: CartItemRepository = Depends(get_cart_item_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> GroupService:
    """Provide GroupService with its repositories.

    All repositories share the request's session, so a service transaction
    spans every repository it touches.
    """
    return GroupService(
        correlation_id=correlation_id,
        group_repo=group_repo,
        member_repo=member_repo,
        cart_repo=cart_repo,
        product_repo=product_repo
    )


def get_wallet_service(
    user_repo: UserRepository = Depends(get_user_repository),
    transaction_repo: WalletTransactionRepository = Depends(get_wallet_transaction_repository),
    group_repo: GroupRepository = Depends(get_group_repository),
    member_repo: GroupMemberRepository = Depends(get_group_member_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> WalletService:
    return WalletService(
        correlation_id=correlation_id,
        user_repo=user_repo,
        transaction_repo=transaction_repo,
        group_repo=group_repo,
        member_repo=member_repo
    )


def get_payment_intent_service(
    group_repo: GroupRepository = Depends(get_group_repository),
    member_repo: GroupMemberRepository = Depends(get_group_member_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> PaymentIntentService:
    return PaymentIntentService(correlation_id=correlation_id, group_repo=group_repo, member_repo=member_repo)


def get_order_notifier(
    email_client: EmailClient = Depends(get_email_client),
    user_repo: UserRepository = Depends(get_user_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> OrderNotifier:
    return OrderNotifier(email_client, correlation_id=correlation_id, user_repo=user_repo)


def get_order_service(
    notifier: OrderNotifier = Depends(get_order_notifier),
    wallet_service: WalletService = Depends(get_wallet_service),
    order_repo: OrderRepository = Depends(get_order_repository),
    group_repo: GroupRepository = Depends(get_group_repository),
    member_repo: GroupMemberRepository = Depends(get_group_member_repository),
    cart_repo: CartItemRepository = Depends(get_cart_item_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> OrderService:
    """Provide OrderService. The wallet service shares the request session so
    a wallet checkout debits and places the order in one transaction.
    """
    return OrderService(
        notifier,
        wallet_service,
        correlation_id=correlation_id,
        order_repo=order_repo,
        group_repo=group_repo,
        member_repo=member_repo,
        cart_repo=cart_repo
    )
