from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from app.api.router import create_router
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_group_service, get_order_service, get_wallet_service
from app.schemas.group import (
	CartItemCreate,
	CartItemRead,
	GroupCartRead,
	GroupCreate,
	GroupMemberRead,
	GroupRead,
	JoinByCodeRequest,
)
from app.schemas.order import CheckoutResult, GroupCheckoutRequest
from app.schemas.wallet import ContributionList
from app.services.group_services import GroupService
from app.services.order_services import OrderService
from app.services.wallet_services import WalletService

router = create_router(name="groups")

@router.post("", response_model=GroupRead, status_code=201)
def create_group(
	group_in: GroupCreate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	"""Create a shopping group with the caller as its creator."""
	return group_service.create_group(db, group_in.name, group_in.description, current_user.id)

@router.get("", response_model=List[GroupRead])
def list_groups(
	skip: int = 0,
	limit: int = 100,
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	"""Active groups, newest first."""
	return group_service.list_groups(skip=skip, limit=min(limit, 500))

@router.get("/mine", response_model=List[GroupRead])
def list_my_groups(
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	return group_service.list_user_groups(current_user.id)

@router.post("/join", response_model=GroupRead)
def join_by_room_code(
	body: JoinByCodeRequest,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	"""Join a group by its room code (case-insensitive)."""
	return group_service.join_by_room_code(db, body.room_code, current_user.id)

@router.get("/{group_id}", response_model=GroupRead)
def get_group(
	group_id: int,
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	return group_service.get_group(group_id)

@router.post("/{group_id}/join", response_model=GroupRead)
def join_group(
	group_id: int,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	return group_service.join_group(db, group_id, current_user.id)

@router.post("/{group_id}/leave", status_code=204)
def leave_group(
	group_id: int,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	group_service.leave_group(db, group_id, current_user.id)

@router.post("/{group_id}/close", response_model=GroupRead)
def close_group(
	group_id: int,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	"""Deactivate a group. Creator only."""
	return group_service.close_group(db, group_id, current_user.id)

@router.get("/{group_id}/members", response_model=List[GroupMemberRead])
def list_members(
	group_id: int,
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	return group_service.list_members(group_id)

@router.post("/{group_id}/cart", response_model=CartItemRead, status_code=201)
def add_cart_item(
	group_id: int,
	item_in: CartItemCreate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	return group_service.add_cart_item(db, group_id, current_user.id, item_in.product_id, item_in.quantity)

@router.get("/{group_id}/cart", response_model=GroupCartRead)
def get_group_cart(
	group_id: int,
	current_user=Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	return group_service.get_group_cart(group_id)

@router.get("/{group_id}/contributions", response_model=ContributionList)
def list_contributions(
	group_id: int,
	current_user=Depends(get_current_user),
	wallet_service: WalletService = Depends(get_wallet_service)
):
	return wallet_service.list_contributions(group_id)

@router.post("/{group_id}/checkout", response_model=CheckoutResult, status_code=201)
def checkout_group(
	group_id: int,
	body: Optional[GroupCheckoutRequest] = None,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	order_service: OrderService = Depends(get_order_service)
):
	"""Pay for the group cart from the caller's wallet and place a pending order."""
	split = body.split_among_members if body else False
	return order_service.checkout_group(db, group_id, current_user.id, split_among_members=split)
