from typing import List

from fastapi import Depends
from sqlalchemy.orm import Session

from app.api.router import create_router
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_order_service
from app.schemas.order import OrderCreate, OrderRead, OrderStatusChange, OrderStatusUpdate
from app.services.order_services import OrderService

router = create_router(name="orders")

@router.post("", response_model=OrderRead, status_code=201)
def create_order(
	order_in: OrderCreate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	order_service: OrderService = Depends(get_order_service)
):
	return order_service.create_order(
		db, current_user.id, order_in.total_amount, order_in.module, group_id=order_in.group_id
	)

@router.get("", response_model=List[OrderRead])
def list_orders(
	skip: int = 0,
	limit: int = 100,
	current_user=Depends(get_current_user),
	order_service: OrderService = Depends(get_order_service)
):
	return order_service.list_orders(current_user, skip=skip, limit=min(limit, 500))

@router.get("/{order_id}", response_model=OrderRead)
def get_order(
	order_id: int,
	current_user=Depends(get_current_user),
	order_service: OrderService = Depends(get_order_service)
):
	return order_service.get_order(order_id, current_user)

@router.post("/{order_id}/status", response_model=OrderStatusChange)
def advance_order_status(
	order_id: int,
	body: OrderStatusUpdate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	order_service: OrderService = Depends(get_order_service)
):
	"""Move an order to its next status and email the customer. Administrators only."""
	return order_service.advance_status(db, order_id, body.status, current_user)
