from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.product import ProductModule
from app.schemas.wallet import WalletTransactionRead


class OrderStatus(str, Enum):
	PENDING = "pending"
	PROCESSING = "processing"
	SHIPPED = "shipped"
	OUT_FOR_DELIVERY = "out_for_delivery"
	DELIVERED = "delivered"


class OrderCreate(BaseModel):
	total_amount: int = Field(..., ge=0)
	module: ProductModule
	group_id: Optional[int] = None


class OrderRead(BaseModel):
	id: int
	user_id: int
	group_id: Optional[int] = None
	total_amount: int
	module: str
	status: OrderStatus
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	class Config:
		from_attributes = True


class OrderStatusUpdate(BaseModel):
	status: OrderStatus


class OrderStatusChange(BaseModel):
	order: OrderRead
	previous_status: OrderStatus
	notification_sent: bool


class GroupCheckoutRequest(BaseModel):
	"""Pay for the group cart from the caller's wallet, in full or as an equal member share."""
	split_among_members: bool = False


class CheckoutResult(BaseModel):
	order: OrderRead
	amount_paid: int
	cart_total: int
	member_count: int
	balance: int
	transaction: WalletTransactionRead
