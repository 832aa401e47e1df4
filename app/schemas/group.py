from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class GroupCreate(BaseModel):
	name: str = Field(..., max_length=100)
	description: str = Field("", max_length=1000)


class JoinByCodeRequest(BaseModel):
	room_code: str = Field(..., min_length=1, max_length=16)


class GroupRead(BaseModel):
	"""Group projection with read-time aggregates."""
	id: int
	name: str
	description: str
	creator_id: int
	is_active: bool
	max_members: int
	room_code: str
	member_count: int
	total_cart: int
	created_at: Optional[datetime] = None


class GroupMemberRead(BaseModel):
	user_id: int
	name: str
	role: str
	joined_at: Optional[datetime] = None


class CartItemCreate(BaseModel):
	product_id: int
	quantity: int = Field(1, ge=1, le=1000)


class CartItemRead(BaseModel):
	id: int
	user_id: int
	product_id: int
	product_name: str
	unit_price: int
	quantity: int
	line_total: int


class GroupCartRead(BaseModel):
	group_id: int
	items: List[CartItemRead]
	total: int
