from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class WalletBalance(BaseModel):
	user_id: int
	balance: int
	reward_points: int


class WalletTransactionCreate(BaseModel):
	"""Signed delta: positive credits the wallet, negative debits it."""
	amount: int
	type: str = Field(..., max_length=32)
	description: str = Field("", max_length=255)


class WalletTransactionRead(BaseModel):
	id: int
	user_id: int
	amount: int
	type: str
	description: str
	group_id: Optional[int] = None
	created_at: Optional[datetime] = None

	class Config:
		from_attributes = True


class WalletDeltaResult(BaseModel):
	balance: int
	transaction: WalletTransactionRead


class ContributionCreate(BaseModel):
	group_id: int
	amount: int = Field(..., gt=0)
	payment_method: str = Field("upi", max_length=32)


class ContributionList(BaseModel):
	group_id: int
	contributions: List[WalletTransactionRead]
	total: int
