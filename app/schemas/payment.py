from datetime import datetime
from typing import List
from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
	group_id: int
	item_id: int
	amount: int = Field(..., gt=0, description="Amount in the smallest currency unit")


class PaymentIntent(BaseModel):
	"""UPI payment intent. Never persisted; expires_at is advisory."""
	reference_id: str
	upi_uri: str
	qr_code: str
	amount: int
	currency: str
	expires_at: datetime
	instructions: List[str]
