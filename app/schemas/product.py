from typing import Literal, Optional
from pydantic import BaseModel, Field

ProductModule = Literal["social", "space", "read", "mall"]

class ProductCreate(BaseModel):
	name: str = Field(..., min_length=1, max_length=200)
	description: Optional[str] = None
	price: int = Field(..., ge=0, description="Price in the smallest currency unit")
	category: str = Field(..., min_length=1, max_length=64)
	module: ProductModule = "social"

class ProductRead(ProductCreate):
	id: int

	class Config:
		from_attributes = True
