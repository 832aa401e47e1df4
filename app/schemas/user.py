from pydantic import BaseModel, EmailStr, Field

class UserBase(BaseModel):
	email: EmailStr
	name: str = Field(..., min_length=1, max_length=100)

class UserCreate(UserBase):
	password: str = Field(..., min_length=8, max_length=128)

class UserRead(UserBase):
	id: int
	is_superuser: bool = False

	class Config:
		from_attributes = True

class UserProfile(UserRead):
	"""The caller's account with wallet figures in the smallest currency unit."""
	balance: int = 0
	reward_points: int = 0
