from typing import List

from fastapi import Depends

from app.api.router import create_router
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.services import get_group_service
from app.db.models.user import User
from app.schemas.group import GroupRead
from app.schemas.user import UserProfile
from app.services.group_services import GroupService

router = create_router(name="user")

@router.get("/me", response_model=UserProfile)
def read_users_me(current_user: User = Depends(get_current_user)):
	return current_user

@router.get("/me/groups", response_model=List[GroupRead])
def read_my_groups(
	current_user: User = Depends(get_current_user),
	group_service: GroupService = Depends(get_group_service)
):
	"""Active groups the caller belongs to."""
	return group_service.list_user_groups(current_user.id)
