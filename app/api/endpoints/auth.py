from fastapi import Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.api.router import create_router
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_auth_service
from app.schemas.auth import Token, UserLogin
from app.schemas.user import UserCreate, UserRead
from app.services.auth_services import AuthService

router = create_router(name="auth")

@router.post("/register", response_model=UserRead, status_code=201)
def register(
	user_in: UserCreate,
	db: Session = Depends(get_db),
	auth_service: AuthService = Depends(get_auth_service)
):
	"""Register a new user if the email is not already taken."""
	return auth_service.register_user(user_in, db)

@router.post("/login", response_model=Token)
def login(
	form_data: OAuth2PasswordRequestForm = Depends(),
	auth_service: AuthService = Depends(get_auth_service),
):
	"""Authenticate user and return access token."""
	login_data = UserLogin(email=form_data.username, password=form_data.password)
	return auth_service.authenticate_user_and_create_token(login_data)
