from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.api.dependencies.database import get_db
from app.core.security import decode_access_token
from app.db.models.user import User
from app.repositories.user import UserRepository

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

_credentials_exception = HTTPException(
	status_code=status.HTTP_401_UNAUTHORIZED,
	detail="Could not validate credentials",
	headers={"WWW-Authenticate": "Bearer"},
)


def get_current_user(
	request: Request,
	token: str = Depends(oauth2_scheme),
	db: Session = Depends(get_db),
) -> User:
	"""Resolve the bearer token to an active user.

	Every service call receives this principal explicitly; there is no
	fallback identity when the token is missing or invalid.
	"""
	user_id = decode_access_token(token)
	if user_id is None:
		raise _credentials_exception

	user = UserRepository(db).get_by_id(user_id)
	if user is None or not user.is_active:
		raise _credentials_exception

	request.state.user_id = user.id
	return user
