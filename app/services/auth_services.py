"""Authentication service for user registration and login operations."""

from typing import Optional
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_password_hash, verify_password, create_access_token
from app.services.base import BaseService
from app.services.exceptions import (
    AuthenticationError,
    UserInactiveError,
    EmailAlreadyExistsError,
    ValidationError
)
from app.repositories.user import UserRepository
from app.db.models.user import User
from app.schemas.user import UserCreate
from app.schemas.auth import UserLogin, Token


class AuthService(BaseService):
    """Registers accounts and exchanges credentials for bearer tokens.

    Login failures for an unknown email and for a wrong password raise the
    same ``AuthenticationError`` so the response does not reveal which
    accounts exist.
    """

    user_repo: UserRepository

    def __init__(self, correlation_id: Optional[str] = None, **repositories):
        super().__init__(correlation_id)
        if repositories:
            self._set_repositories(**repositories)

        if not hasattr(self, "user_repo"):
            raise ValidationError(
                field="user_repo",
                message="UserRepository is required for AuthService",
                correlation_id=correlation_id
            )

    def register_user(self, user_in: UserCreate, db: Session) -> User:
        """Create a new user if the email is not already registered.

        Raises:
            EmailAlreadyExistsError: If email is already registered
            PersistenceError: If the insert fails
        """
        sanitized_email = user_in.email.lower().strip()
        email_domain = sanitized_email.split("@")[1] if "@" in sanitized_email else "unknown"
        self.log_operation("register_user_attempt", email_domain=email_domain)

        def _register_operation() -> User:
            if self.user_repo.email_exists(sanitized_email):
                raise EmailAlreadyExistsError(email=sanitized_email, correlation_id=self.correlation_id)

            hashed_password = get_password_hash(user_in.password)
            user_data = user_in.model_copy(update={"email": sanitized_email, "name": user_in.name.strip()})
            return self.user_repo.create_user(user_data, hashed_password)

        user = self.run_in_transaction(db, _register_operation, "register_user")
        self.log_operation("register_user_success", user_id=user.id, email_domain=email_domain)
        return user

    def authenticate_user_and_create_token(self, login_data: UserLogin) -> Token:
        """Authenticate a user by email and password and issue an access token.

        Raises:
            AuthenticationError: Unknown email or wrong password
            UserInactiveError: Account is deactivated
        """
        sanitized_email = login_data.email.lower().strip()

        user = self.user_repo.get_by_email(sanitized_email)
        if not user or not verify_password(login_data.password, user.hashed_password):
            self.log_operation("authenticate_user_failed", reason="invalid_credentials")
            raise AuthenticationError(correlation_id=self.correlation_id)

        if not user.is_active:
            raise UserInactiveError(user_id=user.id, correlation_id=self.correlation_id)

        access_token = create_access_token({"sub": str(user.id)})
        self.log_operation("authenticate_user_success", user_id=user.id)

        return Token(
            access_token=access_token,
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        )
