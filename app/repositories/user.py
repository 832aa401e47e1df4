"""User repository for user and wallet balance operations."""

from typing import Optional
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.user import User
from app.schemas.user import UserCreate


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, User, correlation_id)

    def get_by_email(self, email: str) -> Optional[User]:
        result = self.db.query(self.model).filter(
            self.model.email == email,
            self.model.is_deleted == False  # noqa: E712
        ).first()

        self._log_operation("get_by_email", email=email, found=result is not None)
        return result

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Check if email is already registered.

        Args:
            email: Email address to check
            exclude_id: Optional user ID to exclude from check (for updates)
        """
        query = self.db.query(self.model.id).filter(
            self.model.email == email,
            self.model.is_deleted == False  # noqa: E712
        )

        if exclude_id:
            query = query.filter(self.model.id != exclude_id)

        return query.first() is not None

    def create_user(self, user_in: UserCreate, hashed_password: str) -> User:
        user_data = user_in.model_dump(exclude={"password"})
        user_data["hashed_password"] = hashed_password
        return self.create(user_data)

    def apply_balance_delta(self, user_id: int, amount: int) -> bool:
        """Add ``amount`` to the user's balance in a single conditional UPDATE.

        The guard ``balance + amount >= 0`` is evaluated by the database against
        the current row, so two concurrent debits can never both pass it. The
        UPDATE also takes the row write lock, serialising writers on the same
        user until the surrounding transaction ends.

        Returns:
            True if the row was updated, False if the user is missing or the
            balance would go negative.
        """
        stmt = (
            update(User)
            .where(
                User.id == user_id,
                User.is_deleted == False,  # noqa: E712
                User.balance + amount >= 0,
            )
            .values(balance=User.balance + amount)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        applied = result.rowcount == 1
        self._log_operation("apply_balance_delta", user_id=user_id, amount=amount, applied=applied)
        return applied

    def get_balance(self, user_id: int) -> Optional[tuple[int, int]]:
        """Return ``(balance, reward_points)`` read fresh from the database."""
        row = self.db.query(User.balance, User.reward_points).filter(
            User.id == user_id,
            User.is_deleted == False  # noqa: E712
        ).first()
        if row is None:
            return None
        return int(row[0]), int(row[1])
