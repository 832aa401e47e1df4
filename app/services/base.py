"""Base service class with common functionality for all services."""

import logging
from typing import Optional, Callable, TypeVar, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.services.exceptions import PersistenceError

T = TypeVar("T")


class BaseService:
    """Base service class providing common functionality for all services.

    Provides:
    - One commit per business operation, rollback on any failure
    - Conversion of SQLAlchemy failures into ``PersistenceError``
    - Structured logging with correlation ID
    """

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id
        self.logger = logging.getLogger(self.__class__.__name__)

    def _set_repositories(self, **repositories):
        """Attach repository instances to the service by name."""
        for name, repo in repositories.items():
            setattr(self, name, repo)

    def run_in_transaction(self, db: Session, operation: Callable[[], T], name: str = "transaction") -> T:
        """Execute operation within a database transaction.

        Commits on success. On any exception the session is rolled back;
        ``ServiceError`` subclasses propagate unchanged, while SQLAlchemy
        failures are re-raised as ``PersistenceError``.

        Args:
            db: Database session to use for the transaction
            operation: Callable that performs database operations
            name: Operation name used in logs and in the PersistenceError
        """
        try:
            result = operation()
            db.commit()
            self.logger.debug(
                "Transaction committed",
                extra={
                    "correlation_id": self.correlation_id,
                    "service": self.__class__.__name__,
                    "operation": name
                }
            )
            return result
        except SQLAlchemyError as e:
            db.rollback()
            self.logger.error(
                "Database error occurred, transaction rolled back",
                extra={
                    "correlation_id": self.correlation_id,
                    "service": self.__class__.__name__,
                    "operation": name,
                    "error": str(e)
                }
            )
            raise PersistenceError(name, str(e.__class__.__name__), self.correlation_id) from e
        except Exception as e:
            db.rollback()
            self.logger.warning(
                "Operation failed, transaction rolled back",
                extra={
                    "correlation_id": self.correlation_id,
                    "service": self.__class__.__name__,
                    "operation": name,
                    "error": str(e)
                }
            )
            raise

    def log_operation(self, operation: str, **kwargs: Any) -> None:
        log_data = {
            "correlation_id": self.correlation_id,
            "service": self.__class__.__name__,
            "operation": operation,
            **kwargs
        }
        self.logger.info(f"Service operation: {operation}", extra=log_data)
