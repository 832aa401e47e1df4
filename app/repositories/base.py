"""Base repository class with common CRUD operations."""

import logging
from abc import ABC
from typing import Generic, TypeVar, Type, Optional, List, Any, Dict
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import func

from app.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """Base repository class providing common CRUD operations.

    Provides:
    - Create, read and update helpers that flush but never commit
    - Soft delete support for models with AuditMixin
    - Structured logging for data operations

    Transactions belong to the service layer (see BaseService.run_in_transaction).
    """

    def __init__(self, db: Session, model: Type[ModelType], correlation_id: Optional[str] = None):
        self.db = db
        self.model = model
        self.correlation_id = correlation_id
        self.logger = logging.getLogger(self.__class__.__name__)

    def _not_deleted(self, query):
        if hasattr(self.model, "is_deleted"):
            query = query.filter(self.model.is_deleted == False)  # noqa: E712
        return query

    def create(self, obj_in: Any, **kwargs: Any) -> ModelType:
        """Create a new record and flush it so the primary key is populated.

        Args:
            obj_in: Pydantic model or dict with creation data
            **kwargs: Additional fields to set on the model

        Raises:
            SQLAlchemyError: On database operation failure
        """
        try:
            if hasattr(obj_in, "model_dump"):
                obj_data = obj_in.model_dump(exclude_unset=True)
            else:
                obj_data = dict(obj_in)

            obj_data.update(kwargs)
            db_obj = self.model(**obj_data)

            self.db.add(db_obj)
            self.db.flush()
            self.db.refresh(db_obj)

            self._log_operation("create", model=self.model.__name__, id=getattr(db_obj, "id", None))
            return db_obj

        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to create {self.model.__name__}",
                extra={
                    "correlation_id": self.correlation_id,
                    "repository": self.__class__.__name__,
                    "error": str(e)
                }
            )
            raise

    def get_by_id(self, id: int, include_deleted: bool = False) -> Optional[ModelType]:
        query = self.db.query(self.model).filter(self.model.id == id)
        if not include_deleted:
            query = self._not_deleted(query)

        result = query.first()
        self._log_operation("get_by_id", model=self.model.__name__, id=id, found=result is not None)
        return result

    def get_multi(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None
    ) -> List[ModelType]:
        """Get multiple records with pagination and equality filters.

        Ordering on ``created_at`` is newest first; any other field ascends.
        """
        query = self._not_deleted(self.db.query(self.model))

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.filter(getattr(self.model, field) == value)

        if order_by and hasattr(self.model, order_by):
            order_field = getattr(self.model, order_by)
            if order_by == "created_at":
                query = query.order_by(order_field.desc(), self.model.id.desc())
            else:
                query = query.order_by(order_field)

        results = query.offset(skip).limit(limit).all()
        self._log_operation("get_multi", model=self.model.__name__, count=len(results), skip=skip, limit=limit)
        return results

    def update(self, id: int, obj_in: Any, **kwargs: Any) -> Optional[ModelType]:
        """Update a record by ID. Returns None when it does not exist."""
        try:
            db_obj = self.get_by_id(id)
            if not db_obj:
                return None

            if hasattr(obj_in, "model_dump"):
                update_data = obj_in.model_dump(exclude_unset=True)
            else:
                update_data = dict(obj_in)

            update_data.update(kwargs)

            for field, value in update_data.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            self.db.flush()
            self.db.refresh(db_obj)

            self._log_operation("update", model=self.model.__name__, id=id)
            return db_obj

        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to update {self.model.__name__} with id {id}",
                extra={
                    "correlation_id": self.correlation_id,
                    "repository": self.__class__.__name__,
                    "error": str(e)
                }
            )
            raise

    def delete(self, id: int, soft_delete: bool = True) -> bool:
        """Delete a record by ID. Soft deletes when the model supports it."""
        try:
            db_obj = self.get_by_id(id)
            if not db_obj:
                return False

            if soft_delete and hasattr(db_obj, "is_deleted"):
                db_obj.is_deleted = True
                db_obj.deleted_at = func.now()
            else:
                self.db.delete(db_obj)
            self.db.flush()

            self._log_operation("delete", model=self.model.__name__, id=id, soft=soft_delete)
            return True

        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to delete {self.model.__name__} with id {id}",
                extra={
                    "correlation_id": self.correlation_id,
                    "repository": self.__class__.__name__,
                    "error": str(e)
                }
            )
            raise

    def exists(self, id: int) -> bool:
        query = self._not_deleted(self.db.query(self.model.id).filter(self.model.id == id))
        return query.first() is not None

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        query = self._not_deleted(self.db.query(self.model))
        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.filter(getattr(self.model, field) == value)
        return query.count()

    def _log_operation(self, operation: str, **kwargs: Any) -> None:
        log_data = {
            "correlation_id": self.correlation_id,
            "repository": self.__class__.__name__,
            "operation": operation,
            **kwargs
        }
        self.logger.debug(f"Repository operation: {operation}", extra=log_data)
