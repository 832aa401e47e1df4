# In app/db/base_class.py
from sqlalchemy import Column, Boolean, DateTime, MetaData
from sqlalchemy.sql import func
from sqlalchemy.orm import declarative_base

# Stable constraint names so alembic autogenerate can diff unique/foreign keys
NAMING_CONVENTION = {
	"ix": "ix_%(column_0_label)s",
	"uq": "uq_%(table_name)s_%(column_0_name)s",
	"ck": "ck_%(table_name)s_%(constraint_name)s",
	"fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
	"pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))

class AuditMixin:
	is_deleted = Column(Boolean, default=False, nullable=False)
	created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
	updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
	deleted_at = Column(DateTime(timezone=True), nullable=True)
