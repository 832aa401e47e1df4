from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from app.db.base_class import AuditMixin, Base

class User(Base, AuditMixin):
	__tablename__ = "users"

	id = Column(Integer, primary_key=True, index=True)
	email = Column(String, unique=True, index=True, nullable=False)
	name = Column(String, nullable=False)
	hashed_password = Column(String, nullable=False)
	is_active = Column(Boolean, default=True)
	is_superuser = Column(Boolean, default=False)
	# Smallest currency unit; only WalletService mutates it
	balance = Column(Integer, nullable=False, default=0, server_default="0")
	reward_points = Column(Integer, nullable=False, default=0, server_default="0")

	memberships = relationship("GroupMember", back_populates="user", cascade="all, delete-orphan")
	transactions = relationship("WalletTransaction", back_populates="user", cascade="all, delete-orphan")
	orders = relationship("Order", back_populates="user")
