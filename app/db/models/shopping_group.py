from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.db.base_class import AuditMixin, Base

class ShoppingGroup(Base, AuditMixin):
	__tablename__ = "shopping_groups"

	id = Column(Integer, primary_key=True, index=True)
	name = Column(String(100), nullable=False)
	description = Column(Text, nullable=False, default="")
	creator_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	is_active = Column(Boolean, nullable=False, default=True, index=True)
	max_members = Column(Integer, nullable=False, default=10)
	# Assigned once at creation, never regenerated on read
	room_code = Column(String(16), nullable=False, unique=True, index=True)

	creator = relationship("User", lazy="select")
	members = relationship("GroupMember", back_populates="group", cascade="all, delete-orphan")
	cart_items = relationship("CartItem", back_populates="group")
