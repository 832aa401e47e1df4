from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

class GroupMember(Base):
	__tablename__ = "group_members"
	__table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),)

	id = Column(Integer, primary_key=True, index=True)
	group_id = Column(Integer, ForeignKey("shopping_groups.id", ondelete="CASCADE"), nullable=False, index=True)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	role = Column(String(16), nullable=False, default="member")  # creator | member
	joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

	group = relationship("ShoppingGroup", back_populates="members")
	user = relationship("User", back_populates="memberships")
