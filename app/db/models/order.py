from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base_class import AuditMixin, Base

class Order(Base, AuditMixin):
	__tablename__ = "orders"

	id = Column(Integer, primary_key=True, index=True)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	group_id = Column(Integer, ForeignKey("shopping_groups.id", ondelete="SET NULL"), nullable=True, index=True)
	total_amount = Column(Integer, nullable=False)
	module = Column(String(16), nullable=False)
	status = Column(String(32), nullable=False, default="pending", index=True)

	user = relationship("User", back_populates="orders")
