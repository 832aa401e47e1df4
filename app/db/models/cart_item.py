from sqlalchemy import Column, Integer, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

class CartItem(Base):
	__tablename__ = "cart_items"

	id = Column(Integer, primary_key=True, index=True)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
	quantity = Column(Integer, nullable=False, default=1)
	# Null for a personal cart line, set for a group cart line
	group_id = Column(Integer, ForeignKey("shopping_groups.id", ondelete="CASCADE"), nullable=True, index=True)
	added_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

	product = relationship("Product", lazy="joined")
	group = relationship("ShoppingGroup", back_populates="cart_items")
