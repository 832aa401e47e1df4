from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

class WalletTransaction(Base):
	"""Append-only ledger row. Nothing updates or deletes these."""
	__tablename__ = "wallet_transactions"
	__table_args__ = (Index("ix_wallet_transactions_user_created_at", "user_id", "created_at"),)

	id = Column(Integer, primary_key=True, index=True)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	amount = Column(Integer, nullable=False)  # signed: credit > 0, debit < 0
	type = Column(String(32), nullable=False, index=True)
	description = Column(String(255), nullable=False, default="")
	group_id = Column(Integer, ForeignKey("shopping_groups.id", ondelete="SET NULL"), nullable=True, index=True)
	created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

	user = relationship("User", back_populates="transactions")
