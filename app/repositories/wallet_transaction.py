"""Wallet ledger repository. Rows are only ever inserted."""

from typing import Optional, List
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.wallet_transaction import WalletTransaction


class WalletTransactionRepository(BaseRepository[WalletTransaction]):
    """Repository for WalletTransaction entity operations."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, WalletTransaction, correlation_id)

    def record(
        self,
        user_id: int,
        amount: int,
        type: str,
        description: str = "",
        group_id: Optional[int] = None,
    ) -> WalletTransaction:
        return self.create({
            "user_id": user_id,
            "amount": amount,
            "type": type,
            "description": description,
            "group_id": group_id,
        })

    def get_by_user(self, user_id: int, skip: int = 0, limit: int = 100) -> List[WalletTransaction]:
        """Transactions for a user, newest first."""
        results = (
            self.db.query(self.model)
            .filter(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        self._log_operation("get_by_user", user_id=user_id, count=len(results))
        return results

    def get_group_contributions(self, group_id: int, type: str = "group_contribution") -> List[WalletTransaction]:
        """Every member's contributions to one group, newest first."""
        return (
            self.db.query(self.model)
            .filter(self.model.group_id == group_id, self.model.type == type)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .all()
        )
