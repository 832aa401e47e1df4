"""Wallet service: signed balance deltas recorded in an append-only ledger."""

from typing import List, Optional
from sqlalchemy.orm import Session

from app.db.models.wallet_transaction import WalletTransaction
from app.repositories.user import UserRepository
from app.repositories.wallet_transaction import WalletTransactionRepository
from app.repositories.group import GroupRepository
from app.repositories.group_member import GroupMemberRepository
from app.schemas.wallet import (
    WalletBalance,
    WalletDeltaResult,
    WalletTransactionRead,
    ContributionList,
)
from app.services.base import BaseService
from app.services.exceptions import (
    GroupNotFoundError,
    InsufficientFundsError,
    MembershipNotFoundError,
    UserNotFoundError,
    ValidationError,
)

CONTRIBUTION_TYPE = "group_contribution"
PAYMENT_TYPE = "payment"
RESERVED_TYPES = {CONTRIBUTION_TYPE, PAYMENT_TYPE}


class WalletService(BaseService):
    """Per-user wallet.

    The stored balance is the source of truth for reads. Every change goes
    through ``apply_delta``, which moves the balance and appends exactly one
    ledger row in the same transaction.
    """

    user_repo: UserRepository
    transaction_repo: WalletTransactionRepository
    group_repo: GroupRepository
    member_repo: GroupMemberRepository

    def __init__(self, correlation_id: Optional[str] = None, **repositories):
        super().__init__(correlation_id)
        self._set_repositories(**repositories)

    def stage_delta(
        self,
        user_id: int,
        amount: int,
        type: str,
        description: str = "",
        group_id: Optional[int] = None,
    ) -> WalletDeltaResult:
        """Move the balance and append the ledger row without committing.

        The caller owns the transaction. Issue this before any other write so
        the balance row lock is taken first.

        Raises:
            ValidationError: Non-integer amount or empty type
            UserNotFoundError: No such user
            InsufficientFundsError: Debit would take the balance below zero
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValidationError("amount", "must be an integer", self.correlation_id)
        tx_type = (type or "").strip()
        if not tx_type:
            raise ValidationError("type", "must not be empty", self.correlation_id)

        if not self.user_repo.apply_balance_delta(user_id, amount):
            if not self.user_repo.exists(user_id):
                raise UserNotFoundError(user_id, self.correlation_id)
            raise InsufficientFundsError(user_id, amount, self.correlation_id)
        txn = self.transaction_repo.record(
            user_id=user_id,
            amount=amount,
            type=tx_type,
            description=(description or "").strip(),
            group_id=group_id,
        )
        balance, _ = self.user_repo.get_balance(user_id)
        return WalletDeltaResult(balance=balance, transaction=WalletTransactionRead.model_validate(txn))

    def apply_delta(
        self,
        db: Session,
        user_id: int,
        amount: int,
        type: str,
        description: str = "",
        group_id: Optional[int] = None,
    ) -> WalletDeltaResult:
        """Apply a signed amount to the user's balance and record it.

        The balance change is a single guarded UPDATE, so concurrent debits
        cannot overdraw the wallet. An amount of 0 is accepted and still
        produces a ledger row.

        Raises:
            ValidationError: Non-integer amount or empty type
            UserNotFoundError: No such user
            InsufficientFundsError: Debit would take the balance below zero
            PersistenceError: Store failure; neither write is kept
        """
        result = self.run_in_transaction(
            db,
            lambda: self.stage_delta(user_id, amount, type, description, group_id=group_id),
            "apply_delta",
        )
        self.log_operation(
            "apply_delta",
            user_id=user_id,
            amount=amount,
            type=result.transaction.type,
            balance=result.balance,
        )
        return result

    def adjust_balance(self, db: Session, user_id: int, amount: int, type: str, description: str = "") -> WalletDeltaResult:
        """Self-service top up or spend. Group-tagged types are only written by
        ``contribute`` and wallet checkout."""
        if (type or "").strip() in RESERVED_TYPES:
            raise ValidationError("type", f"'{type.strip()}' transactions cannot be created directly", self.correlation_id)
        return self.apply_delta(db, user_id, amount, type, description)

    def get_balance(self, user_id: int) -> WalletBalance:
        row = self.user_repo.get_balance(user_id)
        if row is None:
            raise UserNotFoundError(user_id, self.correlation_id)
        balance, reward_points = row
        return WalletBalance(user_id=user_id, balance=balance, reward_points=reward_points)

    def list_transactions(self, user_id: int, skip: int = 0, limit: int = 100) -> List[WalletTransaction]:
        """User's ledger rows, newest first."""
        if not self.user_repo.exists(user_id):
            raise UserNotFoundError(user_id, self.correlation_id)
        return self.transaction_repo.get_by_user(user_id, skip=skip, limit=limit)

    def contribute(
        self,
        db: Session,
        group_id: int,
        user_id: int,
        amount: int,
        payment_method: str = "upi",
    ) -> WalletDeltaResult:
        """Record a member's contribution toward a group purchase as a wallet credit."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("amount", "must be a positive integer", self.correlation_id)

        group = self.group_repo.get_by_id(group_id)
        if group is None or not group.is_active:
            raise GroupNotFoundError(group_id, self.correlation_id)
        if not self.member_repo.is_member(group_id, user_id):
            raise MembershipNotFoundError(group_id, user_id, self.correlation_id)

        result = self.apply_delta(
            db,
            user_id=user_id,
            amount=amount,
            type=CONTRIBUTION_TYPE,
            description=f"Contribution to {group.name} via {payment_method}",
            group_id=group_id,
        )
        self.log_operation("contribute", group_id=group_id, user_id=user_id, amount=amount)
        return result

    def list_contributions(self, group_id: int) -> ContributionList:
        if self.group_repo.get_by_id(group_id) is None:
            raise GroupNotFoundError(group_id, self.correlation_id)
        rows = [
            WalletTransactionRead.model_validate(t)
            for t in self.transaction_repo.get_group_contributions(group_id, CONTRIBUTION_TYPE)
        ]
        return ContributionList(group_id=group_id, contributions=rows, total=sum(r.amount for r in rows))
