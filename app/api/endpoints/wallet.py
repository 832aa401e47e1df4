from typing import List

from fastapi import Depends
from sqlalchemy.orm import Session

from app.api.router import create_router
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_wallet_service
from app.schemas.wallet import (
	ContributionCreate,
	WalletBalance,
	WalletDeltaResult,
	WalletTransactionCreate,
	WalletTransactionRead,
)
from app.services.wallet_services import WalletService

router = create_router(name="wallet")

@router.get("/me", response_model=WalletBalance)
def get_my_balance(
	current_user=Depends(get_current_user),
	wallet_service: WalletService = Depends(get_wallet_service)
):
	return wallet_service.get_balance(current_user.id)

@router.get("/me/transactions", response_model=List[WalletTransactionRead])
def list_my_transactions(
	skip: int = 0,
	limit: int = 100,
	current_user=Depends(get_current_user),
	wallet_service: WalletService = Depends(get_wallet_service)
):
	"""Ledger rows for the caller, newest first."""
	return wallet_service.list_transactions(current_user.id, skip=skip, limit=min(limit, 500))

@router.post("/me/transactions", response_model=WalletDeltaResult, status_code=201)
def apply_delta(
	body: WalletTransactionCreate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	wallet_service: WalletService = Depends(get_wallet_service)
):
	"""Apply a signed amount to the caller's wallet. Group contributions and payments have their own routes."""
	return wallet_service.adjust_balance(db, current_user.id, body.amount, body.type, body.description)

@router.post("/contributions", response_model=WalletDeltaResult, status_code=201)
def contribute(
	body: ContributionCreate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	wallet_service: WalletService = Depends(get_wallet_service)
):
	return wallet_service.contribute(db, body.group_id, current_user.id, body.amount, body.payment_method)
