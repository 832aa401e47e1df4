from typing import List, Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.router import create_router
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_product_repository
from app.repositories.product import ProductRepository
from app.schemas.product import ProductCreate, ProductRead, ProductModule

router = create_router(name="products", dependencies=[Depends(get_current_user)])

@router.get("", response_model=List[ProductRead])
def list_products(
	module: Optional[ProductModule] = None,
	category: Optional[str] = None,
	skip: int = 0,
	limit: int = 100,
	product_repo: ProductRepository = Depends(get_product_repository),
):
	return product_repo.list_products(module=module, category=category, skip=skip, limit=min(limit, 500))

@router.post("", response_model=ProductRead, status_code=201)
def create_product(
	product_in: ProductCreate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	product_repo: ProductRepository = Depends(get_product_repository),
):
	"""Add a catalogue product. Administrators only."""
	if not current_user.is_superuser:
		raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only administrators can add products")
	product = product_repo.create(product_in.model_dump())
	db.commit()
	db.refresh(product)
	return product
