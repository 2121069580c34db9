# backend/routes/products.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas import product as product_schemas
from services import catalog
from utils.responses import unwrap
from utils.tokenJWT import get_company_user

router = APIRouter(prefix="/products", tags=["Products"])


# =========================
# LISTA PRODUKTÓW
# =========================
@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(
    search: Optional[str] = Query(None, description="Name or SKU fragment"),
    filter: Optional[str] = Query(None, pattern="^low-stock$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    result = catalog.list_products(db, current_user.company_id, search=search, filter=filter)
    return unwrap(result)


# =========================
# POJEDYNCZY PRODUKT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductDetail)
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    return unwrap(catalog.get_product(db, product_id, current_user.company_id))


# =========================
# DODAWANIE PRODUKTU
# =========================
@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    result = catalog.create_product(db, current_user.company_id, payload, user_id=current_user.id)
    return unwrap(result, response)


# =========================
# CZĘŚCIOWA EDYCJA PRODUKTU (PATCH)
# =========================
@router.patch("/{product_id}", response_model=product_schemas.ProductOut)
def edit_product(
    product_id: str,
    response: Response,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    result = catalog.update_product(db, product_id, current_user.company_id, payload, user_id=current_user.id)
    return unwrap(result, response)


# =========================
# USUWANIE
# =========================
@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    result = catalog.delete_product(db, product_id, current_user.company_id, user_id=current_user.id)
    unwrap(result, response)
    return {"detail": "Product deleted"}
