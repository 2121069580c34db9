"""Tenant-scoped product catalog."""
import logging
from typing import Any, List, Optional

from sqlalchemy import delete, exists, or_, select
from sqlalchemy.orm import Session, joinedload

from models.product import Product
from models.stock import StockMovement
from schemas.product import ProductDetail, ProductOut
from services.ledger import serialize_movement
from services.results import ErrorCode, ServiceResult, ValidationFailed, storage_guarded
from services.validation import validate_product, validate_product_patch
from utils.audit import write_log
from utils.invalidation import AFTER_PRODUCT_CHANGE

logger = logging.getLogger(__name__)

LOW_STOCK_FILTER = "low-stock"
RECENT_MOVEMENTS_LIMIT = 10


def serialize_product(product: Product) -> ProductOut:
    # Decimal price -> float happens in ProductOut
    return ProductOut.model_validate(product)


def _contains_pattern(text: str) -> str:
    # LIKE wildcards in the search text match literally
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def locked_product_stmt(product_id: str, company_id: str):
    """Owned product, row-locked until the end of the transaction."""
    return (
        select(Product)
        .where(Product.id == product_id, Product.company_id == company_id)
        .with_for_update()
    )


def _owned_product(db: Session, product_id: str, company_id: str) -> Optional[Product]:
    # A product of another company is indistinguishable from a missing one
    return (
        db.query(Product)
        .filter(Product.id == product_id, Product.company_id == company_id)
        .first()
    )


@storage_guarded("list_products", "Failed to load products")
def list_products(
    db: Session,
    company_id: str,
    *,
    search: Optional[str] = None,
    filter: Optional[str] = None,
) -> ServiceResult[List[ProductOut]]:
    query = db.query(Product).filter(Product.company_id == company_id)

    if search:
        like = _contains_pattern(search.strip())
        query = query.filter(or_(
            Product.name.ilike(like, escape="\\"),
            Product.sku.ilike(like, escape="\\"),
        ))
    if filter == LOW_STOCK_FILTER:
        query = query.filter(Product.current_stock < Product.min_stock)

    items = query.order_by(Product.created_at.desc()).all()
    return ServiceResult.success([serialize_product(p) for p in items])


@storage_guarded("get_product", "Failed to load product")
def get_product(db: Session, product_id: str, company_id: str) -> ServiceResult[ProductDetail]:
    product = _owned_product(db, product_id, company_id)
    if product is None:
        return ServiceResult.not_found("Product")

    recent = (
        db.query(StockMovement)
        .options(joinedload(StockMovement.user))
        .filter(StockMovement.product_id == product.id)
        .order_by(StockMovement.created_at.desc())
        .limit(RECENT_MOVEMENTS_LIMIT)
        .all()
    )
    detail = ProductDetail(
        **serialize_product(product).model_dump(),
        stock_movements=[serialize_movement(m) for m in recent],
    )
    return ServiceResult.success(detail)


@storage_guarded("create_product", "Failed to create product")
def create_product(db: Session, company_id: str, data: Any, *, user_id: Optional[str] = None) -> ServiceResult[ProductOut]:
    payload = validate_product(data)
    if isinstance(payload, ValidationFailed):
        return ServiceResult.invalid(payload)

    product = Product(company_id=company_id, **payload.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)

    out = serialize_product(product)
    write_log(db, user_id=user_id, company_id=company_id, action="PRODUCT_CREATE", resource="products",
              meta={"id": out.id, "sku": out.sku})
    return ServiceResult.success(out, invalidated=AFTER_PRODUCT_CHANGE)


@storage_guarded("update_product", "Failed to update product")
def update_product(db: Session, product_id: str, company_id: str, data: Any, *, user_id: Optional[str] = None) -> ServiceResult[ProductOut]:
    payload = validate_product_patch(data)
    if isinstance(payload, ValidationFailed):
        return ServiceResult.invalid(payload)

    product = _owned_product(db, product_id, company_id)
    if product is None:
        return ServiceResult.not_found("Product")

    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(product, key, value)
    db.commit()
    db.refresh(product)

    out = serialize_product(product)
    write_log(db, user_id=user_id, company_id=company_id, action="PRODUCT_UPDATE", resource="products",
              meta={"id": out.id, "fields": sorted(changes)})
    return ServiceResult.success(out, invalidated=AFTER_PRODUCT_CHANGE)


@storage_guarded("delete_product", "Failed to delete product")
def delete_product(db: Session, product_id: str, company_id: str, *, user_id: Optional[str] = None) -> ServiceResult[None]:
    """
    Hard-delete a product that has no stock movements.

    Products with movement history are kept so the ledger never points at
    a missing product. The row lock makes a concurrent movement wait until
    the delete has committed, and that movement then finds no product.
    """
    product = db.execute(locked_product_stmt(product_id, company_id)).scalar_one_or_none()
    if product is None:
        db.rollback()
        return ServiceResult.not_found("Product")

    pid, pname = product.id, product.name
    # The movement check is part of the DELETE itself, so a movement
    # committed after the row was read still blocks it
    stmt = (
        delete(Product)
        .where(Product.id == pid, ~exists().where(StockMovement.product_id == pid))
        .execution_options(synchronize_session=False)
    )
    if db.execute(stmt).rowcount == 0:
        db.rollback()
        logger.info("Refusing to delete product %s: it has stock movements", pid)
        return ServiceResult.failure(ErrorCode.CONFLICT, "Product has stock movements and cannot be deleted")
    db.expunge(product)
    db.commit()

    write_log(db, user_id=user_id, company_id=company_id, action="PRODUCT_DELETE", resource="products",
              meta={"id": pid, "name": pname})
    return ServiceResult.success(None, invalidated=AFTER_PRODUCT_CHANGE)
