"""
Stock movement ledger.

A movement is an append-only record; ``Product.current_stock`` is the
rollup of a product's movements and is updated in the same transaction
that inserts the movement, so the two can never be observed out of step.

The stock change is applied by a single conditional UPDATE::

    UPDATE products SET current_stock = current_stock - :q
    WHERE id = :id AND current_stock >= :q

The database evaluates the guard against the latest committed stock
(after waiting for the row lock taken by ``SELECT ... FOR UPDATE``), so of
two concurrent OUT movements the second one is checked against the stock
left by the first, never against a stale read.
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session, contains_eager, joinedload

from models.product import Product
from models.stock import MovementType, StockMovement
from models.users import User
from schemas.stock import StockMovementResponse
from services.results import ErrorCode, ServiceResult, ValidationFailed, storage_guarded
from services.validation import validate_movement
from utils.audit import write_log
from utils.invalidation import AFTER_MOVEMENT

logger = logging.getLogger(__name__)


def serialize_movement(m: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=m.id,
        product_id=m.product_id,
        user_id=m.user_id,
        type=m.type,
        quantity=m.quantity,
        reason=m.reason,
        created_at=m.created_at,
        product_name=m.product.name if m.product else None,
        product_sku=m.product.sku if m.product else None,
        user_name=m.user.name if m.user else None,
    )


@storage_guarded("post_movement", "Failed to register movement")
def post_movement(db: Session, data: Any, *, user_id: str, company_id: str) -> ServiceResult[StockMovementResponse]:
    """
    Record an IN or OUT movement and adjust the product's stock.

    Both the acting user and the product must belong to ``company_id``;
    anything else is reported as not found. An OUT larger than the
    available stock is rejected with INSUFFICIENT_STOCK and leaves no trace.
    """
    payload = validate_movement(data)
    if isinstance(payload, ValidationFailed):
        return ServiceResult.invalid(payload)

    product_id = str(payload.product_id)
    qty = payload.quantity

    user = db.get(User, user_id)
    if user is None or user.company_id != company_id:
        logger.warning("Movement rejected: user %s is not a member of company %s", user_id, company_id)
        return ServiceResult.not_found("User")

    # Row lock on PostgreSQL; SQLite serialises writers on its own
    product = db.execute(
        select(Product)
        .where(Product.id == product_id, Product.company_id == company_id)
        .with_for_update()
    ).scalar_one_or_none()
    if product is None:
        db.rollback()
        return ServiceResult.not_found("Product")

    stmt = update(Product).where(Product.id == product_id)
    if payload.type == MovementType.OUT:
        stmt = stmt.where(Product.current_stock >= qty).values(current_stock=Product.current_stock - qty)
    else:
        stmt = stmt.values(current_stock=Product.current_stock + qty)
    applied = db.execute(stmt.execution_options(synchronize_session=False)).rowcount

    if applied == 0:
        available = db.execute(
            select(Product.current_stock).where(Product.id == product_id)
        ).scalar_one_or_none()
        db.rollback()
        if available is None:
            return ServiceResult.not_found("Product")
        logger.info("Insufficient stock for product %s: requested %s, available %s", product_id, qty, available)
        return ServiceResult.failure(
            ErrorCode.INSUFFICIENT_STOCK,
            f"Insufficient stock. Available: {available}",
            available=available,
        )

    movement = StockMovement(
        product_id=product_id,
        user_id=user_id,
        type=payload.type,
        quantity=qty,
        reason=payload.reason or None,
    )
    db.add(movement)
    db.commit()
    db.refresh(movement)

    out = serialize_movement(movement)
    logger.info("Posted %s movement %s of %s for product %s", out.type.value, out.id, qty, product_id)
    write_log(
        db, user_id=user_id, company_id=company_id, action="MOVEMENT_CREATE", resource="stock",
        meta={"id": out.id, "product_id": product_id, "type": out.type.value, "quantity": qty},
    )
    return ServiceResult.success(out, invalidated=AFTER_MOVEMENT)


@storage_guarded("list_movements", "Failed to load movements")
def list_movements(
    db: Session,
    company_id: str,
    *,
    type: Optional[str] = None,
    product_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ServiceResult[List[StockMovementResponse]]:
    """Movement history of one company, newest first. Both date bounds are inclusive."""
    query = (
        db.query(StockMovement)
        .join(StockMovement.product)
        .options(contains_eager(StockMovement.product), joinedload(StockMovement.user))
        .filter(Product.company_id == company_id)
    )

    if type:
        try:
            query = query.filter(StockMovement.type == MovementType(type.upper()))
        except ValueError:
            return ServiceResult.invalid(ValidationFailed(field="type", reason="Input should be 'IN' or 'OUT'"))
    if product_id:
        query = query.filter(StockMovement.product_id == product_id)
    if start_date:
        query = query.filter(StockMovement.created_at >= datetime.combine(start_date, time.min, tzinfo=timezone.utc))
    if end_date:
        query = query.filter(StockMovement.created_at <= datetime.combine(end_date, time.max, tzinfo=timezone.utc))

    rows = query.order_by(StockMovement.created_at.desc()).all()
    return ServiceResult.success([serialize_movement(m) for m in rows])
