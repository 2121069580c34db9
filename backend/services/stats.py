"""
Read-only views for the dashboard and the low-stock alerts.

The dashboard figures come from independent queries; they are advisory
and may be momentarily inconsistent with each other.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from models.product import Product
from models.stock import StockMovement
from schemas.reports import DashboardData, DashboardStats, LowStockItem, MonthlyMovements
from services.ledger import serialize_movement
from services.results import ServiceResult, storage_guarded
from utils.clock import as_utc, utcnow

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Trailing window for "recent" movements
RECENT_WINDOW_DAYS = 30
DASHBOARD_PREVIEW = 5
HISTOGRAM_MONTHS = 6


def _low_stock_query(db: Session, company_id: str):
    # Strictly below the minimum; a product sitting exactly at min_stock is fine
    return db.query(Product).filter(
        Product.company_id == company_id,
        Product.current_stock < Product.min_stock,
    )


def _movements_since(db: Session, company_id: str, since: datetime):
    return (
        db.query(StockMovement)
        .join(StockMovement.product)
        .filter(Product.company_id == company_id, StockMovement.created_at >= since)
    )


def _month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1, tzinfo=timezone.utc)


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


@storage_guarded("get_low_stock_products", "Failed to load low stock products")
def get_low_stock_products(db: Session, company_id: str) -> ServiceResult[List[LowStockItem]]:
    rows = (_low_stock_query(db, company_id)
            .order_by(Product.current_stock.asc(), Product.name.asc())
            .all())
    return ServiceResult.success([LowStockItem.model_validate(p) for p in rows])


@storage_guarded("get_low_stock_count", "Failed to count low stock products")
def get_low_stock_count(db: Session, company_id: str) -> ServiceResult[int]:
    return ServiceResult.success(_low_stock_query(db, company_id).count())


def _stats(db: Session, company_id: str, now: datetime) -> DashboardStats:
    since = now - timedelta(days=RECENT_WINDOW_DAYS)
    return DashboardStats(
        total_products=db.query(Product).filter(Product.company_id == company_id).count(),
        total_movements=_movements_since(db, company_id, since).count(),
        low_stock_count=_low_stock_query(db, company_id).count(),
    )


@storage_guarded("get_dashboard_stats", "Failed to load dashboard")
def get_dashboard_stats(db: Session, company_id: str, now: Optional[datetime] = None) -> ServiceResult[DashboardStats]:
    return ServiceResult.success(_stats(db, company_id, now or utcnow()))


@storage_guarded("get_dashboard_data", "Failed to load dashboard")
def get_dashboard_data(db: Session, company_id: str, now: Optional[datetime] = None) -> ServiceResult[DashboardData]:
    now = now or utcnow()
    since = now - timedelta(days=RECENT_WINDOW_DAYS)

    recent = (
        _movements_since(db, company_id, since)
        .options(joinedload(StockMovement.product), joinedload(StockMovement.user))
        .order_by(StockMovement.created_at.desc())
        .limit(DASHBOARD_PREVIEW)
        .all()
    )
    low_stock = (_low_stock_query(db, company_id)
                 .order_by(Product.current_stock.asc(), Product.name.asc())
                 .limit(DASHBOARD_PREVIEW)
                 .all())

    return ServiceResult.success(DashboardData(
        stats=_stats(db, company_id, now),
        recent_movements=[serialize_movement(m) for m in recent],
        low_stock_products=[LowStockItem.model_validate(p) for p in low_stock],
    ))


@storage_guarded("get_monthly_movements", "Failed to load movement history")
def get_monthly_movements(
    db: Session,
    company_id: str,
    now: Optional[datetime] = None,
    months: int = HISTOGRAM_MONTHS,
) -> ServiceResult[List[MonthlyMovements]]:
    """
    Movement counts per calendar month for the trailing ``months`` months,
    current (partial) month included, oldest first, zero-filled.
    """
    now = as_utc(now or utcnow())

    # Initialize every bucket so quiet months still show up
    buckets = {}
    for i in range(months - 1, -1, -1):
        buckets[_shift_month(now.year, now.month, -i)] = 0

    first_year, first_month = next(iter(buckets))
    rows = (
        _movements_since(db, company_id, _month_start(first_year, first_month))
        .with_entities(StockMovement.created_at)
        .all()
    )
    for (created_at,) in rows:
        ts = as_utc(created_at)
        key = (ts.year, ts.month)
        if key in buckets:
            buckets[key] += 1

    return ServiceResult.success([
        MonthlyMovements(month=MONTH_LABELS[month - 1], total=total)
        for (year, month), total in buckets.items()
    ])
