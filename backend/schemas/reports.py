# schemas/reports.py
from typing import List, Optional
from pydantic import BaseModel

from schemas.base import ORMBase
from schemas.stock import StockMovementResponse


# Schemas for low stock alerting
class LowStockItem(ORMBase):
    id: str
    name: str
    sku: Optional[str] = None
    current_stock: int
    min_stock: int

class LowStockCount(BaseModel):
    count: int

# Schemas for the dashboard
class DashboardStats(BaseModel):
    total_products: int
    total_movements: int
    low_stock_count: int

class DashboardData(BaseModel):
    stats: DashboardStats
    recent_movements: List[StockMovementResponse]
    low_stock_products: List[LowStockItem]

class MonthlyMovements(BaseModel):
    month: str
    total: int
