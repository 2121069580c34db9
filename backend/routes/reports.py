# routes/reports.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.reports import LowStockCount, LowStockItem
from services import stats
from utils.responses import unwrap
from utils.tokenJWT import get_company_user

router = APIRouter(prefix="/reports", tags=["Reports"])


# Products strictly below their minimum stock
@router.get("/low-stock", response_model=List[LowStockItem])
def report_low_stock(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    return unwrap(stats.get_low_stock_products(db, current_user.company_id))


# Badge counter for the sidebar
@router.get("/low-stock/count", response_model=LowStockCount)
def report_low_stock_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    return LowStockCount(count=unwrap(stats.get_low_stock_count(db, current_user.company_id)))
