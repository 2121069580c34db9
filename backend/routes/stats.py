# backend/routes/stats.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.reports import DashboardData, MonthlyMovements
from services import stats
from utils.responses import unwrap
from utils.tokenJWT import get_company_user

router = APIRouter(
    prefix="/stats",
    tags=["Stats"]
)


# === Endpoint 1: Dashboard Summary ===

@router.get("/summary", response_model=DashboardData)
def get_stats_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user)
):
    return unwrap(stats.get_dashboard_data(db, current_user.company_id))


# === Endpoint 2: Chart Data ===

@router.get("/monthly-movements", response_model=List[MonthlyMovements])
def get_monthly_movements(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user)
):
    return unwrap(stats.get_monthly_movements(db, current_user.company_id))
