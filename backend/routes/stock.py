# backend/routes/stock.py
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from services import ledger
from utils.responses import unwrap
from utils.tokenJWT import get_company_user
import schemas.stock as stock_schemas

router = APIRouter(tags=["Stock"])


@router.get("/", response_model=List[stock_schemas.StockMovementResponse])
def list_movements(
    type: Optional[str] = Query(None, description="IN or OUT"),
    product_id: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD, inclusive"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    result = ledger.list_movements(
        db, current_user.company_id,
        type=type, product_id=product_id, start_date=start_date, end_date=end_date,
    )
    return unwrap(result)


@router.post("/movements", response_model=stock_schemas.StockMovementResponse, status_code=status.HTTP_201_CREATED)
def create_movement(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    result = ledger.post_movement(db, payload, user_id=current_user.id, company_id=current_user.company_id)
    return unwrap(result, response)
