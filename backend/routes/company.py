# backend/routes/company.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.company import CompanyOut
from services import company as company_service
from utils.responses import unwrap
from utils.tokenJWT import get_company_user, get_current_user

router = APIRouter(prefix="/company", tags=["Company"])


# Onboarding: create the company and attach the current user to it
@router.post("", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
def create_company(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = company_service.create_company(db, payload, user_id=current_user.id)
    return unwrap(result, response)


# Retrieve company details
@router.get("", response_model=CompanyOut)
def get_company(db: Session = Depends(get_db), current_user: User = Depends(get_company_user)):
    return unwrap(company_service.get_company(db, current_user.company_id))


# Update company details from the settings page
@router.patch("", response_model=CompanyOut)
def update_company(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_company_user),
):
    result = company_service.update_company(db, current_user.company_id, payload, user_id=current_user.id)
    return unwrap(result, response)
