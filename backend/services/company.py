"""Company onboarding and settings."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from models.company import Company
from models.users import User
from schemas.company import CompanyOut
from services.results import ErrorCode, ServiceResult, ValidationFailed, storage_guarded
from services.validation import validate_company
from utils.audit import write_log
from utils.invalidation import AFTER_COMPANY_CHANGE

logger = logging.getLogger(__name__)


@storage_guarded("create_company", "Failed to create company. Please try again.")
def create_company(db: Session, data: Any, *, user_id: str) -> ServiceResult[CompanyOut]:
    """Create the user's company and link the user to it in one transaction."""
    payload = validate_company(data)
    if isinstance(payload, ValidationFailed):
        return ServiceResult.invalid(payload)

    user = db.get(User, user_id)
    if user is None:
        return ServiceResult.not_found("User")
    if user.company_id is not None:
        return ServiceResult.failure(ErrorCode.CONFLICT, "User already belongs to a company")

    company = Company(**payload.model_dump())
    db.add(company)
    db.flush()
    user.company_id = company.id
    db.commit()
    db.refresh(company)

    logger.info("Company %s created by user %s", company.id, user_id)
    write_log(db, user_id=user_id, company_id=company.id, action="COMPANY_CREATE", resource="company",
              meta={"company_id": company.id})
    return ServiceResult.success(CompanyOut.model_validate(company), invalidated=AFTER_COMPANY_CHANGE)


@storage_guarded("update_company", "Failed to update company. Please try again.")
def update_company(db: Session, company_id: str, data: Any, *, user_id: Optional[str] = None) -> ServiceResult[CompanyOut]:
    payload = validate_company(data, partial=True)
    if isinstance(payload, ValidationFailed):
        return ServiceResult.invalid(payload)

    company = db.get(Company, company_id)
    if company is None:
        return ServiceResult.not_found("Company")

    # Update fields if provided in the payload
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(company, key, value)
    db.commit()
    db.refresh(company)

    write_log(db, user_id=user_id, company_id=company.id, action="COMPANY_UPDATE", resource="company",
              meta={"company_id": company.id})
    return ServiceResult.success(CompanyOut.model_validate(company), invalidated=AFTER_COMPANY_CHANGE)


@storage_guarded("get_company", "Failed to load company")
def get_company(db: Session, company_id: str) -> ServiceResult[CompanyOut]:
    company = db.get(Company, company_id)
    if company is None:
        return ServiceResult.not_found("Company")
    return ServiceResult.success(CompanyOut.model_validate(company))
