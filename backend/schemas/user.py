from datetime import datetime
from pydantic import BaseModel, EmailStr
from typing import Optional

from schemas.base import ORMBase
from schemas.company import CompanyOut


# Principal as asserted by the identity provider's token
class AuthPrincipal(BaseModel):
    id: str # Provider subject id
    email: EmailStr
    name: Optional[str] = None
    avatar_url: Optional[str] = None


# Output schema for user profile details
class UserResponse(ORMBase):
    id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    company_id: Optional[str] = None
    company: Optional[CompanyOut] = None
    created_at: datetime
