from pydantic import Field
from typing import Optional

from schemas.base import ORMBase, InputBase


# Schema for company onboarding
class CompanyCreate(InputBase):
    name: str = Field(min_length=1, max_length=100)
    document: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=200)


# Schema for partial updates from the settings page
class CompanyUpdate(InputBase):
    name: str = Field(None, min_length=1, max_length=100)
    document: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=200)


# Schema for displaying company details
class CompanyOut(ORMBase):
    id: str
    name: str
    document: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
