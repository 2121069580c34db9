# backend/schemas/stock.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from models.stock import MovementType
from schemas.base import ORMBase, InputBase


# Schema for posting a new stock movement
class StockMovementCreate(InputBase):
    product_id: UUID
    type: MovementType
    quantity: int = Field(gt=0, strict=True)
    reason: Optional[str] = Field(None, max_length=200)


# Schema for returning stock movement details
class StockMovementResponse(ORMBase):
    id: str
    product_id: str
    user_id: str
    type: MovementType
    quantity: int
    reason: Optional[str] = None
    created_at: datetime

    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    user_name: Optional[str] = None
