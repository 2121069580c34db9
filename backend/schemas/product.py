from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List

from pydantic import Field, field_validator

from schemas.base import ORMBase, InputBase
from schemas.stock import StockMovementResponse


# products.price is Numeric(10, 2)
CENTS = Decimal("0.01")
MAX_PRICE = Decimal("99999999.99")


def _round_price(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is None:
        return None
    # Compare before quantizing, huge values overflow the decimal context
    if v > MAX_PRICE:
        raise ValueError("Price must not exceed 99999999.99")
    rounded = v.quantize(CENTS, rounding=ROUND_HALF_UP)
    if rounded <= 0:
        raise ValueError("Price must be at least 0.01")
    return rounded


# Schema for creating a new product
class ProductCreate(InputBase):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    sku: Optional[str] = Field(None, max_length=50)
    price: Optional[Decimal] = Field(None, gt=0)
    min_stock: int = Field(0, ge=0, strict=True)
    current_stock: int = Field(0, ge=0, strict=True)

    @field_validator("price")
    @classmethod
    def _price_to_cents(cls, v):
        return _round_price(v)


# Schema for partial product updates.
# No current_stock here: stock only moves through movements.
class ProductUpdate(InputBase):
    name: str = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    sku: Optional[str] = Field(None, max_length=50)
    price: Optional[Decimal] = Field(None, gt=0)
    min_stock: int = Field(None, ge=0, strict=True)

    @field_validator("price")
    @classmethod
    def _price_to_cents(cls, v):
        return _round_price(v)


class ProductOut(ORMBase):
    id: str
    company_id: str
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[float] = None
    min_stock: int
    current_stock: int
    created_at: datetime

    # Numeric columns come back as Decimal, clients get plain numbers
    @field_validator("price", mode="before")
    @classmethod
    def _decimal_to_float(cls, v):
        if v is None:
            return None
        return float(v)


class ProductDetail(ProductOut):
    stock_movements: List[StockMovementResponse] = []
