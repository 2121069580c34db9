# backend/models/product.py
import uuid
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base
from utils.clock import utcnow

# Tenant-scoped catalog item.
# current_stock is a rollup of the product's stock movements and is only
# changed by the ledger (services/ledger.py).
class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), ForeignKey("company.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    sku = Column(String(50), nullable=True, index=True) # Not unique

    price = Column(Numeric(10, 2), nullable=True)

    min_stock = Column(Integer, CheckConstraint("min_stock >= 0"), nullable=False, default=0)
    current_stock = Column(Integer, CheckConstraint("current_stock >= 0"), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    company = relationship("Company", back_populates="products")
    stock_movements = relationship("StockMovement", back_populates="product")
