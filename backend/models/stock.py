# backend/models/stock.py
import enum
import uuid
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base
from utils.clock import utcnow

class MovementType(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"

# Append-only ledger entry; never updated or deleted
class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    type = Column(Enum(MovementType, name="movementtype"), nullable=False)
    # Always positive, the direction comes from type
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    reason = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    product = relationship("Product", back_populates="stock_movements")
    user = relationship("User")
