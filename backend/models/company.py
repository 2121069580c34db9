import uuid
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from database import Base


# Tenant boundary: every product and user belongs to at most one company
class Company(Base):
    __tablename__ = "company"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    document = Column(String(20), nullable=True) # Tax / registration number
    phone = Column(String(20), nullable=True)
    address = Column(String(200), nullable=True)

    users = relationship("User", back_populates="company")
    products = relationship("Product", back_populates="company")
