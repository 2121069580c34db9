# backend/models/users.py
import uuid
from sqlalchemy import Column, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from database import Base
from utils.clock import utcnow

# Local mirror of a principal authenticated by the external identity provider
class User(Base):
    __tablename__ = "users"

    # Generated locally, never the provider's id
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    # Provider subject id, used when the email changed on the provider side
    external_id = Column(String, unique=True, nullable=True, index=True)
    company_id = Column(String(36), ForeignKey("company.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    company = relationship("Company", back_populates="users")
