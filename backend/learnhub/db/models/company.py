# backend/learnhub/db/models/company.py
from sqlalchemy import Column, String, Boolean, Uuid
from sqlalchemy.orm import relationship
import uuid
from learnhub.db.base import BaseModel


class Company(BaseModel):
    """Customer company; the tenant that buys course activations"""
    __tablename__ = "companies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    profiles = relationship("Profile", back_populates="company")
