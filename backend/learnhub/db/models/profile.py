# backend/learnhub/db/models/profile.py
from sqlalchemy import Column, String, Boolean, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
import uuid
from learnhub.db.base import BaseModel


class Profile(BaseModel):
    """Platform user; identity lives with the auth provider, role lives here"""
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(
            "role IN ('super_admin', 'company_admin', 'user')",
            name="profiles_role_check",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)

    # Tenant relationship; super admins have no company
    company_id = Column(Uuid, ForeignKey("companies.id"), nullable=True, index=True)
    role = Column(String(50), default="user", nullable=False)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="profiles")
