# backend/learnhub/db/models/course.py
from sqlalchemy import Column, String, Boolean, Uuid
import uuid
from learnhub.db.base import BaseModel


class Course(BaseModel):
    """Catalogue course; content and publishing live elsewhere"""
    __tablename__ = "courses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    title = Column(String(500), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
