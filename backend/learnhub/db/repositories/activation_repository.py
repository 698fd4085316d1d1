# backend/learnhub/db/repositories/activation_repository.py
from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.constants import ActivationStatus
from learnhub.db.models.activation import CourseActivation
from learnhub.db.repositories.base import BaseRepository


class ActivationRepository(BaseRepository[CourseActivation]):
    """Repository for CourseActivation operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(CourseActivation, session)

    async def get_latest(self, company_id: UUID, course_id: UUID) -> Optional[CourseActivation]:
        """The company's most recently expiring activation of a course"""
        result = await self.session.execute(
            select(CourseActivation)
            .where(
                and_(
                    CourseActivation.company_id == company_id,
                    CourseActivation.course_id == course_id,
                )
            )
            .order_by(CourseActivation.expires_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_live(self, company_id: UUID, course_id: UUID, now: datetime) -> Optional[CourseActivation]:
        """An active activation that has not yet expired"""
        result = await self.session.execute(
            select(CourseActivation)
            .where(
                and_(
                    CourseActivation.company_id == company_id,
                    CourseActivation.course_id == course_id,
                    CourseActivation.status == ActivationStatus.ACTIVE.value,
                    CourseActivation.expires_at >= now,
                )
            )
            .order_by(CourseActivation.expires_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
