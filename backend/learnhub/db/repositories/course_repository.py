# backend/learnhub/db/repositories/course_repository.py
from typing import List, Tuple, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.db.models.course import Course
from learnhub.db.models.pricing import CoursePricing
from learnhub.db.repositories.base import BaseRepository


class CourseRepository(BaseRepository[Course]):
    """Repository for Course operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(Course, session)

    async def list_with_pricing(self) -> List[Tuple[Course, Optional[CoursePricing]]]:
        """All courses ordered by title, each with its default pricing row if one exists"""
        result = await self.session.execute(
            select(Course, CoursePricing)
            .outerjoin(CoursePricing, CoursePricing.course_id == Course.id)
            .order_by(Course.title)
        )
        return [(course, pricing) for course, pricing in result.all()]
