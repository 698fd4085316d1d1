# backend/learnhub/db/repositories/company_repository.py
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.db.models.company import Company
from learnhub.db.models.profile import Profile
from learnhub.db.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    """Repository for Company operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(Company, session)


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(Profile, session)
