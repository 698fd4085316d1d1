# backend/learnhub/services/access.py
from typing import Optional
from uuid import UUID

from learnhub.core.constants import UserRole
from learnhub.core.exceptions import PermissionDeniedError
from learnhub.db.models.profile import Profile


def is_super_admin(profile: Profile) -> bool:
    return profile.role == UserRole.SUPER_ADMIN.value


def ensure_company_access(profile: Profile, company_id: Optional[UUID]) -> None:
    """Members act on their own company only; super admins act on any"""
    if is_super_admin(profile):
        return
    if profile.company_id is None or profile.company_id != company_id:
        raise PermissionDeniedError("Forbidden")
