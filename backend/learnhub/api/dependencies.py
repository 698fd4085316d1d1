# backend/learnhub/api/dependencies.py
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from learnhub.core.constants import UserRole
from learnhub.core.security import decode_token, InvalidTokenError
from learnhub.db.database import get_db
from learnhub.db.models.profile import Profile
from learnhub.db.repositories.company_repository import ProfileRepository
from learnhub.services.ezee_payments_service import EzeePaymentsService

security = HTTPBearer(auto_error=False)


async def get_current_profile(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Profile:
    """Get the authenticated caller's profile"""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )

    try:
        payload = decode_token(credentials.credentials)
        profile_id = uuid.UUID(str(payload.get("sub")))
    except (InvalidTokenError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials"
        )

    profile = await ProfileRepository(db).get(profile_id)

    if not profile or not profile.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile not found or inactive"
        )

    request.state.profile = profile
    return profile


def require_role(*allowed_roles: UserRole):
    """Dependency to check the caller's role"""
    allowed = {UserRole(role).value for role in allowed_roles}

    async def role_checker(current_profile: Profile = Depends(get_current_profile)) -> Profile:
        if current_profile.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires one of: {', '.join(sorted(allowed))}"
            )
        return current_profile

    return role_checker


async def get_company_admin(
    current_profile: Profile = Depends(require_role(UserRole.COMPANY_ADMIN)),
) -> Profile:
    """Company admins must belong to a company to act for it"""
    if current_profile.company_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Profile is not attached to a company"
        )
    return current_profile


def get_payment_gateway() -> EzeePaymentsService:
    """Gateway client; overridden in tests"""
    return EzeePaymentsService()
