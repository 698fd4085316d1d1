# backend/learnhub/core/security.py
"""Bearer token helpers.

Tokens are issued by the identity provider in front of the platform; this
module only needs to verify them, plus mint them for local tooling and tests.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import jwt, JWTError

from learnhub.core.config import settings


class InvalidTokenError(Exception):
    pass


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed access token"""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify and decode a token, raising InvalidTokenError on any failure"""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e
