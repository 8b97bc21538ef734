"""Bearer-token authentication.

Tokens carry the identity provider's user id in ``sub``. The local user row
is looked up by that id; it exists once the provider's webhook has synced
the account.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..errors import NotAuthenticatedError, NotFoundError
from ..models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    """Token payload data schema."""

    clerk_id: Optional[str] = None
    email: Optional[str] = None


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode; ``sub`` must be the external user id
        expires_delta: Optional custom expiration time delta

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[TokenData]:
    """
    Decode and validate a JWT access token.

    Returns:
        TokenData, or None if the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    clerk_id = payload.get("sub")
    if clerk_id is None:
        return None
    return TokenData(clerk_id=clerk_id, email=payload.get("email"))


async def get_user_by_clerk_id(db: AsyncSession, clerk_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.clerk_id == clerk_id))
    return result.scalar_one_or_none()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the caller from the Authorization header.

    Raises:
        NotAuthenticatedError: no token, or the token does not validate
        NotFoundError: the identity has no local user row yet
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError()

    token_data = decode_access_token(credentials.credentials)
    if token_data is None or token_data.clerk_id is None:
        raise NotAuthenticatedError()

    user = await get_user_by_clerk_id(db, token_data.clerk_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
