"""
Bearer-token dependencies for the public and admin routers.
"""
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.database import get_db
from app.core.security import decode_token
from app.core.logging_config import set_user_id
from app.models.user import User, UserRole

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _user_from_access_token(token: str, db: AsyncSession) -> User:
    """Decode an access token and load its active user, or raise 401/403"""
    payload = decode_token(token)
    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    try:
        user_id = str(uuid.UUID(str(payload.get("sub"))))
    except ValueError:
        raise _unauthorized("Invalid token payload")

    user = await db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")
    return user


def _bind(request: Request, user: User) -> User:
    request.state.user_id = str(user.id)
    set_user_id(str(user.id))
    return user


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    return _bind(request, await _user_from_access_token(credentials.credentials, db))


async def get_optional_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """The signed-in user for public forms; a missing or bad token means anonymous"""
    if not credentials:
        return None
    try:
        user = await _user_from_access_token(credentials.credentials, db)
    except HTTPException:
        return None
    return _bind(request, user)


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
