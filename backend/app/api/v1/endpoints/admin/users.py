"""
Admin User Management endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import User, UserRole
from app.modules.auth.dependencies import get_current_admin
from app.schemas.auth import AdminUserListResponse, AdminUserResponse, RoleUpdate
from app.schemas.common import MessageResponse
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


async def _get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=AdminUserListResponse)
async def list_users(
    pagination: PaginationParams = Depends(pagination_params),
    search: Optional[str] = Query(None, max_length=100),
    role: Optional[UserRole] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """List users with search and role filter"""
    query = select(User)
    if search and search.strip():
        query = query.where(search_filter(search, User.email, User.name))
    if role:
        query = query.where(User.role == role)
    query = query.order_by(User.created_at.desc())

    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=AdminUserResponse.model_validate
    )


@router.put("/{user_id}/role", response_model=AdminUserResponse)
async def update_user_role(
    user_id: str,
    update: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    user = await _get_user(db, user_id)
    if user.id == current_admin.id and update.role != UserRole.ADMIN:
        raise HTTPException(status_code=400, detail="You cannot remove your own admin role")

    user.role = update.role
    await db.commit()
    await db.refresh(user)
    logger.log_admin_action("update_role", "user", user.id, role=update.role.value, admin_id=current_admin.id)
    return user


@router.post("/{user_id}/unlock", response_model=AdminUserResponse)
async def unlock_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Clear failed login attempts and any lock"""
    user = await _get_user(db, user_id)
    user.failed_login_attempts = 0
    user.locked_until = None
    await db.commit()
    await db.refresh(user)
    logger.log_admin_action("unlock", "user", user.id, admin_id=current_admin.id)
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    user = await _get_user(db, user_id)
    if user.id == current_admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    await db.delete(user)
    await db.commit()
    logger.log_admin_action("delete", "user", user_id, admin_id=current_admin.id)
    return MessageResponse(message="User deleted successfully")
