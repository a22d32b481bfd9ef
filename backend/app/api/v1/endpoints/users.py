"""
Account self-service for signed-in users
"""
from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.middleware import get_client_ip
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.auth import (
    AccountDelete,
    EmailUpdate,
    PasswordChange,
    ProfilePictureResponse,
    UserActivityResponse,
    UserResponse,
)
from app.schemas.common import MessageResponse
from app.services.account_service import account_service

router = APIRouter()


async def _record(db: AsyncSession, request: Request, user: User, action: str) -> None:
    await account_service.record_activity(
        db, user, action,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/email", response_model=UserResponse)
async def update_email(
    request: Request,
    payload: EmailUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Change the sign-in email (current password required)"""
    previous = current_user.email
    user = await account_service.change_email(db, current_user, payload.new_email, payload.password)
    if user.email != previous:
        await _record(db, request, user, "Updated email address")
    await db.commit()
    await db.refresh(user)
    return user


@router.put("/password", response_model=MessageResponse)
async def update_password(
    request: Request,
    payload: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await account_service.change_password(db, current_user, payload.current_password, payload.new_password)
    await _record(db, request, current_user, "Password changed")
    await db.commit()
    return MessageResponse(message="Password updated successfully")


@router.post("/profile-pic", response_model=ProfilePictureResponse)
async def upload_profile_picture(
    request: Request,
    profile_pic: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Replace the profile picture; the previous file is deleted"""
    url = await account_service.set_profile_picture(current_user, profile_pic)
    await _record(db, request, current_user, "Updated profile picture")
    await db.commit()
    return ProfilePictureResponse(profile_pic=url)


@router.delete("/account", response_model=MessageResponse)
async def delete_account(
    payload: AccountDelete,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Permanently delete the signed-in account"""
    await account_service.delete_account(db, current_user, payload.password)
    return MessageResponse(message="Account deleted successfully")


@router.get("/activity", response_model=List[UserActivityResponse])
async def get_activity(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """The 20 most recent account events, newest first"""
    return await account_service.recent_activity(db, current_user)
