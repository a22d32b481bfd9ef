"""
Account Service - self-service account changes and password reset

Every change a user makes to their own account is appended to their
activity history. Reset codes are six digits, stored only as SHA-256
digests, and expire after PASSWORD_RESET_CODE_MINUTES.
"""

import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError, ValidationError
from app.core.logging_config import logger
from app.core.security import (
    generate_reset_code,
    get_password_hash,
    hash_reset_code,
    verify_password,
)
from app.models.user import User, UserActivity, UserRole
from app.services.storage_service import FOLDER_PROFILE_PICS, StorageService, storage_service

ACTIVITY_LIMIT = 20
USER_AGENT_MAX = 500


class AccountService:
    """Changes a signed-in user makes to their own account"""

    def __init__(self, storage: StorageService = storage_service):
        self.storage = storage

    async def record_activity(
        self,
        db: AsyncSession,
        user: User,
        action: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> UserActivity:
        activity = UserActivity(
            user_id=user.id,
            action=action,
            ip_address=ip_address,
            user_agent=(user_agent or "")[:USER_AGENT_MAX] or None,
        )
        db.add(activity)
        return activity

    async def recent_activity(self, db: AsyncSession, user: User, limit: int = ACTIVITY_LIMIT) -> List[UserActivity]:
        result = await db.execute(
            select(UserActivity)
            .where(UserActivity.user_id == user.id)
            .order_by(UserActivity.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    def _confirm_password(user: User, password: str) -> None:
        if not verify_password(password, user.hashed_password):
            raise ValidationError("Password is incorrect", field="password")

    async def change_email(self, db: AsyncSession, user: User, new_email: str, password: str) -> User:
        """Move the account to a new email; 409 when another account uses it"""
        self._confirm_password(user, password)
        new_email = new_email.strip().lower()
        if new_email == user.email:
            return user

        taken = await db.scalar(select(User.id).where(User.email == new_email, User.id != user.id))
        if taken:
            raise ConflictError("Email already in use", field="new_email")

        old_email = user.email
        user.email = new_email
        logger.log_auth_event(event="email_change", success=True, user_email=new_email, previous_email=old_email)
        return user

    async def change_password(self, db: AsyncSession, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect", field="current_password")
        user.hashed_password = get_password_hash(new_password)
        user.password_changed_at = datetime.utcnow()
        logger.log_auth_event(event="password_change", success=True, user_email=user.email)

    async def set_profile_picture(self, user: User, file: UploadFile) -> str:
        """Store a new picture and remove the previous one"""
        stored = await self.storage.replace(file, FOLDER_PROFILE_PICS, user.profile_pic, prefix="profile")
        user.profile_pic = stored.url
        return stored.url

    async def delete_account(self, db: AsyncSession, user: User, password: str) -> None:
        """Delete the user, their activity history and their profile picture"""
        self._confirm_password(user, password)
        if user.role == UserRole.ADMIN:
            raise ValidationError("Administrators cannot delete their own account")

        picture = user.profile_pic
        email = user.email
        await db.execute(delete(UserActivity).where(UserActivity.user_id == user.id))
        await db.delete(user)
        await db.commit()
        if picture:
            await self.storage.delete(FOLDER_PROFILE_PICS, picture)
        logger.log_auth_event(event="account_delete", success=True, user_email=email)

    # ========== Password reset ==========

    async def _active_user(self, db: AsyncSession, email: str) -> Optional[User]:
        user = await db.scalar(select(User).where(User.email == email.strip().lower()))
        if user is None or not user.is_active:
            return None
        return user

    async def issue_reset_code(self, db: AsyncSession, email: str) -> Optional[str]:
        """
        Store a fresh reset code for the account and return it for delivery.

        Returns None when no active account uses the email; callers answer
        the same way in both cases.
        """
        user = await self._active_user(db, email)
        if user is None:
            logger.log_auth_event(event="password_reset_request", success=False, user_email=email,
                                  reason="Unknown email")
            return None

        code = generate_reset_code()
        user.password_reset_token = hash_reset_code(code)
        user.password_reset_expires = datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_CODE_MINUTES)
        await db.commit()
        logger.log_auth_event(event="password_reset_request", success=True, user_email=user.email)
        return code

    async def reset_password(self, db: AsyncSession, email: str, code: str, new_password: str) -> User:
        """Consume a reset code and set the new password; 400 when the code is wrong or expired"""
        user = await self._active_user(db, email)
        if (
            user is None
            or not user.has_valid_reset_code
            or not secrets.compare_digest(user.password_reset_token, hash_reset_code(code))
        ):
            logger.log_auth_event(event="password_reset", success=False, user_email=email,
                                  reason="Invalid or expired code")
            raise ValidationError("Invalid or expired verification code", field="verification_code")

        user.hashed_password = get_password_hash(new_password)
        user.password_reset_token = None
        user.password_reset_expires = None
        user.password_changed_at = datetime.utcnow()
        user.failed_login_attempts = 0
        user.locked_until = None
        logger.log_auth_event(event="password_reset", success=True, user_email=user.email)
        return user


account_service = AccountService()
