from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, Index
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, LowerCaseString, generate_uuid, sql_enum


class UserRole(str, enum.Enum):
    """User roles"""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """Registered account (site visitors and administrators)"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    email = Column(LowerCaseString, unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    profile_pic = Column(String(500), nullable=True)

    role = Column(sql_enum(UserRole), default=UserRole.USER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Brute force protection
    failed_login_attempts = Column(Integer, default=0, nullable=False)
    locked_until = Column(DateTime, nullable=True)

    # Password reset (SHA-256 of the emailed code)
    password_reset_token = Column(String(64), nullable=True)
    password_reset_expires = Column(DateTime, nullable=True)
    password_changed_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)
    last_login_ip = Column(String(64), nullable=True)

    def __repr__(self):
        return f"<User {self.email}>"

    @property
    def is_locked(self) -> bool:
        return self.locked_until is not None and self.locked_until > datetime.utcnow()

    @property
    def lock_minutes_remaining(self) -> int:
        if not self.is_locked:
            return 0
        seconds = (self.locked_until - datetime.utcnow()).total_seconds()
        return max(1, int(seconds // 60) + (1 if seconds % 60 else 0))

    @property
    def has_valid_reset_code(self) -> bool:
        return (
            self.password_reset_token is not None
            and self.password_reset_expires is not None
            and self.password_reset_expires > datetime.utcnow()
        )


class UserActivity(Base):
    """Account history shown on the user's settings page"""
    __tablename__ = "user_activities"

    __table_args__ = (
        Index('ix_user_activities_user_created', 'user_id', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    action = Column(String(200), nullable=False)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UserActivity {self.action}>"
