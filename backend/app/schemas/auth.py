from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from app.models.user import UserRole
from app.schemas.common import PageMeta


class UserRegister(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    is_active: bool
    profile_pic: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponse(Token):
    user: UserResponse


class UserUpdate(BaseModel):
    """Profile update; changing the password requires the current one"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=8, max_length=128)

    @model_validator(mode='after')
    def require_current_password(self):
        if self.new_password and not self.current_password:
            raise ValueError("Current password is required to set a new password")
        return self


class AdminUserResponse(UserResponse):
    failed_login_attempts: int = 0
    locked_until: Optional[datetime] = None
    last_login_ip: Optional[str] = None
    updated_at: Optional[datetime] = None


class AdminUserListResponse(PageMeta):
    items: List[AdminUserResponse]


class RoleUpdate(BaseModel):
    role: UserRole


# ============== Account self-service ==============

class EmailUpdate(BaseModel):
    """New sign-in email, confirmed with the current password"""
    new_email: EmailStr
    password: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)


class AccountDelete(BaseModel):
    password: str


class ProfilePictureResponse(BaseModel):
    success: bool = True
    message: str = "Profile picture uploaded successfully"
    profile_pic: str


class UserActivityResponse(BaseModel):
    action: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ============== Password reset ==============

class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    verification_code: str = Field(..., pattern=r"^\s*\d{6}\s*$")
    new_password: str = Field(..., min_length=8, max_length=128)
