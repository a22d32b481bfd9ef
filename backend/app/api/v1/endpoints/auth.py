from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime, timedelta

from app.core.database import get_db
from app.core.config import settings
from app.core.exceptions import AccountLockedError, ConflictError
from app.core.security import (
    verify_password,
    get_password_hash,
    create_token_pair,
    decode_token
)
from app.core.logging_config import logger, set_user_id
from app.core.middleware import get_client_ip
from app.core.rate_limiter import limiter
from app.models.user import User
from app.schemas.auth import (
    UserRegister,
    UserLogin,
    RefreshTokenRequest,
    Token,
    LoginResponse,
    UserResponse,
    UserUpdate,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from app.schemas.common import MessageResponse
from app.modules.auth.dependencies import get_current_user
from app.services.account_service import account_service

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register(
    request: Request,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register new user"""
    client_ip = get_client_ip(request)

    result = await db.execute(
        select(User).where(User.email == user_data.email.lower())
    )
    if result.scalar_one_or_none():
        logger.log_auth_event(
            event="register",
            success=False,
            user_email=user_data.email,
            reason="Email already registered",
            client_ip=client_ip
        )
        raise ConflictError("Email already registered", field="email")

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.log_auth_event(
        event="register",
        success=True,
        user_email=user.email,
        client_ip=client_ip
    )
    return user


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Login with email and password.

    Every failed attempt is counted; MAX_LOGIN_ATTEMPTS failures lock
    the account for ACCOUNT_LOCK_MINUTES (423 until the lock expires).
    """
    client_ip = get_client_ip(request)

    result = await db.execute(
        select(User).where(User.email == credentials.email.lower())
    )
    user = result.scalar_one_or_none()

    if user and user.is_locked:
        logger.log_auth_event(
            event="login",
            success=False,
            user_email=credentials.email,
            reason="Account locked",
            client_ip=client_ip
        )
        raise AccountLockedError(user.lock_minutes_remaining)

    if not user or not verify_password(credentials.password, user.hashed_password):
        if user:
            user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
            locked = user.failed_login_attempts >= settings.MAX_LOGIN_ATTEMPTS
            if locked:
                user.locked_until = datetime.utcnow() + timedelta(minutes=settings.ACCOUNT_LOCK_MINUTES)
                user.failed_login_attempts = 0
            await db.commit()
            if locked:
                logger.log_auth_event(
                    event="login",
                    success=False,
                    user_email=credentials.email,
                    reason="Too many failed attempts, account locked",
                    client_ip=client_ip
                )
                raise AccountLockedError(settings.ACCOUNT_LOCK_MINUTES)

        logger.log_auth_event(
            event="login",
            success=False,
            user_email=credentials.email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    if not user.is_active:
        logger.log_auth_event(
            event="login",
            success=False,
            user_email=credentials.email,
            reason="Account inactive",
            client_ip=client_ip
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    user.failed_login_attempts = 0
    user.locked_until = None
    user.last_login = datetime.utcnow()
    user.last_login_ip = client_ip
    await db.commit()

    set_user_id(str(user.id))
    logger.log_auth_event(
        event="login",
        success=True,
        user_email=user.email,
        client_ip=client_ip,
        user_role=user.role.value
    )

    return {**create_token_pair(user), "user": UserResponse.model_validate(user)}


@router.post("/refresh", response_model=Token)
async def refresh_token(
    payload: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange a refresh token for a new token pair"""
    token_data = decode_token(payload.refresh_token)

    if token_data.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type"
        )

    result = await db.execute(select(User).where(User.id == token_data.get("sub")))
    user = result.scalar_one_or_none()

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )

    return create_token_pair(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info"""
    return current_user


@router.put("/me", response_model=UserResponse)
async def update_me(
    update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update name and/or password"""
    if update.name is not None:
        current_user.name = update.name.strip()

    if update.new_password:
        if not verify_password(update.current_password, current_user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect"
            )
        current_user.hashed_password = get_password_hash(update.new_password)
        logger.log_auth_event(event="password_change", success=True, user_email=current_user.email)

    await db.commit()
    await db.refresh(current_user)
    return current_user


RESET_REQUESTED_MESSAGE = "If an account exists for this email, a verification code has been sent"


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Issue a six-digit reset code.

    The answer is the same whether or not the email is registered.
    """
    await account_service.issue_reset_code(db, payload.email)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/resend-reset-code", response_model=MessageResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def resend_reset_code(
    request: Request,
    payload: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    """Replace any outstanding reset code with a fresh one"""
    await account_service.issue_reset_code(db, payload.email)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def reset_password(
    request: Request,
    payload: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    """Set a new password with a valid reset code; the code is single use"""
    user = await account_service.reset_password(
        db, payload.email, payload.verification_code, payload.new_password
    )
    await account_service.record_activity(
        db, user, "Password reset",
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    await db.commit()
    return MessageResponse(message="Password has been reset successfully")
