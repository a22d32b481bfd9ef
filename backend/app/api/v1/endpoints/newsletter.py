from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger
from app.core.rate_limiter import limiter
from app.models.newsletter import NewsletterSubscriber
from app.models.user import User
from app.modules.auth.dependencies import get_optional_current_user
from app.schemas.common import MessageResponse
from app.schemas.site import SubscribeRequest, SubscriptionResult, UnsubscribeRequest

router = APIRouter()


@router.post("/subscribe", response_model=SubscriptionResult, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.NEWSLETTER_RATE_LIMIT)
async def subscribe(
    request: Request,
    response: Response,
    payload: SubscribeRequest,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Subscribe an email.

    - new email: 201
    - already active: 200, unchanged
    - previously unsubscribed: 200, reactivated
    """
    email = payload.email or (current_user.email if current_user else None)
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")
    email = email.strip().lower()

    result = await db.execute(select(NewsletterSubscriber).where(NewsletterSubscriber.email == email))
    subscriber = result.scalar_one_or_none()

    if subscriber and subscriber.is_active:
        response.status_code = status.HTTP_200_OK
        return SubscriptionResult(message="You are already subscribed", subscriber=subscriber)

    if subscriber:
        subscriber.is_active = True
        subscriber.subscribed_at = datetime.utcnow()
        subscriber.unsubscribed_at = None
        subscriber.source = payload.source
        if current_user and not subscriber.user_id:
            subscriber.user_id = current_user.id
        await db.commit()
        await db.refresh(subscriber)
        response.status_code = status.HTTP_200_OK
        logger.info(f"[Newsletter] Resubscribed {email}")
        return SubscriptionResult(message="Welcome back! Your subscription has been reactivated", subscriber=subscriber)

    subscriber = NewsletterSubscriber(
        email=email,
        source=payload.source,
        user_id=current_user.id if current_user else None,
    )
    db.add(subscriber)
    await db.commit()
    await db.refresh(subscriber)
    logger.info(f"[Newsletter] New subscriber {email}")
    return SubscriptionResult(message="Successfully subscribed to the newsletter", subscriber=subscriber)


@router.post("/unsubscribe", response_model=MessageResponse)
@limiter.limit(settings.NEWSLETTER_RATE_LIMIT)
async def unsubscribe(
    request: Request,
    payload: UnsubscribeRequest,
    db: AsyncSession = Depends(get_db)
):
    email = payload.email.strip().lower()
    result = await db.execute(select(NewsletterSubscriber).where(NewsletterSubscriber.email == email))
    subscriber = result.scalar_one_or_none()
    if not subscriber:
        raise HTTPException(status_code=404, detail="Email not found in our newsletter list")

    if subscriber.is_active:
        subscriber.is_active = False
        subscriber.unsubscribed_at = datetime.utcnow()
        await db.commit()
        logger.info(f"[Newsletter] Unsubscribed {email}")

    return MessageResponse(message="You have been unsubscribed from the newsletter")
