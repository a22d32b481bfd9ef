"""
Admin newsletter subscriber management.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import datetime, timedelta
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import NewsletterSubscriber, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.site import NewsletterStats, SubscriberListResponse, SubscriberResponse
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import contains

router = APIRouter()

RECENT_DAYS = 30


@router.get("", response_model=SubscriberListResponse)
async def list_subscribers(
    pagination: PaginationParams = Depends(pagination_params),
    is_active: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(NewsletterSubscriber)
    if is_active is not None:
        query = query.where(NewsletterSubscriber.is_active.is_(is_active))
    if search and search.strip():
        query = query.where(contains(NewsletterSubscriber.email, search))
    query = query.order_by(NewsletterSubscriber.subscribed_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=SubscriberResponse.model_validate
    )


@router.get("/stats", response_model=NewsletterStats)
async def subscriber_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Totals plus subscriptions in the last 30 days"""
    total = await db.scalar(select(func.count(NewsletterSubscriber.id))) or 0
    active = await db.scalar(
        select(func.count(NewsletterSubscriber.id)).where(NewsletterSubscriber.is_active.is_(True))
    ) or 0
    recent = await db.scalar(
        select(func.count(NewsletterSubscriber.id)).where(
            NewsletterSubscriber.subscribed_at >= datetime.utcnow() - timedelta(days=RECENT_DAYS)
        )
    ) or 0
    return NewsletterStats(total=total, active=active, inactive=total - active, recent=recent)


@router.delete("/{subscriber_id}", response_model=MessageResponse)
async def delete_subscriber(
    subscriber_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    subscriber = await db.get(NewsletterSubscriber, subscriber_id)
    if not subscriber:
        raise HTTPException(status_code=404, detail="Subscriber not found")
    await db.delete(subscriber)
    await db.commit()
    logger.log_admin_action("delete", "newsletter_subscriber", subscriber_id)
    return MessageResponse(message="Subscriber deleted")
