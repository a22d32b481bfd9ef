"""
Admin Dashboard endpoints - counts, system health and cache control.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import time

from app.core.config import settings
from app.core.database import get_db, check_db_connection
from app.core.logging_config import logger
from app.models import (
    User, Contact, ContactStatus, NewsletterSubscriber, Service, Project, Product,
    Partner, PartnershipRequest, PartnershipRequestStatus, Nomination, NominationStatus,
    Certificate, ServiceQuote, QuoteStatus, ProductInquiry, InquiryStatus,
)
from app.modules.auth.dependencies import get_current_admin
from app.schemas.admin import DashboardStats, SystemHealth
from app.schemas.common import MessageResponse
from app.schemas.site import ContactResponse
from app.services.cache_service import cache_service

router = APIRouter()


async def _count(db: AsyncSession, column, *conditions) -> int:
    query = select(func.count(column))
    if conditions:
        query = query.where(*conditions)
    return await db.scalar(query) or 0


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Get dashboard KPI statistics"""
    recent = await db.execute(
        select(Contact).order_by(Contact.created_at.desc()).limit(5)
    )

    return DashboardStats(
        users=await _count(db, User.id),
        contacts=await _count(db, Contact.id),
        pending_contacts=await _count(db, Contact.id, Contact.status == ContactStatus.PENDING),
        active_subscribers=await _count(db, NewsletterSubscriber.id, NewsletterSubscriber.is_active.is_(True)),
        services=await _count(db, Service.id),
        projects=await _count(db, Project.id),
        products=await _count(db, Product.id),
        partners=await _count(db, Partner.id),
        partnership_requests=await _count(db, PartnershipRequest.id),
        pending_partnership_requests=await _count(
            db, PartnershipRequest.id, PartnershipRequest.status == PartnershipRequestStatus.PENDING
        ),
        nominations=await _count(db, Nomination.id),
        pending_nominations=await _count(db, Nomination.id, Nomination.status == NominationStatus.PENDING),
        certificates=await _count(db, Certificate.id),
        new_quotes=await _count(db, ServiceQuote.id, ServiceQuote.status == QuoteStatus.NEW),
        new_inquiries=await _count(db, ProductInquiry.id, ProductInquiry.status == InquiryStatus.NEW),
        recent_contacts=[ContactResponse.model_validate(c) for c in recent.scalars().all()],
    )


@router.get("/system/health", response_model=SystemHealth)
async def get_system_health(
    request: Request,
    current_admin: User = Depends(get_current_admin)
):
    database_ok = await check_db_connection()
    started_at = getattr(request.app.state, "started_at", None) or time.time()
    return SystemHealth(
        status="healthy" if database_ok else "degraded",
        database=database_ok,
        cache=cache_service.stats(),
        uptime_seconds=round(time.time() - started_at, 2),
        environment=settings.ENVIRONMENT,
        version=settings.APP_VERSION,
    )


@router.get("/cache/stats")
async def get_cache_stats(current_admin: User = Depends(get_current_admin)):
    return cache_service.stats()


@router.delete("/cache", response_model=MessageResponse)
async def clear_cache(current_admin: User = Depends(get_current_admin)):
    """Drop every cached listing"""
    cache_service.clear()
    logger.log_admin_action("clear", "cache", admin_id=current_admin.id)
    return MessageResponse(message="Cache cleared")
