"""
Admin service catalog and quote request management.
"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import Service, ServiceCategory, ServiceQuote, ServiceStatus, QuoteStatus, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.service import (
    QuoteStatusUpdate,
    ServiceCreate,
    ServiceListResponse,
    ServiceQuoteListResponse,
    ServiceQuoteResponse,
    ServiceResponse,
    ServiceUpdate,
)
from app.services.cache_service import cache_service
from app.services.storage_service import FOLDER_SERVICES, storage_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


async def _get_service(db: AsyncSession, service_id: str) -> Service:
    service = await db.get(Service, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


async def _get_quote(db: AsyncSession, quote_id: str) -> ServiceQuote:
    quote = await db.get(ServiceQuote, quote_id)
    if not quote:
        raise HTTPException(status_code=404, detail="Quote request not found")
    return quote


# ============== Quote requests ==============

@router.get("/quotes", response_model=ServiceQuoteListResponse)
async def list_quotes(
    pagination: PaginationParams = Depends(pagination_params),
    quote_status: Optional[QuoteStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(ServiceQuote)
    if quote_status:
        query = query.where(ServiceQuote.status == quote_status)
    if search and search.strip():
        query = query.where(search_filter(
            search,
            ServiceQuote.customer_name,
            ServiceQuote.customer_email,
            ServiceQuote.service_name,
            ServiceQuote.company_name,
        ))
    query = query.order_by(ServiceQuote.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ServiceQuoteResponse.model_validate
    )


@router.get("/quotes/stats")
async def quote_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Quote counts by status"""
    by_status = {s.value: 0 for s in QuoteStatus}
    result = await db.execute(
        select(ServiceQuote.status, func.count(ServiceQuote.id)).group_by(ServiceQuote.status)
    )
    for quote_status, count in result.all():
        by_status[quote_status.value] = count
    return {"total": sum(by_status.values()), "by_status": by_status}


@router.put("/quotes/{quote_id}", response_model=ServiceQuoteResponse)
async def update_quote_status(
    quote_id: str,
    update: QuoteStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    quote = await _get_quote(db, quote_id)
    quote.status = update.status
    if update.admin_notes is not None:
        quote.admin_notes = update.admin_notes
    await db.commit()
    await db.refresh(quote)
    logger.log_admin_action("update_status", "service_quote", quote.id, status=update.status.value)
    return quote


@router.delete("/quotes/{quote_id}", response_model=MessageResponse)
async def delete_quote(
    quote_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    quote = await _get_quote(db, quote_id)
    await db.delete(quote)
    await db.commit()
    logger.log_admin_action("delete", "service_quote", quote_id)
    return MessageResponse(message="Quote request deleted")


# ============== Services ==============

@router.get("", response_model=ServiceListResponse)
async def list_all_services(
    pagination: PaginationParams = Depends(pagination_params),
    service_status: Optional[ServiceStatus] = Query(None, alias="status"),
    category: Optional[ServiceCategory] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Every service regardless of status"""
    query = select(Service)
    if service_status:
        query = query.where(Service.status == service_status)
    if category:
        query = query.where(Service.category == category)
    if search and search.strip():
        query = query.where(search_filter(search, Service.title, Service.description))
    query = query.order_by(Service.order, Service.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ServiceResponse.model_validate
    )


@router.get("/stats")
async def service_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Counts by status and category plus total views and inquiries"""
    by_status = {s.value: 0 for s in ServiceStatus}
    for service_status, count in (await db.execute(
        select(Service.status, func.count(Service.id)).group_by(Service.status)
    )).all():
        by_status[service_status.value] = count

    by_category = {
        category.value: count
        for category, count in (await db.execute(
            select(Service.category, func.count(Service.id)).group_by(Service.category)
        )).all()
    }
    totals = (await db.execute(
        select(
            func.coalesce(func.sum(Service.views), 0),
            func.coalesce(func.sum(Service.inquiries), 0),
            func.count(Service.id).filter(Service.featured.is_(True)),
        )
    )).one()

    return {
        "total": sum(by_status.values()),
        "by_status": by_status,
        "by_category": by_category,
        "featured": totals[2] or 0,
        "total_views": int(totals[0] or 0),
        "total_inquiries": int(totals[1] or 0),
    }


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    service_data: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    service = Service(**service_data.model_dump(), created_by=current_admin.id)
    db.add(service)
    await db.commit()
    await db.refresh(service)
    cache_service.invalidate_services()
    logger.log_admin_action("create", "service", service.id, admin_id=current_admin.id)
    return service


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await _get_service(db, service_id)


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: str,
    update: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    service = await _get_service(db, service_id)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(service, field, value)
    await db.commit()
    await db.refresh(service)
    cache_service.invalidate_services()
    logger.log_admin_action("update", "service", service.id, admin_id=current_admin.id)
    return service


@router.post("/{service_id}/image", response_model=ServiceResponse)
async def upload_service_image(
    service_id: str,
    image: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Set or replace the service image"""
    service = await _get_service(db, service_id)
    stored = await storage_service.replace(image, FOLDER_SERVICES, service.image, prefix="service")
    service.image = stored.url
    await db.commit()
    await db.refresh(service)
    cache_service.invalidate_services()
    return service


@router.patch("/{service_id}/featured", response_model=ServiceResponse)
async def toggle_featured(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    service = await _get_service(db, service_id)
    service.featured = not service.featured
    await db.commit()
    await db.refresh(service)
    cache_service.invalidate_services()
    return service


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Delete a service and its image"""
    service = await _get_service(db, service_id)
    image = service.image
    await db.delete(service)
    await db.commit()
    await storage_service.delete(FOLDER_SERVICES, image)
    cache_service.invalidate_services()
    logger.log_admin_action("delete", "service", service_id, admin_id=current_admin.id)
    return MessageResponse(message="Service deleted successfully")
