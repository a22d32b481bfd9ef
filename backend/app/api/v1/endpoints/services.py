"""
Public service catalog and quote requests
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional, List

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger
from app.core.rate_limiter import limiter
from app.models.service import Service, ServiceCategory, ServiceQuote, ServiceStatus
from app.models.user import User
from app.modules.auth.dependencies import get_optional_current_user
from app.schemas.common import CategoryCount
from app.schemas.service import (
    ServiceListResponse,
    ServiceQuoteCreate,
    ServiceQuoteResponse,
    ServiceResponse,
)
from app.services.cache_service import cache_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


@router.get("", response_model=ServiceListResponse)
async def list_services(
    pagination: PaginationParams = Depends(pagination_params),
    category: Optional[ServiceCategory] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db)
):
    """Active services, featured first then by display order"""
    cache_key = cache_service.make_key("list", {
        "page": pagination.page,
        "page_size": pagination.page_size,
        "category": category.value if category else None,
        "featured": featured,
        "search": search,
    })
    cached = cache_service.get_services(cache_key)
    if cached is not None:
        return cached

    query = select(Service).where(Service.status == ServiceStatus.ACTIVE)
    if category:
        query = query.where(Service.category == category)
    if featured is not None:
        query = query.where(Service.featured.is_(featured))
    if search and search.strip():
        query = query.where(search_filter(search, Service.title, Service.description))
    query = query.order_by(Service.featured.desc(), Service.order, Service.created_at.desc())

    response = await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ServiceResponse.model_validate
    )
    cache_service.set_services(cache_key, response)
    return response


@router.get("/categories", response_model=List[CategoryCount])
async def list_service_categories(db: AsyncSession = Depends(get_db)):
    """Categories in use by active services with their counts"""
    result = await db.execute(
        select(Service.category, func.count(Service.id))
        .where(Service.status == ServiceStatus.ACTIVE)
        .group_by(Service.category)
        .order_by(Service.category)
    )
    return [CategoryCount(category=category.value, count=count) for category, count in result.all()]


@router.post("/quotes", response_model=ServiceQuoteResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.FORM_RATE_LIMIT)
async def request_quote(
    request: Request,
    quote_data: ServiceQuoteCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Submit a quote request for a catalog service or a free-text one"""
    service_name = (quote_data.service_name or "").strip()

    if quote_data.service_id:
        service = await db.get(Service, quote_data.service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        service_name = service.title
        service.inquiries = (service.inquiries or 0) + 1

    quote = ServiceQuote(
        **quote_data.model_dump(exclude={"service_name"}),
        service_name=service_name,
        user_id=current_user.id if current_user else None,
    )
    db.add(quote)
    await db.commit()
    await db.refresh(quote)

    logger.info(
        f"[Quotes] New quote request for {service_name} from {quote.customer_email}",
        extra={"quote_id": quote.id}
    )
    return quote


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get an active service and count the view"""
    service = await db.get(Service, service_id)
    if not service or service.status != ServiceStatus.ACTIVE:
        raise HTTPException(status_code=404, detail="Service not found")

    service.views = (service.views or 0) + 1
    await db.commit()
    await db.refresh(service)
    return service
