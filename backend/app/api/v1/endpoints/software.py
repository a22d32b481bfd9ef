"""
Public software showcase

Only public software in the active state is listed or viewable.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update
from typing import Optional, List

from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limiter import limiter
from app.models.showcase import SoftwareProduct, SoftwareStatus
from app.schemas.common import CategoryCount
from app.schemas.showcase import ClickResponse, SoftwareListResponse, SoftwareResponse
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


def _public_software():
    return select(SoftwareProduct).where(
        SoftwareProduct.is_public.is_(True),
        SoftwareProduct.status == SoftwareStatus.ACTIVE,
    )


async def _get_public_software(db: AsyncSession, software_id: str) -> SoftwareProduct:
    software = (await db.execute(
        _public_software().where(SoftwareProduct.id == software_id)
    )).scalar_one_or_none()
    if not software:
        raise HTTPException(status_code=404, detail="Software not found")
    return software


@router.get("", response_model=SoftwareListResponse)
async def list_software(
    pagination: PaginationParams = Depends(pagination_params),
    category: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db)
):
    query = _public_software()
    if category and category != "all":
        query = query.where(SoftwareProduct.category == category)
    if search and search.strip():
        query = query.where(search_filter(
            search,
            SoftwareProduct.name,
            SoftwareProduct.description,
            list_columns=(SoftwareProduct.features, SoftwareProduct.technologies),
        ))
    query = query.order_by(SoftwareProduct.order, SoftwareProduct.created_at.desc())

    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=SoftwareResponse.model_validate
    )


@router.get("/categories", response_model=List[CategoryCount])
async def list_software_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(SoftwareProduct.category, func.count(SoftwareProduct.id))
        .where(
            SoftwareProduct.is_public.is_(True),
            SoftwareProduct.status == SoftwareStatus.ACTIVE,
        )
        .group_by(SoftwareProduct.category)
        .order_by(SoftwareProduct.category)
    )
    return [CategoryCount(category=category, count=count) for category, count in result.all()]


@router.get("/{software_id}", response_model=SoftwareResponse)
async def get_software(
    software_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get public software and count the view"""
    software = await _get_public_software(db, software_id)
    software.views = (software.views or 0) + 1
    await db.commit()
    await db.refresh(software)
    return software


@router.post("/{software_id}/click", response_model=ClickResponse)
@limiter.limit(settings.VOTE_RATE_LIMIT)
async def track_click(
    request: Request,
    software_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Count a visit to the software's external URL and return the URL"""
    software = await _get_public_software(db, software_id)
    await db.execute(
        update(SoftwareProduct)
        .where(SoftwareProduct.id == software_id)
        .values(clicks=SoftwareProduct.clicks + 1)
    )
    await db.commit()
    await db.refresh(software)
    return ClickResponse(url=software.url, clicks=software.clicks)
