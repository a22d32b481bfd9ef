"""
Admin software showcase management.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import SoftwareProduct, SoftwareStatus, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.showcase import (
    SoftwareCreate,
    SoftwareListResponse,
    SoftwareResponse,
    SoftwareStats,
    SoftwareTopItem,
    SoftwareUpdate,
)
from app.services.storage_service import FOLDER_SOFTWARE, storage_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()

MAX_IMAGES = 5
TOP_BY_CLICKS = 5


async def _get_software(db: AsyncSession, software_id: str) -> SoftwareProduct:
    software = await db.get(SoftwareProduct, software_id)
    if not software:
        raise HTTPException(status_code=404, detail="Software not found")
    return software


def _uploaded_urls(software: SoftwareProduct) -> list:
    urls = [img.get("url") for img in (software.images or []) if isinstance(img, dict)]
    urls.append(software.image)
    return [url for url in urls if url and url.startswith(f"/uploads/{FOLDER_SOFTWARE}/")]


@router.get("", response_model=SoftwareListResponse)
async def list_all_software(
    pagination: PaginationParams = Depends(pagination_params),
    software_status: Optional[SoftwareStatus] = Query(None, alias="status"),
    category: Optional[str] = Query(None, max_length=100),
    is_public: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Every software entry regardless of status or visibility"""
    query = select(SoftwareProduct)
    if software_status:
        query = query.where(SoftwareProduct.status == software_status)
    if category:
        query = query.where(SoftwareProduct.category == category)
    if is_public is not None:
        query = query.where(SoftwareProduct.is_public.is_(is_public))
    if search and search.strip():
        query = query.where(search_filter(search, SoftwareProduct.name, SoftwareProduct.description))
    query = query.order_by(SoftwareProduct.order, SoftwareProduct.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=SoftwareResponse.model_validate
    )


@router.get("/stats", response_model=SoftwareStats)
async def software_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    by_status = {s.value: 0 for s in SoftwareStatus}
    for software_status, count in (await db.execute(
        select(SoftwareProduct.status, func.count(SoftwareProduct.id)).group_by(SoftwareProduct.status)
    )).all():
        by_status[software_status.value] = count

    views, clicks = (await db.execute(
        select(
            func.coalesce(func.sum(SoftwareProduct.views), 0),
            func.coalesce(func.sum(SoftwareProduct.clicks), 0),
        )
    )).one()

    top = (await db.execute(
        select(SoftwareProduct)
        .order_by(SoftwareProduct.clicks.desc(), SoftwareProduct.name)
        .limit(TOP_BY_CLICKS)
    )).scalars().all()

    return SoftwareStats(
        total=sum(by_status.values()),
        active=by_status[SoftwareStatus.ACTIVE.value],
        by_status=by_status,
        total_views=int(views),
        total_clicks=int(clicks),
        top_by_clicks=[
            SoftwareTopItem(id=s.id, name=s.name, clicks=s.clicks, views=s.views) for s in top
        ],
    )


@router.post("", response_model=SoftwareResponse, status_code=status.HTTP_201_CREATED)
async def create_software(
    software_data: SoftwareCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    software = SoftwareProduct(**software_data.model_dump(), created_by=current_admin.id)
    db.add(software)
    await db.commit()
    await db.refresh(software)
    logger.log_admin_action("create", "software", software.id, admin_id=current_admin.id)
    return software


@router.get("/{software_id}", response_model=SoftwareResponse)
async def get_software(
    software_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await _get_software(db, software_id)


@router.put("/{software_id}", response_model=SoftwareResponse)
async def update_software(
    software_id: str,
    update: SoftwareUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    software = await _get_software(db, software_id)
    before = set(_uploaded_urls(software))
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(software, field, value)
    await db.commit()
    await db.refresh(software)
    for url in before - set(_uploaded_urls(software)):
        await storage_service.delete(FOLDER_SOFTWARE, url)
    logger.log_admin_action("update", "software", software.id, admin_id=current_admin.id)
    return software


@router.post("/{software_id}/images", response_model=SoftwareResponse)
async def add_software_image(
    software_id: str,
    image: UploadFile = File(...),
    alt: str = Form("", max_length=200),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Append an image; the first one also becomes the cover image"""
    software = await _get_software(db, software_id)
    images = list(software.images or [])
    if len(images) >= MAX_IMAGES:
        raise HTTPException(status_code=400, detail=f"Software can have at most {MAX_IMAGES} images")
    stored = await storage_service.save_upload(image, FOLDER_SOFTWARE, prefix="software")
    images.append({"url": stored.url, "alt": alt})
    software.images = images
    if not software.image:
        software.image = stored.url
    await db.commit()
    await db.refresh(software)
    return software


@router.delete("/{software_id}", response_model=MessageResponse)
async def delete_software(
    software_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Delete software and its uploaded images"""
    software = await _get_software(db, software_id)
    images = set(_uploaded_urls(software))
    await db.delete(software)
    await db.commit()
    for url in images:
        await storage_service.delete(FOLDER_SOFTWARE, url)
    logger.log_admin_action("delete", "software", software_id, admin_id=current_admin.id)
    return MessageResponse(message="Software deleted successfully")
