"""
Admin partner management (multipart forms with the partner logo).
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import Partner, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.site import PartnerListResponse, PartnerResponse
from app.services.cache_service import cache_service
from app.services.storage_service import FOLDER_PARTNERS, storage_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import contains

router = APIRouter()


def _clean(value: Optional[str], limit: int) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if len(value) > limit:
        raise HTTPException(status_code=400, detail=f"Value exceeds {limit} characters")
    return value


async def _get_partner(db: AsyncSession, partner_id: str) -> Partner:
    partner = await db.get(Partner, partner_id)
    if not partner:
        raise HTTPException(status_code=404, detail="Partner not found")
    return partner


@router.get("", response_model=PartnerListResponse)
async def list_partners(
    pagination: PaginationParams = Depends(pagination_params),
    is_active: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(Partner)
    if is_active is not None:
        query = query.where(Partner.is_active.is_(is_active))
    if search and search.strip():
        query = query.where(contains(Partner.name, search))
    query = query.order_by(Partner.order, Partner.name)
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=PartnerResponse.model_validate
    )


@router.get("/{partner_id}", response_model=PartnerResponse)
async def get_partner(
    partner_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await _get_partner(db, partner_id)


@router.post("", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
async def create_partner(
    name: str = Form(..., min_length=1),
    website: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    is_active: bool = Form(True),
    order: int = Form(0),
    logo: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    name = _clean(name, 100)
    if not name:
        raise HTTPException(status_code=400, detail="Partner name is required")

    stored = await storage_service.save_upload(logo, FOLDER_PARTNERS, prefix="partner")
    partner = Partner(
        name=name,
        logo=stored.url,
        website=_clean(website, 500) or None,
        description=_clean(description, 500) or None,
        is_active=is_active,
        order=order,
        created_by=current_admin.id,
    )
    db.add(partner)
    await db.commit()
    await db.refresh(partner)
    cache_service.invalidate_partners()
    logger.log_admin_action("create", "partner", partner.id, admin_id=current_admin.id)
    return partner


@router.put("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    partner_id: str,
    name: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    is_active: Optional[bool] = Form(None),
    order: Optional[int] = Form(None),
    logo: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Update fields; a new logo replaces the old file"""
    partner = await _get_partner(db, partner_id)

    if name is not None:
        name = _clean(name, 100)
        if not name:
            raise HTTPException(status_code=400, detail="Partner name cannot be empty")
        partner.name = name
    if website is not None:
        partner.website = _clean(website, 500) or None
    if description is not None:
        partner.description = _clean(description, 500) or None
    if is_active is not None:
        partner.is_active = is_active
    if order is not None:
        partner.order = order
    if logo is not None and logo.filename:
        stored = await storage_service.replace(logo, FOLDER_PARTNERS, partner.logo, prefix="partner")
        partner.logo = stored.url

    await db.commit()
    await db.refresh(partner)
    cache_service.invalidate_partners()
    logger.log_admin_action("update", "partner", partner.id, admin_id=current_admin.id)
    return partner


@router.delete("/{partner_id}", response_model=MessageResponse)
async def delete_partner(
    partner_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    partner = await _get_partner(db, partner_id)
    logo = partner.logo
    await db.delete(partner)
    await db.commit()
    await storage_service.delete(FOLDER_PARTNERS, logo)
    cache_service.invalidate_partners()
    logger.log_admin_action("delete", "partner", partner_id, admin_id=current_admin.id)
    return MessageResponse(message="Partner deleted successfully")
