"""
Admin review of partnership requests.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import PartnershipRequest, PartnershipRequestStatus, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.site import (
    PartnershipRequestListResponse,
    PartnershipRequestResponse,
    PartnershipStatusUpdate,
)
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


async def _get_request(db: AsyncSession, request_id: str) -> PartnershipRequest:
    partnership = await db.get(PartnershipRequest, request_id)
    if not partnership:
        raise HTTPException(status_code=404, detail="Partnership request not found")
    return partnership


@router.get("", response_model=PartnershipRequestListResponse)
async def list_partnership_requests(
    pagination: PaginationParams = Depends(pagination_params),
    request_status: Optional[PartnershipRequestStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(PartnershipRequest)
    if request_status:
        query = query.where(PartnershipRequest.status == request_status)
    if search and search.strip():
        query = query.where(search_filter(
            search,
            PartnershipRequest.company_name,
            PartnershipRequest.contact_email,
        ))
    query = query.order_by(PartnershipRequest.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=PartnershipRequestResponse.model_validate
    )


@router.get("/{request_id}", response_model=PartnershipRequestResponse)
async def get_partnership_request(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await _get_request(db, request_id)


@router.put("/{request_id}/status", response_model=PartnershipRequestResponse)
async def update_partnership_status(
    request_id: str,
    update: PartnershipStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    partnership = await _get_request(db, request_id)
    partnership.status = update.status
    if update.admin_notes is not None:
        partnership.admin_notes = update.admin_notes
    if update.status != PartnershipRequestStatus.PENDING:
        partnership.reviewed_at = datetime.utcnow()
    await db.commit()
    await db.refresh(partnership)
    logger.log_admin_action(
        "update_status", "partnership_request", partnership.id,
        status=update.status.value, admin_id=current_admin.id
    )
    return partnership


@router.delete("/{request_id}", response_model=MessageResponse)
async def delete_partnership_request(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    partnership = await _get_request(db, request_id)
    await db.delete(partnership)
    await db.commit()
    logger.log_admin_action("delete", "partnership_request", request_id)
    return MessageResponse(message="Partnership request deleted")
