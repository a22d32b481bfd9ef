"""
Admin awards management: categories, nomination review and statistics.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import NominationStatus, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.award import (
    AwardCategoryCreate,
    AwardCategoryResponse,
    AwardCategoryUpdate,
    AwardCategoryWithCounts,
    AwardStatistics,
    NominationAdminListResponse,
    NominationAdminResponse,
    NominationSort,
    NominationStatusResult,
    NominationStatusUpdate,
    NominationUpdate,
    SortOrder,
)
from app.schemas.common import MessageResponse
from app.services.award_service import award_service
from app.utils.pagination import PaginationParams, pagination_params

router = APIRouter()


# ============== Categories ==============

@router.get("/categories", response_model=List[AwardCategoryWithCounts])
async def list_categories(
    include_inactive: bool = True,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await award_service.list_categories(db, include_inactive=include_inactive)


@router.post("/categories", response_model=AwardCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: AwardCategoryCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    category = await award_service.create_category(db, payload)
    logger.log_admin_action("create", "award_category", category.id, admin_id=current_admin.id)
    return category


@router.put("/categories/{category_id}", response_model=AwardCategoryResponse)
async def update_category(
    category_id: str,
    payload: AwardCategoryUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    category = await award_service.update_category(db, category_id, payload)
    logger.log_admin_action("update", "award_category", category.id, admin_id=current_admin.id)
    return category


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    await award_service.delete_category(db, category_id)
    logger.log_admin_action("delete", "award_category", category_id, admin_id=current_admin.id)
    return MessageResponse(message="Award category deleted")


# ============== Nominations ==============

@router.get("/nominations", response_model=NominationAdminListResponse)
async def list_nominations(
    pagination: PaginationParams = Depends(pagination_params),
    category: Optional[str] = None,
    nomination_status: Optional[NominationStatus] = Query(None, alias="status"),
    country: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=100),
    sort: NominationSort = NominationSort.CREATED_AT,
    order: SortOrder = SortOrder.DESC,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Nominations in any status"""
    return await award_service.list_nominations(
        db,
        page=pagination.page,
        page_size=pagination.page_size,
        category_id=category,
        status=nomination_status,
        country=country,
        search=search,
        sort=sort,
        order=order,
        transform=NominationAdminResponse.model_validate,
    )


@router.get("/nominations/{nomination_id}", response_model=NominationAdminResponse)
async def get_nomination(
    nomination_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await award_service.get_nomination(db, nomination_id, public=False)


@router.put("/nominations/{nomination_id}/status", response_model=NominationStatusResult)
async def update_nomination_status(
    nomination_id: str,
    payload: NominationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """
    Review a nomination.

    Moving it to approved, finalist or winner issues a certificate when it
    has none; a certificate failure is reported without undoing the review.
    """
    result = await award_service.update_status(
        db,
        nomination_id,
        payload.status,
        reviewer_id=current_admin.id,
        admin_notes=payload.admin_notes,
    )
    logger.log_admin_action(
        "update_status", "nomination", nomination_id,
        status=payload.status.value, admin_id=current_admin.id
    )
    return NominationStatusResult(
        nomination=NominationAdminResponse.model_validate(result["nomination"]),
        certificate_generated=result["certificate_generated"],
        certificate_id=result["certificate_id"],
        certificate_error=result["certificate_error"],
    )


@router.put("/nominations/{nomination_id}", response_model=NominationAdminResponse)
async def update_nomination(
    nomination_id: str,
    payload: NominationUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    nomination = await award_service.update_nomination(db, nomination_id, payload)
    logger.log_admin_action("update", "nomination", nomination_id, admin_id=current_admin.id)
    return nomination


@router.delete("/nominations/{nomination_id}", response_model=MessageResponse)
async def delete_nomination(
    nomination_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    await award_service.delete_nomination(db, nomination_id)
    logger.log_admin_action("delete", "nomination", nomination_id, admin_id=current_admin.id)
    return MessageResponse(message="Nomination deleted")


@router.get("/statistics", response_model=AwardStatistics)
async def award_statistics(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await award_service.statistics(db)
