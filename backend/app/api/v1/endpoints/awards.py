"""
Public awards endpoints: categories, nominations and voting
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import SAPTechError
from app.core.middleware import get_client_ip
from app.core.rate_limiter import limiter
from app.models.award import NominationStatus
from app.schemas.award import (
    AwardCategoryWithCounts,
    NominationCreate,
    NominationListResponse,
    NominationPublicResponse,
    NominationSort,
    SortOrder,
    VoteRequest,
    VoteResponse,
    VoteStatusResponse,
)
from app.services.award_service import award_service
from app.services.storage_service import FOLDER_AWARDS, storage_service
from app.utils.pagination import PaginationParams, pagination_params

router = APIRouter()


@router.get("/categories", response_model=List[AwardCategoryWithCounts])
async def list_categories(db: AsyncSession = Depends(get_db)):
    """Active award categories with nomination counts"""
    return await award_service.list_categories(db)


@router.post("/nominations", response_model=NominationPublicResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.FORM_RATE_LIMIT)
async def submit_nomination(
    request: Request,
    nominee_name: str = Form(...),
    category_id: str = Form(...),
    nomination_reason: str = Form(...),
    nominator_name: str = Form(...),
    nominator_email: str = Form(...),
    nominee_title: Optional[str] = Form(None),
    nominee_company: Optional[str] = Form(None),
    nominee_country: str = Form("Uganda"),
    achievements: Optional[str] = Form(None),
    impact_description: Optional[str] = Form(None),
    nominator_phone: Optional[str] = Form(None),
    nominator_organization: Optional[str] = Form(None),
    nominee_photo: UploadFile = File(...),
    db: AsyncSession = Depends(get_db)
):
    """Submit a nomination (multipart form with the nominee photo)"""
    try:
        data = NominationCreate(
            nominee_name=nominee_name,
            category_id=category_id,
            nomination_reason=nomination_reason,
            nominator_name=nominator_name,
            nominator_email=nominator_email,
            nominee_title=nominee_title or None,
            nominee_company=nominee_company or None,
            nominee_country=nominee_country or "Uganda",
            achievements=achievements or None,
            impact_description=impact_description or None,
            nominator_phone=nominator_phone or None,
            nominator_organization=nominator_organization or None,
        )
    except PydanticValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False)
        )

    stored = await storage_service.save_upload(nominee_photo, FOLDER_AWARDS, prefix="nominee")
    try:
        return await award_service.create_nomination(db, data, stored.url)
    except SAPTechError:
        await storage_service.delete(FOLDER_AWARDS, stored.filename)
        raise


@router.get("/nominations", response_model=NominationListResponse)
async def list_nominations(
    pagination: PaginationParams = Depends(pagination_params),
    category: Optional[str] = Query(None, description="Award category id"),
    nomination_status: Optional[NominationStatus] = Query(None, alias="status"),
    country: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=100),
    sort: NominationSort = NominationSort.VOTES,
    order: SortOrder = SortOrder.DESC,
    db: AsyncSession = Depends(get_db)
):
    """Publicly visible nominations (approved by default)"""
    return await award_service.list_public_nominations(
        db,
        page=pagination.page,
        page_size=pagination.page_size,
        category_id=category,
        status=nomination_status,
        country=country,
        search=search,
        sort=sort,
        order=order,
    )


@router.get("/nominations/{id_or_slug}", response_model=NominationPublicResponse)
async def get_nomination(id_or_slug: str, db: AsyncSession = Depends(get_db)):
    return await award_service.get_nomination(db, id_or_slug)


@router.post("/nominations/{nomination_id}/vote", response_model=VoteResponse)
@limiter.limit(settings.VOTE_RATE_LIMIT)
async def vote(
    request: Request,
    nomination_id: str,
    payload: VoteRequest,
    db: AsyncSession = Depends(get_db)
):
    """One vote per email per nomination"""
    votes = await award_service.vote(
        db,
        nomination_id,
        voter_email=payload.voter_email,
        voter_name=payload.voter_name,
        ip_address=get_client_ip(request),
    )
    return VoteResponse(message="Vote recorded successfully", votes=votes)


@router.get("/nominations/{nomination_id}/vote-status", response_model=VoteStatusResponse)
async def vote_status(
    nomination_id: str,
    email: str = Query(..., min_length=3, max_length=255),
    db: AsyncSession = Depends(get_db)
):
    return await award_service.vote_status(db, nomination_id, email)
