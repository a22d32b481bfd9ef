"""
Admin visitor sessions: listing, live visitors and session details.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Optional

from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.visitor import (
    LiveVisitorsResponse,
    PageViewResponse,
    SessionDetailsResponse,
    VisitorSessionListResponse,
    VisitorSessionResponse,
)
from app.services.visitor_service import visitor_service
from app.utils.pagination import PaginationParams, pagination_params

router = APIRouter()


@router.get("/sessions", response_model=VisitorSessionListResponse)
async def list_sessions(
    pagination: PaginationParams = Depends(pagination_params),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    return await visitor_service.list_sessions(
        db,
        page=pagination.page,
        page_size=pagination.page_size,
        start_date=start_date,
        end_date=end_date,
        transform=VisitorSessionResponse.model_validate,
    )


@router.get("/live", response_model=LiveVisitorsResponse)
async def live_visitors(
    window_minutes: int = Query(5, ge=1, le=60),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Sessions seen within the last few minutes"""
    sessions = await visitor_service.live_sessions(db, window_minutes)
    return LiveVisitorsResponse(
        count=len(sessions),
        window_minutes=window_minutes,
        sessions=[VisitorSessionResponse.model_validate(s) for s in sessions],
    )


@router.get("/sessions/{session_id}", response_model=SessionDetailsResponse)
async def session_details(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    details = await visitor_service.session_details(db, session_id)
    return SessionDetailsResponse(
        session=VisitorSessionResponse.model_validate(details["session"]),
        page_views=[PageViewResponse.model_validate(v) for v in details["page_views"]],
    )
