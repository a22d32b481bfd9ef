from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.middleware import get_client_ip
from app.models.user import User
from app.modules.auth.dependencies import get_optional_current_user
from app.schemas.visitor import TrackRequest, TrackResponse, TrackUpdateRequest
from app.services.visitor_service import visitor_service

router = APIRouter()


@router.post("/track", response_model=TrackResponse)
async def track_page_view(
    request: Request,
    payload: TrackRequest,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Record a page view; returns the session id to send on later calls"""
    session_id = await visitor_service.track(
        db,
        payload,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
        user_id=current_user.id if current_user else None,
    )
    return TrackResponse(tracked=session_id is not None, session_id=session_id)


@router.put("/track", response_model=TrackResponse)
async def update_page_view(
    payload: TrackUpdateRequest,
    db: AsyncSession = Depends(get_db)
):
    """Time on page and scroll depth for the latest view of a path"""
    updated = await visitor_service.update_page_view(db, payload)
    return TrackResponse(tracked=updated, session_id=payload.session_id)
