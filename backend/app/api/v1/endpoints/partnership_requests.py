from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger
from app.core.rate_limiter import limiter
from app.models.partnership_request import PartnershipRequest
from app.models.user import User
from app.modules.auth.dependencies import get_optional_current_user
from app.schemas.common import MessageResponse
from app.schemas.site import PartnershipRequestCreate

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.FORM_RATE_LIMIT)
async def submit_partnership_request(
    request: Request,
    request_data: PartnershipRequestCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Company asks to become a partner"""
    partnership = PartnershipRequest(
        **request_data.model_dump(),
        user_id=current_user.id if current_user else None,
    )
    db.add(partnership)
    await db.commit()

    logger.info(
        f"[Partnership] Request from {partnership.company_name}",
        extra={"partnership_request_id": partnership.id}
    )
    return MessageResponse(
        message="Partnership request submitted. We will review it and get back to you.",
        data={"id": partnership.id},
    )
