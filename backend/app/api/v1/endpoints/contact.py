from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger
from app.core.middleware import get_client_ip
from app.core.rate_limiter import limiter
from app.models.contact import Contact, ContactStatus
from app.models.user import User
from app.modules.auth.dependencies import get_optional_current_user
from app.schemas.common import MessageResponse
from app.schemas.site import ContactCreate

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.FORM_RATE_LIMIT)
async def submit_contact(
    request: Request,
    contact_data: ContactCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Contact form submission"""
    contact = Contact(
        **contact_data.model_dump(),
        status=ContactStatus.PENDING,
        ip_address=get_client_ip(request),
        user_agent=(request.headers.get("user-agent") or "")[:500] or None,
        user_id=current_user.id if current_user else None,
    )
    db.add(contact)
    await db.commit()

    logger.info(f"[Contact] New message from {contact.email}", extra={"contact_id": contact.id})
    return MessageResponse(
        message="Thank you for your message. We will get back to you soon.",
        data={"id": contact.id},
    )
