"""
Admin contact message management.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import Contact, ContactStatus, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.site import ContactListResponse, ContactResponse, ContactStatusUpdate
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


async def _get_contact(db: AsyncSession, contact_id: str) -> Contact:
    contact = await db.get(Contact, contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact message not found")
    return contact


@router.get("", response_model=ContactListResponse)
async def list_contacts(
    pagination: PaginationParams = Depends(pagination_params),
    contact_status: Optional[ContactStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(Contact)
    if contact_status:
        query = query.where(Contact.status == contact_status)
    if search and search.strip():
        query = query.where(search_filter(
            search,
            Contact.name,
            Contact.email,
            Contact.subject,
            Contact.message,
        ))
    query = query.order_by(Contact.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ContactResponse.model_validate
    )


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Opening a pending message marks it read"""
    contact = await _get_contact(db, contact_id)
    if contact.status == ContactStatus.PENDING:
        contact.status = ContactStatus.READ
        contact.read_at = datetime.utcnow()
        await db.commit()
        await db.refresh(contact)
    return contact


@router.put("/{contact_id}/status", response_model=ContactResponse)
async def update_contact_status(
    contact_id: str,
    update: ContactStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    contact = await _get_contact(db, contact_id)
    contact.status = update.status
    now = datetime.utcnow()
    if update.status == ContactStatus.READ and not contact.read_at:
        contact.read_at = now
    if update.status == ContactStatus.REPLIED:
        contact.replied_at = now
        contact.read_at = contact.read_at or now
    await db.commit()
    await db.refresh(contact)
    logger.log_admin_action("update_status", "contact", contact.id, status=update.status.value)
    return contact


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    contact_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    contact = await _get_contact(db, contact_id)
    await db.delete(contact)
    await db.commit()
    logger.log_admin_action("delete", "contact", contact_id)
    return MessageResponse(message="Contact message deleted")
