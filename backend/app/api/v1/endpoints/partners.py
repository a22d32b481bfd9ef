from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from app.core.database import get_db
from app.models.partner import Partner
from app.schemas.site import PartnerResponse
from app.services.cache_service import cache_service

router = APIRouter()


@router.get("/public", response_model=List[PartnerResponse])
async def list_public_partners(db: AsyncSession = Depends(get_db)):
    """Active partners ordered by display order, then name"""
    cached = cache_service.get_partners()
    if cached is not None:
        return cached

    result = await db.execute(
        select(Partner)
        .where(Partner.is_active.is_(True))
        .order_by(Partner.order, Partner.name)
    )
    partners = [PartnerResponse.model_validate(p) for p in result.scalars().all()]
    cache_service.set_partners(partners)
    return partners
