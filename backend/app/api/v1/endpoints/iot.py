"""
Public IoT showcase
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update
from typing import Optional, List

from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limiter import limiter
from app.models.showcase import IoTProject, IoTProjectStatus
from app.schemas.common import CategoryCount
from app.schemas.showcase import IoTProjectListResponse, IoTProjectResponse, LikeResponse
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


async def _get_public_project(db: AsyncSession, project_id: str) -> IoTProject:
    project = await db.get(IoTProject, project_id)
    if not project or not project.is_public:
        raise HTTPException(status_code=404, detail="IoT project not found")
    return project


@router.get("", response_model=IoTProjectListResponse)
async def list_iot_projects(
    pagination: PaginationParams = Depends(pagination_params),
    category: Optional[str] = Query(None, max_length=100),
    project_status: Optional[IoTProjectStatus] = Query(None, alias="status"),
    featured: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db)
):
    """Public IoT projects by display order, newest first within an order"""
    query = select(IoTProject).where(IoTProject.is_public.is_(True))
    if category and category != "all":
        query = query.where(IoTProject.category == category)
    if project_status:
        query = query.where(IoTProject.status == project_status)
    if featured is not None:
        query = query.where(IoTProject.is_featured.is_(featured))
    if search and search.strip():
        query = query.where(search_filter(
            search,
            IoTProject.title,
            IoTProject.description,
            list_columns=(IoTProject.technologies, IoTProject.hardware),
        ))
    query = query.order_by(IoTProject.order, IoTProject.created_at.desc())

    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=IoTProjectResponse.model_validate
    )


@router.get("/categories", response_model=List[CategoryCount])
async def list_iot_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(IoTProject.category, func.count(IoTProject.id))
        .where(IoTProject.is_public.is_(True))
        .group_by(IoTProject.category)
        .order_by(IoTProject.category)
    )
    return [CategoryCount(category=category, count=count) for category, count in result.all()]


@router.get("/{project_id}", response_model=IoTProjectResponse)
async def get_iot_project(
    project_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a public IoT project and count the view"""
    project = await _get_public_project(db, project_id)
    project.views = (project.views or 0) + 1
    await db.commit()
    await db.refresh(project)
    return project


@router.post("/{project_id}/like", response_model=LikeResponse)
@limiter.limit(settings.VOTE_RATE_LIMIT)
async def like_iot_project(
    request: Request,
    project_id: str,
    db: AsyncSession = Depends(get_db)
):
    await _get_public_project(db, project_id)
    await db.execute(
        update(IoTProject)
        .where(IoTProject.id == project_id)
        .values(likes=IoTProject.likes + 1)
    )
    await db.commit()
    likes = await db.scalar(select(IoTProject.likes).where(IoTProject.id == project_id))
    return LikeResponse(likes=likes)
