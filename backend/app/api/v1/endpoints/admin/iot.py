"""
Admin IoT showcase management.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import case, select, func
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import IoTProject, IoTProjectStatus, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.showcase import (
    IoTProjectCreate,
    IoTProjectListResponse,
    IoTProjectResponse,
    IoTProjectUpdate,
    IoTStats,
)
from app.services.storage_service import FOLDER_IOT, storage_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()

MAX_IMAGES = 10


async def _get_iot_project(db: AsyncSession, project_id: str) -> IoTProject:
    project = await db.get(IoTProject, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="IoT project not found")
    return project


def _uploaded_urls(images) -> list:
    return [
        img.get("url") for img in (images or [])
        if isinstance(img, dict) and (img.get("url") or "").startswith(f"/uploads/{FOLDER_IOT}/")
    ]


@router.get("", response_model=IoTProjectListResponse)
async def list_all_iot_projects(
    pagination: PaginationParams = Depends(pagination_params),
    project_status: Optional[IoTProjectStatus] = Query(None, alias="status"),
    category: Optional[str] = Query(None, max_length=100),
    is_public: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(IoTProject)
    if project_status:
        query = query.where(IoTProject.status == project_status)
    if category:
        query = query.where(IoTProject.category == category)
    if is_public is not None:
        query = query.where(IoTProject.is_public.is_(is_public))
    if search and search.strip():
        query = query.where(search_filter(search, IoTProject.title, IoTProject.description))
    query = query.order_by(IoTProject.order, IoTProject.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=IoTProjectResponse.model_validate
    )


@router.get("/stats", response_model=IoTStats)
async def iot_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    total, completed, in_progress, featured, views, likes = (await db.execute(
        select(
            func.count(IoTProject.id),
            func.sum(case((IoTProject.status == IoTProjectStatus.COMPLETED, 1), else_=0)),
            func.sum(case((IoTProject.status == IoTProjectStatus.IN_PROGRESS, 1), else_=0)),
            func.sum(case((IoTProject.is_featured.is_(True), 1), else_=0)),
            func.coalesce(func.sum(IoTProject.views), 0),
            func.coalesce(func.sum(IoTProject.likes), 0),
        )
    )).one()
    return IoTStats(
        total=total,
        completed=int(completed or 0),
        in_progress=int(in_progress or 0),
        featured=int(featured or 0),
        total_views=int(views),
        total_likes=int(likes),
    )


@router.post("", response_model=IoTProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_iot_project(
    project_data: IoTProjectCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    project = IoTProject(**project_data.model_dump(), created_by=current_admin.id)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.log_admin_action("create", "iot_project", project.id, admin_id=current_admin.id)
    return project


@router.get("/{project_id}", response_model=IoTProjectResponse)
async def get_iot_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await _get_iot_project(db, project_id)


@router.put("/{project_id}", response_model=IoTProjectResponse)
async def update_iot_project(
    project_id: str,
    update: IoTProjectUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Update fields; uploaded images dropped from `images` are deleted"""
    project = await _get_iot_project(db, project_id)
    changes = update.model_dump(exclude_unset=True)

    removed = []
    if "images" in changes:
        kept = set(_uploaded_urls(changes["images"]))
        removed = [url for url in _uploaded_urls(project.images) if url not in kept]

    for field, value in changes.items():
        setattr(project, field, value)
    await db.commit()
    await db.refresh(project)
    for url in removed:
        await storage_service.delete(FOLDER_IOT, url)
    logger.log_admin_action("update", "iot_project", project.id, admin_id=current_admin.id)
    return project


@router.post("/{project_id}/images", response_model=IoTProjectResponse)
async def add_iot_image(
    project_id: str,
    image: UploadFile = File(...),
    caption: str = Form("", max_length=200),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    project = await _get_iot_project(db, project_id)
    images = list(project.images or [])
    if len(images) >= MAX_IMAGES:
        raise HTTPException(status_code=400, detail=f"An IoT project can have at most {MAX_IMAGES} images")
    stored = await storage_service.save_upload(image, FOLDER_IOT, prefix="iot")
    images.append({"url": stored.url, "caption": caption})
    project.images = images
    await db.commit()
    await db.refresh(project)
    return project


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_iot_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Delete an IoT project and its uploaded images"""
    project = await _get_iot_project(db, project_id)
    images = _uploaded_urls(project.images)
    await db.delete(project)
    await db.commit()
    for url in images:
        await storage_service.delete(FOLDER_IOT, url)
    logger.log_admin_action("delete", "iot_project", project_id, admin_id=current_admin.id)
    return MessageResponse(message="IoT project deleted successfully")
