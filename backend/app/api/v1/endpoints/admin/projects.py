"""
Admin portfolio project management.
"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import Project, ProjectCategory, ProjectStatus, ProjectVisibility, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.project import (
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from app.services.cache_service import cache_service
from app.services.storage_service import FOLDER_PROJECTS, storage_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


async def _get_project(db: AsyncSession, project_id: str) -> Project:
    project = await db.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("", response_model=ProjectListResponse)
async def list_all_projects(
    pagination: PaginationParams = Depends(pagination_params),
    project_status: Optional[ProjectStatus] = Query(None, alias="status"),
    category: Optional[ProjectCategory] = None,
    visibility: Optional[ProjectVisibility] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(Project)
    if project_status:
        query = query.where(Project.status == project_status)
    if category:
        query = query.where(Project.category == category)
    if visibility:
        query = query.where(Project.visibility == visibility)
    if search and search.strip():
        query = query.where(search_filter(search, Project.title, Project.description))
    query = query.order_by(Project.order, Project.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ProjectResponse.model_validate
    )


@router.get("/stats")
async def project_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Counts by status, category and visibility"""
    by_status = {s.value: 0 for s in ProjectStatus}
    for project_status, count in (await db.execute(
        select(Project.status, func.count(Project.id)).group_by(Project.status)
    )).all():
        by_status[project_status.value] = count

    by_category = {
        category.value: count
        for category, count in (await db.execute(
            select(Project.category, func.count(Project.id)).group_by(Project.category)
        )).all()
    }
    by_visibility = {
        visibility.value: count
        for visibility, count in (await db.execute(
            select(Project.visibility, func.count(Project.id)).group_by(Project.visibility)
        )).all()
    }
    total_views = await db.scalar(select(func.coalesce(func.sum(Project.views), 0)))

    return {
        "total": sum(by_status.values()),
        "by_status": by_status,
        "by_category": by_category,
        "by_visibility": by_visibility,
        "total_views": int(total_views or 0),
    }


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    project = Project(**project_data.model_dump(), created_by=current_admin.id)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    cache_service.invalidate_projects()
    logger.log_admin_action("create", "project", project.id, admin_id=current_admin.id)
    return project


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await _get_project(db, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    update: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    project = await _get_project(db, project_id)
    changes = update.model_dump(exclude_unset=True)

    start = changes.get("start_date", project.start_date)
    end = changes.get("end_date", project.end_date)
    if start and end and end < start:
        raise HTTPException(status_code=400, detail="End date cannot be before start date")

    for field, value in changes.items():
        setattr(project, field, value)
    await db.commit()
    await db.refresh(project)
    cache_service.invalidate_projects()
    logger.log_admin_action("update", "project", project.id, admin_id=current_admin.id)
    return project


@router.post("/{project_id}/images", response_model=ProjectResponse)
async def add_project_image(
    project_id: str,
    image: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Append an image; the first image becomes the primary one"""
    project = await _get_project(db, project_id)
    stored = await storage_service.save_upload(image, FOLDER_PROJECTS, prefix="project")
    images = list(project.images or [])
    images.append({"url": stored.url, "caption": "", "is_primary": not images})
    project.images = images
    await db.commit()
    await db.refresh(project)
    cache_service.invalidate_projects()
    return project


@router.patch("/{project_id}/featured", response_model=ProjectResponse)
async def toggle_featured(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    project = await _get_project(db, project_id)
    project.featured = not project.featured
    await db.commit()
    await db.refresh(project)
    cache_service.invalidate_projects()
    return project


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Delete a project and its uploaded images"""
    project = await _get_project(db, project_id)
    images = [img.get("url") for img in (project.images or []) if isinstance(img, dict)]
    await db.delete(project)
    await db.commit()
    for url in images:
        if url and url.startswith(f"/uploads/{FOLDER_PROJECTS}/"):
            await storage_service.delete(FOLDER_PROJECTS, url)
    cache_service.invalidate_projects()
    logger.log_admin_action("delete", "project", project_id, admin_id=current_admin.id)
    return MessageResponse(message="Project deleted successfully")
