"""
Public portfolio projects
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional, List

from app.core.database import get_db
from app.models.project import Project, ProjectCategory, ProjectStatus, ProjectVisibility
from app.schemas.common import CategoryCount
from app.schemas.project import ProjectListResponse, ProjectResponse
from app.services.cache_service import cache_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    pagination: PaginationParams = Depends(pagination_params),
    category: Optional[ProjectCategory] = None,
    project_status: Optional[ProjectStatus] = Query(None, alias="status"),
    featured: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db)
):
    """Public projects, featured first then by display order"""
    cache_key = cache_service.make_key("list", {
        "page": pagination.page,
        "page_size": pagination.page_size,
        "category": category.value if category else None,
        "status": project_status.value if project_status else None,
        "featured": featured,
        "search": search,
    })
    cached = cache_service.get_projects(cache_key)
    if cached is not None:
        return cached

    query = select(Project).where(Project.visibility == ProjectVisibility.PUBLIC)
    if category:
        query = query.where(Project.category == category)
    if project_status:
        query = query.where(Project.status == project_status)
    if featured is not None:
        query = query.where(Project.featured.is_(featured))
    if search and search.strip():
        query = query.where(search_filter(search, Project.title, Project.description))
    query = query.order_by(Project.featured.desc(), Project.order, Project.created_at.desc())

    response = await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ProjectResponse.model_validate
    )
    cache_service.set_projects(cache_key, response)
    return response


@router.get("/categories", response_model=List[CategoryCount])
async def list_project_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Project.category, func.count(Project.id))
        .where(Project.visibility == ProjectVisibility.PUBLIC)
        .group_by(Project.category)
        .order_by(Project.category)
    )
    return [CategoryCount(category=category.value, count=count) for category, count in result.all()]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a public project and count the view; private projects are hidden"""
    project = await db.get(Project, project_id)
    if not project or project.visibility != ProjectVisibility.PUBLIC:
        raise HTTPException(status_code=404, detail="Project not found")

    project.views = (project.views or 0) + 1
    await db.commit()
    await db.refresh(project)
    return project
