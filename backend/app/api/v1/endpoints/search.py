from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.product import ProductCategory
from app.models.project import ProjectCategory
from app.models.service import ServiceCategory
from app.schemas.award import NominationListResponse
from app.schemas.product import ProductListResponse
from app.schemas.project import ProjectListResponse
from app.schemas.search import ProductSort, SearchResponse, SearchType
from app.schemas.service import ServiceListResponse
from app.services.search_service import search_service
from app.utils.pagination import PaginationParams, pagination_params

router = APIRouter()


@router.get("", response_model=SearchResponse)
async def search(
    q: str = Query("", max_length=100),
    search_type: SearchType = Query(SearchType.ALL, alias="type"),
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db)
):
    """Search products, services, projects and nominations"""
    return await search_service.search_all(db, q, search_type, limit)


@router.get("/products", response_model=ProductListResponse)
async def search_products(
    q: str = Query("", max_length=100),
    category: Optional[ProductCategory] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    featured: Optional[bool] = None,
    sort: ProductSort = ProductSort.RELEVANCE,
    pagination: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    return await search_service.search_products(
        db, q, pagination.page, pagination.page_size,
        category=category, min_price=min_price, max_price=max_price,
        featured=featured, sort=sort,
    )


@router.get("/services", response_model=ServiceListResponse)
async def search_services(
    q: str = Query("", max_length=100),
    category: Optional[ServiceCategory] = None,
    featured: Optional[bool] = None,
    pagination: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    return await search_service.search_services(
        db, q, pagination.page, pagination.page_size, category=category, featured=featured,
    )


@router.get("/projects", response_model=ProjectListResponse)
async def search_projects(
    q: str = Query("", max_length=100),
    category: Optional[ProjectCategory] = None,
    featured: Optional[bool] = None,
    pagination: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    return await search_service.search_projects(
        db, q, pagination.page, pagination.page_size, category=category, featured=featured,
    )


@router.get("/awards", response_model=NominationListResponse)
async def search_awards(
    q: str = Query("", max_length=100),
    category: Optional[str] = Query(None, description="Award category id"),
    pagination: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    return await search_service.search_awards(
        db, q, pagination.page, pagination.page_size, category_id=category,
    )
