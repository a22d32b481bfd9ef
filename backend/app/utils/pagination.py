"""
Pagination Utility Module

Every list endpoint returns the same envelope:
{items, total, page, page_size, total_pages, has_next, has_previous}
"""
from typing import Callable, List, Optional, Any
from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


class PaginationParams(BaseModel):
    """Standard pagination parameters"""
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def pagination_params(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> PaginationParams:
    """FastAPI dependency for ?page=&page_size="""
    return PaginationParams(page=page, page_size=page_size)


class PaginatedResponse(BaseModel):
    """Standard paginated response"""
    items: List[Any]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


def clamp(page: int, page_size: int):
    """Page >= 1, page size within 1..MAX_PAGE_SIZE"""
    return max(1, page), max(1, min(MAX_PAGE_SIZE, page_size))


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    count_query: Optional[Select] = None,
    transform: Optional[Callable[[Any], Any]] = None,
) -> dict:
    """
    Apply pagination to a SQLAlchemy query.

    Args:
        db: Database session
        query: Base SQLAlchemy query (ordering included)
        page: Page number (1-indexed)
        page_size: Items per page
        count_query: Optional custom count query
        transform: Optional per-item mapper (e.g. a pydantic model_validate)

    Returns:
        Dictionary with items, total, page, page_size, total_pages, has_next, has_previous
    """
    page, page_size = clamp(page, page_size)
    offset = (page - 1) * page_size

    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(offset).limit(page_size))
    items = list(result.scalars().all())
    if transform is not None:
        items = [transform(item) for item in items]

    return create_paginated_response(items, total, page, page_size)


def create_paginated_response(
    items: List[Any],
    total: int,
    page: int,
    page_size: int
) -> dict:
    """Build the envelope for an already sliced list of items"""
    page, page_size = clamp(page, page_size)
    total_pages = (total + page_size - 1) // page_size if total > 0 else 1

    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_previous": page > 1
    }
