"""
Public product catalog and product inquiries
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional, List

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger
from app.core.rate_limiter import limiter
from app.models.product import Product, ProductCategory, ProductInquiry
from app.models.user import User
from app.modules.auth.dependencies import get_optional_current_user
from app.schemas.common import CategoryCount
from app.schemas.product import (
    ProductInquiryCreate,
    ProductInquiryResponse,
    ProductListResponse,
    ProductResponse,
)
from app.schemas.search import ProductSort
from app.services.cache_service import cache_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()

PRODUCT_ORDERING = {
    ProductSort.RELEVANCE: (Product.is_featured.desc(), Product.display_order, Product.created_at.desc()),
    ProductSort.PRICE_ASC: (Product.price_amount.asc(), Product.name),
    ProductSort.PRICE_DESC: (Product.price_amount.desc(), Product.name),
    ProductSort.POPULAR: (Product.views.desc(), Product.inquiries.desc()),
    ProductSort.RECENT: (Product.created_at.desc(),),
}


@router.get("", response_model=ProductListResponse)
async def list_products(
    pagination: PaginationParams = Depends(pagination_params),
    category: Optional[ProductCategory] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    sort: ProductSort = ProductSort.RELEVANCE,
    db: AsyncSession = Depends(get_db)
):
    """Active products"""
    cache_key = cache_service.make_key("list", {
        "page": pagination.page,
        "page_size": pagination.page_size,
        "category": category.value if category else None,
        "featured": featured,
        "search": search,
        "sort": sort.value,
    })
    cached = cache_service.get_products(cache_key)
    if cached is not None:
        return cached

    query = select(Product).where(Product.is_active.is_(True))
    if category:
        query = query.where(Product.category == category)
    if featured is not None:
        query = query.where(Product.is_featured.is_(featured))
    if search and search.strip():
        query = query.where(search_filter(
            search,
            Product.name,
            Product.short_description,
            list_columns=(Product.tags,),
        ))
    query = query.order_by(*PRODUCT_ORDERING[sort])

    response = await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ProductResponse.model_validate
    )
    cache_service.set_products(cache_key, response)
    return response


@router.get("/categories", response_model=List[CategoryCount])
async def list_product_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Product.category, func.count(Product.id))
        .where(Product.is_active.is_(True))
        .group_by(Product.category)
        .order_by(Product.category)
    )
    return [CategoryCount(category=category.value, count=count) for category, count in result.all()]


@router.post("/inquiries", response_model=ProductInquiryResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.FORM_RATE_LIMIT)
async def create_inquiry(
    request: Request,
    inquiry_data: ProductInquiryCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Ask about a product; counts toward the product's inquiries"""
    product = await db.get(Product, inquiry_data.product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    inquiry = ProductInquiry(
        **inquiry_data.model_dump(),
        product_name=product.name,
        user_id=current_user.id if current_user else None,
    )
    product.inquiries = (product.inquiries or 0) + 1
    db.add(inquiry)
    await db.commit()
    await db.refresh(inquiry)

    logger.info(
        f"[Products] Inquiry about {product.name} from {inquiry.customer_email}",
        extra={"inquiry_id": inquiry.id}
    )
    return inquiry


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get an active product and count the view"""
    product = await db.get(Product, product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    product.views = (product.views or 0) + 1
    await db.commit()
    await db.refresh(product)
    return product
