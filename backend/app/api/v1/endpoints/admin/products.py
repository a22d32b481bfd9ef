"""
Admin product catalog and product inquiry management.

`catalog_router` carries the reorder and analytics endpoints, which are
served under /products/admin.
"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import (
    Availability, InquiryStatus, Product, ProductCategory, ProductInquiry, User,
)
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import MessageResponse
from app.schemas.product import (
    InquiryStatusUpdate,
    ProductCreate,
    ProductInquiryListResponse,
    ProductInquiryResponse,
    ProductListResponse,
    ProductOrderUpdate,
    ProductResponse,
    ProductUpdate,
)
from app.services.cache_service import cache_service
from app.services.storage_service import FOLDER_PRODUCTS, storage_service
from app.utils.pagination import PaginationParams, paginate, pagination_params
from app.utils.query_filters import search_filter

router = APIRouter()
catalog_router = APIRouter()


async def _get_product(db: AsyncSession, product_id: str) -> Product:
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


async def _get_inquiry(db: AsyncSession, inquiry_id: str) -> ProductInquiry:
    inquiry = await db.get(ProductInquiry, inquiry_id)
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return inquiry


# ============== Ordering & analytics ==============

@catalog_router.put("/products-order", response_model=MessageResponse)
async def reorder_products(
    payload: ProductOrderUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Set display_order for several products at once"""
    ids = [item.id for item in payload.products]
    result = await db.execute(select(Product).where(Product.id.in_(ids)))
    products = {p.id: p for p in result.scalars().all()}

    missing = [product_id for product_id in ids if product_id not in products]
    if missing:
        raise HTTPException(status_code=404, detail=f"Products not found: {', '.join(missing)}")

    for item in payload.products:
        products[item.id].display_order = item.display_order
        products[item.id].updated_by = current_admin.id
    await db.commit()
    cache_service.invalidate_products()
    logger.log_admin_action("reorder", "product", count=len(ids), admin_id=current_admin.id)
    return MessageResponse(message="Product order updated", data={"updated": len(ids)})


@catalog_router.get("/analytics")
async def product_analytics(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Counts by category and availability, and the most viewed products"""
    by_category = {
        category.value: count
        for category, count in (await db.execute(
            select(Product.category, func.count(Product.id)).group_by(Product.category)
        )).all()
    }
    by_availability = {a.value: 0 for a in Availability}
    for availability, count in (await db.execute(
        select(Product.availability, func.count(Product.id)).group_by(Product.availability)
    )).all():
        by_availability[availability.value] = count

    totals = (await db.execute(
        select(
            func.count(Product.id),
            func.coalesce(func.sum(Product.views), 0),
            func.coalesce(func.sum(Product.inquiries), 0),
        )
    )).one()
    active = await db.scalar(select(func.count(Product.id)).where(Product.is_active.is_(True)))

    most_viewed = (await db.execute(
        select(Product).order_by(Product.views.desc()).limit(5)
    )).scalars().all()

    return {
        "total": totals[0] or 0,
        "active": active or 0,
        "total_views": int(totals[1] or 0),
        "total_inquiries": int(totals[2] or 0),
        "by_category": by_category,
        "by_availability": by_availability,
        "most_viewed": [
            {"id": p.id, "name": p.name, "views": p.views, "inquiries": p.inquiries}
            for p in most_viewed
        ],
    }


# ============== Inquiries ==============

@router.get("/inquiries", response_model=ProductInquiryListResponse)
async def list_inquiries(
    pagination: PaginationParams = Depends(pagination_params),
    inquiry_status: Optional[InquiryStatus] = Query(None, alias="status"),
    product_id: Optional[str] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(ProductInquiry)
    if inquiry_status:
        query = query.where(ProductInquiry.status == inquiry_status)
    if product_id:
        query = query.where(ProductInquiry.product_id == product_id)
    if search and search.strip():
        query = query.where(search_filter(
            search,
            ProductInquiry.customer_name,
            ProductInquiry.customer_email,
            ProductInquiry.product_name,
        ))
    query = query.order_by(ProductInquiry.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ProductInquiryResponse.model_validate
    )


@router.get("/inquiries/stats")
async def inquiry_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    by_status = {s.value: 0 for s in InquiryStatus}
    for inquiry_status, count in (await db.execute(
        select(ProductInquiry.status, func.count(ProductInquiry.id)).group_by(ProductInquiry.status)
    )).all():
        by_status[inquiry_status.value] = count
    return {"total": sum(by_status.values()), "by_status": by_status}


@router.put("/inquiries/{inquiry_id}", response_model=ProductInquiryResponse)
async def update_inquiry_status(
    inquiry_id: str,
    update: InquiryStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    inquiry = await _get_inquiry(db, inquiry_id)
    inquiry.status = update.status
    if update.admin_notes is not None:
        inquiry.admin_notes = update.admin_notes
    await db.commit()
    await db.refresh(inquiry)
    logger.log_admin_action("update_status", "product_inquiry", inquiry.id, status=update.status.value)
    return inquiry


@router.delete("/inquiries/{inquiry_id}", response_model=MessageResponse)
async def delete_inquiry(
    inquiry_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    inquiry = await _get_inquiry(db, inquiry_id)
    await db.delete(inquiry)
    await db.commit()
    logger.log_admin_action("delete", "product_inquiry", inquiry_id)
    return MessageResponse(message="Inquiry deleted")


# ============== Products ==============

@router.get("", response_model=ProductListResponse)
async def list_all_products(
    pagination: PaginationParams = Depends(pagination_params),
    category: Optional[ProductCategory] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(Product)
    if category:
        query = query.where(Product.category == category)
    if is_active is not None:
        query = query.where(Product.is_active.is_(is_active))
    if search and search.strip():
        query = query.where(search_filter(search, Product.name, Product.short_description))
    query = query.order_by(Product.display_order, Product.created_at.desc())
    return await paginate(
        db, query, pagination.page, pagination.page_size,
        transform=ProductResponse.model_validate
    )


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    product = Product(
        **product_data.model_dump(),
        created_by=current_admin.id,
        updated_by=current_admin.id,
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)
    cache_service.invalidate_products()
    logger.log_admin_action("create", "product", product.id, admin_id=current_admin.id)
    return product


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await _get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    update: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    product = await _get_product(db, product_id)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(product, field, value)
    product.updated_by = current_admin.id
    await db.commit()
    await db.refresh(product)
    cache_service.invalidate_products()
    logger.log_admin_action("update", "product", product.id, admin_id=current_admin.id)
    return product


@router.post("/{product_id}/image", response_model=ProductResponse)
async def upload_product_image(
    product_id: str,
    image: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    product = await _get_product(db, product_id)
    stored = await storage_service.replace(image, FOLDER_PRODUCTS, product.image, prefix="product")
    product.image = stored.url
    product.updated_by = current_admin.id
    await db.commit()
    await db.refresh(product)
    cache_service.invalidate_products()
    return product


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Delete a product and its image"""
    product = await _get_product(db, product_id)
    image = product.image
    await db.delete(product)
    await db.commit()
    await storage_service.delete(FOLDER_PRODUCTS, image)
    cache_service.invalidate_products()
    logger.log_admin_action("delete", "product", product_id, admin_id=current_admin.id)
    return MessageResponse(message="Product deleted successfully")
