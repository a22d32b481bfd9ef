"""
Product catalog and product inquiry schemas
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from app.models.product import (
    ProductCategory, ProductCurrency, ProductPriceType, Availability, InquiryStatus,
)
from app.models.service import ContactMethod
from app.schemas.common import PageMeta


class Specification(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=200)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    short_description: str = Field(..., min_length=1, max_length=200)
    technical_description: str = Field(..., min_length=1, max_length=1000)
    specifications: List[Specification] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    category: ProductCategory = ProductCategory.OTHER
    price_amount: Optional[float] = Field(None, ge=0)
    price_currency: ProductCurrency = ProductCurrency.USD
    price_type: ProductPriceType = ProductPriceType.CONTACT_FOR_PRICE
    availability: Availability = Availability.CUSTOM_ORDER
    display_order: int = 0
    is_active: bool = True
    is_featured: bool = False

    @field_validator('tags')
    @classmethod
    def normalize_tags(cls, v):
        return [t.strip().lower() for t in v if t and t.strip()]

    @field_validator('features')
    @classmethod
    def clean_features(cls, v):
        return [f.strip() for f in v if f and f.strip()]

    @model_validator(mode='after')
    def price_required_for_fixed(self):
        if self.price_type != ProductPriceType.CONTACT_FOR_PRICE and self.price_amount is None:
            raise ValueError("price_amount is required unless price_type is contact-for-price")
        return self


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    short_description: Optional[str] = Field(None, min_length=1, max_length=200)
    technical_description: Optional[str] = Field(None, min_length=1, max_length=1000)
    specifications: Optional[List[Specification]] = None
    features: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    category: Optional[ProductCategory] = None
    price_amount: Optional[float] = Field(None, ge=0)
    price_currency: Optional[ProductCurrency] = None
    price_type: Optional[ProductPriceType] = None
    availability: Optional[Availability] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None

    @field_validator('tags')
    @classmethod
    def normalize_tags(cls, v):
        return None if v is None else [t.strip().lower() for t in v if t and t.strip()]


class ProductResponse(BaseModel):
    id: str
    name: str
    short_description: str
    technical_description: str
    specifications: List[Specification] = []
    features: List[str] = []
    tags: List[str] = []
    image: Optional[str] = None
    category: ProductCategory
    price_amount: Optional[float] = None
    price_currency: ProductCurrency
    price_type: ProductPriceType
    formatted_price: str
    availability: Availability
    display_order: int
    is_active: bool
    is_featured: bool
    views: int
    inquiries: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductListResponse(PageMeta):
    items: List[ProductResponse]


class ProductOrderItem(BaseModel):
    id: str
    display_order: int = Field(..., ge=0)


class ProductOrderUpdate(BaseModel):
    products: List[ProductOrderItem] = Field(..., min_length=1)


# ============== Inquiries ==============

class ProductInquiryCreate(BaseModel):
    product_id: str
    customer_name: str = Field(..., min_length=2, max_length=100)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(None, max_length=30)
    preferred_contact: ContactMethod = ContactMethod.EMAIL
    message: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode='after')
    def phone_for_phone_contact(self):
        if self.preferred_contact in (ContactMethod.PHONE, ContactMethod.BOTH) and not self.customer_phone:
            raise ValueError("Phone number is required for phone contact")
        return self


class ProductInquiryResponse(BaseModel):
    id: str
    product_id: Optional[str] = None
    product_name: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    preferred_contact: ContactMethod
    message: Optional[str] = None
    status: InquiryStatus
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductInquiryListResponse(PageMeta):
    items: List[ProductInquiryResponse]


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus
    admin_notes: Optional[str] = Field(None, max_length=1000)
