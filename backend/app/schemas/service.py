"""
Service catalog and quote request schemas
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from app.models.service import (
    ServiceCategory, Currency, PriceType, DeliveryUnit, ServiceStatus,
    ContactMethod, BudgetRange, Timeline, QuoteStatus,
)
from app.schemas.common import PageMeta


def _clean_list(values: Optional[List[str]]) -> List[str]:
    return [v.strip() for v in (values or []) if v and v.strip()]


# ============== Services ==============

class ServiceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    long_description: str = Field("", max_length=2000)
    icon: str = Field("", max_length=100)
    category: ServiceCategory = ServiceCategory.OTHER
    features: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    starting_price: Optional[float] = Field(None, ge=0)
    currency: Currency = Currency.USD
    price_type: PriceType = PriceType.PROJECT_BASED
    delivery_time: Optional[int] = Field(None, ge=1)
    delivery_unit: DeliveryUnit = DeliveryUnit.DAYS
    status: ServiceStatus = ServiceStatus.ACTIVE
    featured: bool = False
    order: int = 0

    @field_validator('features', 'technologies')
    @classmethod
    def clean_lists(cls, v):
        return _clean_list(v)


class ServiceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    long_description: Optional[str] = Field(None, max_length=2000)
    icon: Optional[str] = Field(None, max_length=100)
    category: Optional[ServiceCategory] = None
    features: Optional[List[str]] = None
    technologies: Optional[List[str]] = None
    starting_price: Optional[float] = Field(None, ge=0)
    currency: Optional[Currency] = None
    price_type: Optional[PriceType] = None
    delivery_time: Optional[int] = Field(None, ge=1)
    delivery_unit: Optional[DeliveryUnit] = None
    status: Optional[ServiceStatus] = None
    featured: Optional[bool] = None
    order: Optional[int] = None

    @field_validator('features', 'technologies')
    @classmethod
    def clean_lists(cls, v):
        return None if v is None else _clean_list(v)


class ServiceResponse(BaseModel):
    id: str
    title: str
    description: str
    long_description: Optional[str] = ""
    icon: Optional[str] = ""
    category: ServiceCategory
    features: List[str] = []
    technologies: List[str] = []
    starting_price: Optional[float] = None
    currency: Currency
    price_type: PriceType
    delivery_time: Optional[int] = None
    delivery_unit: DeliveryUnit
    image: Optional[str] = None
    status: ServiceStatus
    featured: bool
    order: int
    views: int
    inquiries: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceListResponse(PageMeta):
    items: List[ServiceResponse]


# ============== Quotes ==============

class ServiceQuoteCreate(BaseModel):
    """Quote request; either service_id or service_name must be given"""
    service_id: Optional[str] = None
    service_name: Optional[str] = Field(None, max_length=200)
    customer_name: str = Field(..., min_length=2, max_length=100)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(None, max_length=30)
    company_name: Optional[str] = Field(None, max_length=200)
    preferred_contact: ContactMethod = ContactMethod.EMAIL
    project_details: Optional[str] = Field(None, max_length=2000)
    budget_range: BudgetRange = BudgetRange.NOT_SURE
    timeline: Timeline = Timeline.FLEXIBLE

    @model_validator(mode='after')
    def require_service(self):
        if not self.service_id and not (self.service_name and self.service_name.strip()):
            raise ValueError("Either service_id or service_name is required")
        if self.preferred_contact in (ContactMethod.PHONE, ContactMethod.BOTH) and not self.customer_phone:
            raise ValueError("Phone number is required for phone contact")
        return self


class ServiceQuoteResponse(BaseModel):
    id: str
    service_id: Optional[str] = None
    service_name: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    company_name: Optional[str] = None
    preferred_contact: ContactMethod
    project_details: Optional[str] = None
    budget_range: BudgetRange
    timeline: Timeline
    status: QuoteStatus
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceQuoteListResponse(PageMeta):
    items: List[ServiceQuoteResponse]


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
    admin_notes: Optional[str] = Field(None, max_length=1000)
