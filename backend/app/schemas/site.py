"""
Schemas for the public site forms and the partner directory:
contacts, newsletter, partnership requests and partners
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.models.contact import ContactStatus
from app.models.newsletter import SubscriptionSource
from app.models.partnership_request import PartnershipRequestStatus
from app.schemas.common import PageMeta


# ============== Contacts ==============

class ContactCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    subject: Optional[str] = Field(None, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)

    @field_validator('name', 'message')
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v.strip()


class ContactResponse(BaseModel):
    id: str
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    status: ContactStatus
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    user_id: Optional[str] = None
    read_at: Optional[datetime] = None
    replied_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ContactListResponse(PageMeta):
    items: List[ContactResponse]


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


# ============== Newsletter ==============

class SubscribeRequest(BaseModel):
    """Email may be omitted by signed-in users"""
    email: Optional[EmailStr] = None
    source: SubscriptionSource = SubscriptionSource.WEBSITE


class UnsubscribeRequest(BaseModel):
    email: EmailStr


class SubscriberResponse(BaseModel):
    id: str
    email: str
    is_active: bool
    source: SubscriptionSource
    subscribed_at: datetime
    unsubscribed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubscriberListResponse(PageMeta):
    items: List[SubscriberResponse]


class SubscriptionResult(BaseModel):
    success: bool = True
    message: str
    subscriber: SubscriberResponse


class NewsletterStats(BaseModel):
    total: int
    active: int
    inactive: int
    recent: int


# ============== Partnership requests ==============

class PartnershipRequestCreate(BaseModel):
    company_name: str = Field(..., min_length=2, max_length=200)
    contact_person: Optional[str] = Field(None, max_length=200)
    contact_email: EmailStr
    website: Optional[str] = Field(None, max_length=500)
    description: str = Field(..., min_length=10, max_length=2000)
    partnership_type: Optional[str] = Field(None, max_length=100)

    @field_validator('website')
    @classmethod
    def normalize_website(cls, v):
        if v and v.strip() and not v.startswith(("http://", "https://")):
            return f"https://{v.strip()}"
        return v


class PartnershipRequestResponse(BaseModel):
    id: str
    company_name: str
    contact_person: Optional[str] = None
    contact_email: str
    website: Optional[str] = None
    description: str
    partnership_type: Optional[str] = None
    status: PartnershipRequestStatus
    admin_notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PartnershipRequestListResponse(PageMeta):
    items: List[PartnershipRequestResponse]


class PartnershipStatusUpdate(BaseModel):
    status: PartnershipRequestStatus
    admin_notes: Optional[str] = Field(None, max_length=1000)


# ============== Partners ==============

class PartnerResponse(BaseModel):
    id: str
    name: str
    logo: str
    website: Optional[str] = None
    description: Optional[str] = None
    is_active: bool
    order: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PartnerListResponse(PageMeta):
    items: List[PartnerResponse]
