"""
Awards Schemas - categories, nominations, votes and statistics
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

from app.models.award import CategoryIcon, NominationStatus
from app.schemas.common import PageMeta


class NominationSort(str, Enum):
    VOTES = "votes"
    CREATED_AT = "created_at"
    NOMINEE_NAME = "nominee_name"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ============== Categories ==============

class AwardCategoryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    icon: str = Field("🏆", max_length=20)
    icon_name: CategoryIcon = CategoryIcon.TROPHY
    is_active: bool = True

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        return v.strip()


class AwardCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    icon: Optional[str] = Field(None, max_length=20)
    icon_name: Optional[CategoryIcon] = None
    is_active: Optional[bool] = None


class AwardCategoryResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: Optional[str] = None
    icon_name: CategoryIcon
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AwardCategoryWithCounts(AwardCategoryResponse):
    total_nominations: int = 0
    approved_nominations: int = 0


# ============== Nominations ==============

class NominationCreate(BaseModel):
    """Validated form fields of a public nomination (photo arrives separately)"""
    nominee_name: str = Field(..., min_length=2, max_length=100)
    nominee_title: Optional[str] = Field(None, max_length=150)
    nominee_company: Optional[str] = Field(None, max_length=100)
    nominee_country: str = Field("Uganda", min_length=2, max_length=100)
    category_id: str
    nomination_reason: str = Field(..., min_length=50, max_length=1000)
    achievements: Optional[str] = Field(None, max_length=1500)
    impact_description: Optional[str] = Field(None, max_length=1000)
    nominator_name: str = Field(..., min_length=2, max_length=100)
    nominator_email: EmailStr
    nominator_phone: Optional[str] = Field(None, pattern=r'^[\+]?[0-9\s\-\(\)]{10,15}$')
    nominator_organization: Optional[str] = Field(None, max_length=100)

    @field_validator('nominee_name', 'nomination_reason', 'nominator_name')
    @classmethod
    def strip_text(cls, v):
        return v.strip()


class NominationUpdate(BaseModel):
    """Admin edits of nomination details"""
    nominee_name: Optional[str] = Field(None, min_length=2, max_length=100)
    nominee_title: Optional[str] = Field(None, max_length=150)
    nominee_company: Optional[str] = Field(None, max_length=100)
    nominee_country: Optional[str] = Field(None, min_length=2, max_length=100)
    category_id: Optional[str] = None
    nomination_reason: Optional[str] = Field(None, min_length=50, max_length=1000)
    achievements: Optional[str] = Field(None, max_length=1500)
    impact_description: Optional[str] = Field(None, max_length=1000)
    featured: Optional[bool] = None
    display_order: Optional[int] = None
    admin_notes: Optional[str] = Field(None, max_length=500)


class NominationStatusUpdate(BaseModel):
    status: NominationStatus
    admin_notes: Optional[str] = Field(None, max_length=500)


class CategorySummary(BaseModel):
    id: str
    name: str
    icon: Optional[str] = None
    icon_name: CategoryIcon

    class Config:
        from_attributes = True


class NominationPublicResponse(BaseModel):
    """Nomination as shown publicly (nominator contact details omitted)"""
    id: str
    nominee_name: str
    nominee_photo: str
    nominee_title: Optional[str] = None
    nominee_company: Optional[str] = None
    nominee_country: str
    nominee_display_name: str
    category: Optional[CategorySummary] = None
    nomination_reason: str
    achievements: Optional[str] = None
    impact_description: Optional[str] = None
    nominator_name: str
    status: NominationStatus
    votes: int
    slug: Optional[str] = None
    featured: bool
    display_order: int
    certificate_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NominationAdminResponse(NominationPublicResponse):
    nominator_email: str
    nominator_phone: Optional[str] = None
    nominator_organization: Optional[str] = None
    admin_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    certificate_file: Optional[str] = None
    certificate_url: Optional[str] = None
    certificate_generated_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NominationListResponse(PageMeta):
    items: List[NominationPublicResponse]


class NominationAdminListResponse(PageMeta):
    items: List[NominationAdminResponse]


class NominationStatusResult(BaseModel):
    nomination: NominationAdminResponse
    certificate_generated: bool = False
    certificate_id: Optional[str] = None
    certificate_error: Optional[str] = None


# ============== Votes ==============

class VoteRequest(BaseModel):
    voter_email: EmailStr
    voter_name: Optional[str] = Field(None, max_length=100)


class VoteResponse(BaseModel):
    success: bool = True
    message: str
    votes: int


class VoteStatusResponse(BaseModel):
    has_voted: bool
    votes: int
    voted_at: Optional[datetime] = None


# ============== Statistics ==============

class CategoryStat(BaseModel):
    category_id: str
    category_name: str
    nominations: int
    votes: int


class TopNominee(BaseModel):
    id: str
    nominee_name: str
    category_name: str
    votes: int
    status: NominationStatus


class AwardStatistics(BaseModel):
    total_nominations: int
    by_status: dict
    total_votes: int
    local_nominations: int
    international_nominations: int
    categories: List[CategoryStat]
    top_nominees: List[TopNominee]
