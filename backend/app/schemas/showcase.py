from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.models.showcase import DEFAULT_SHOWCASE_CATEGORY, IoTProjectStatus, SoftwareStatus
from app.schemas.common import PageMeta


def _clean_list(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    return [v.strip() for v in values if v and v.strip()]


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value.startswith(("http://", "https://")):
        raise ValueError("URL must start with http:// or https://")
    return value


def _clean_category(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or DEFAULT_SHOWCASE_CATEGORY


# ============== IoT ==============

class IoTImage(BaseModel):
    url: str
    caption: str = ""


class IoTProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    category: str = Field(DEFAULT_SHOWCASE_CATEGORY, max_length=100)
    status: IoTProjectStatus = IoTProjectStatus.COMPLETED
    technologies: List[str] = Field(default_factory=list)
    hardware: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    images: List[IoTImage] = Field(default_factory=list)
    project_url: Optional[str] = Field(None, max_length=500)
    github_url: Optional[str] = Field(None, max_length=500)
    video_url: Optional[str] = Field(None, max_length=500)
    completion_date: Optional[datetime] = None
    is_public: bool = True
    is_featured: bool = False
    order: int = 0

    @field_validator('technologies', 'hardware', 'features')
    @classmethod
    def clean_lists(cls, v):
        return _clean_list(v)

    @field_validator('category')
    @classmethod
    def clean_category(cls, v):
        return _clean_category(v)


class IoTProjectUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    category: Optional[str] = Field(None, max_length=100)
    status: Optional[IoTProjectStatus] = None
    technologies: Optional[List[str]] = None
    hardware: Optional[List[str]] = None
    features: Optional[List[str]] = None
    images: Optional[List[IoTImage]] = None
    project_url: Optional[str] = Field(None, max_length=500)
    github_url: Optional[str] = Field(None, max_length=500)
    video_url: Optional[str] = Field(None, max_length=500)
    completion_date: Optional[datetime] = None
    is_public: Optional[bool] = None
    is_featured: Optional[bool] = None
    order: Optional[int] = None

    @field_validator('technologies', 'hardware', 'features')
    @classmethod
    def clean_lists(cls, v):
        return _clean_list(v)

    @field_validator('category')
    @classmethod
    def clean_category(cls, v):
        return _clean_category(v)


class IoTProjectResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    status: IoTProjectStatus
    technologies: List[str] = []
    hardware: List[str] = []
    features: List[str] = []
    images: List[IoTImage] = []
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    video_url: Optional[str] = None
    completion_date: Optional[datetime] = None
    is_public: bool
    is_featured: bool
    order: int
    views: int
    likes: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class IoTProjectListResponse(PageMeta):
    items: List[IoTProjectResponse]


class IoTStats(BaseModel):
    total: int
    completed: int
    in_progress: int
    featured: int
    total_views: int
    total_likes: int


class LikeResponse(BaseModel):
    success: bool = True
    likes: int


# ============== Software ==============

class SoftwareImage(BaseModel):
    url: str
    alt: str = ""


class SoftwareCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    url: str = Field(..., min_length=1, max_length=500)
    image: Optional[str] = Field(None, max_length=500)
    images: List[SoftwareImage] = Field(default_factory=list)
    category: str = Field(DEFAULT_SHOWCASE_CATEGORY, max_length=100)
    features: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    status: SoftwareStatus = SoftwareStatus.ACTIVE
    launch_date: Optional[datetime] = None
    is_public: bool = True
    order: int = 0

    @field_validator('url')
    @classmethod
    def check_url(cls, v):
        return _check_url(v)

    @field_validator('features', 'technologies')
    @classmethod
    def clean_lists(cls, v):
        return _clean_list(v)

    @field_validator('category')
    @classmethod
    def clean_category(cls, v):
        return _clean_category(v)


class SoftwareUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    url: Optional[str] = Field(None, min_length=1, max_length=500)
    image: Optional[str] = Field(None, max_length=500)
    images: Optional[List[SoftwareImage]] = None
    category: Optional[str] = Field(None, max_length=100)
    features: Optional[List[str]] = None
    technologies: Optional[List[str]] = None
    status: Optional[SoftwareStatus] = None
    launch_date: Optional[datetime] = None
    is_public: Optional[bool] = None
    order: Optional[int] = None

    @field_validator('url')
    @classmethod
    def check_url(cls, v):
        return _check_url(v)

    @field_validator('features', 'technologies')
    @classmethod
    def clean_lists(cls, v):
        return _clean_list(v)

    @field_validator('category')
    @classmethod
    def clean_category(cls, v):
        return _clean_category(v)


class SoftwareResponse(BaseModel):
    id: str
    name: str
    description: str
    url: str
    image: Optional[str] = None
    images: List[SoftwareImage] = []
    category: str
    features: List[str] = []
    technologies: List[str] = []
    status: SoftwareStatus
    launch_date: Optional[datetime] = None
    is_public: bool
    order: int
    views: int
    clicks: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SoftwareListResponse(PageMeta):
    items: List[SoftwareResponse]


class SoftwareTopItem(BaseModel):
    id: str
    name: str
    clicks: int
    views: int


class SoftwareStats(BaseModel):
    total: int
    active: int
    by_status: dict
    total_views: int
    total_clicks: int
    top_by_clicks: List[SoftwareTopItem]


class ClickResponse(BaseModel):
    success: bool = True
    url: str
    clicks: int
