from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from app.models.project import ProjectCategory, ProjectStatus, ProjectVisibility
from app.schemas.common import PageMeta


class ProjectClient(BaseModel):
    name: str = Field("", max_length=100)
    company: str = Field("", max_length=100)
    industry: str = Field("", max_length=100)
    location: str = Field("", max_length=100)
    testimonial: str = Field("", max_length=1000)


class ProjectImage(BaseModel):
    url: str
    caption: str = ""
    is_primary: bool = False


class ProjectLinks(BaseModel):
    live_demo: str = ""
    github: str = ""
    documentation: str = ""


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    long_description: str = Field("", max_length=5000)
    category: ProjectCategory = ProjectCategory.WEB_APPLICATION
    status: ProjectStatus = ProjectStatus.COMPLETED
    client: ProjectClient = Field(default_factory=ProjectClient)
    technologies: List[str] = Field(default_factory=list)
    images: List[ProjectImage] = Field(default_factory=list)
    links: ProjectLinks = Field(default_factory=ProjectLinks)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    featured: bool = False
    visibility: ProjectVisibility = ProjectVisibility.PUBLIC
    order: int = 0

    @field_validator('technologies')
    @classmethod
    def clean_technologies(cls, v):
        return [t.strip() for t in v if t and t.strip()]

    @model_validator(mode='after')
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    long_description: Optional[str] = Field(None, max_length=5000)
    category: Optional[ProjectCategory] = None
    status: Optional[ProjectStatus] = None
    client: Optional[ProjectClient] = None
    technologies: Optional[List[str]] = None
    images: Optional[List[ProjectImage]] = None
    links: Optional[ProjectLinks] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    featured: Optional[bool] = None
    visibility: Optional[ProjectVisibility] = None
    order: Optional[int] = None


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: str
    long_description: Optional[str] = ""
    category: ProjectCategory
    status: ProjectStatus
    client: ProjectClient = Field(default_factory=ProjectClient)
    technologies: List[str] = []
    images: List[ProjectImage] = []
    links: ProjectLinks = Field(default_factory=ProjectLinks)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration_days: Optional[int] = None
    featured: bool
    visibility: ProjectVisibility
    order: int
    views: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator('client', 'links', mode='before')
    @classmethod
    def empty_dict(cls, v):
        return v or {}

    class Config:
        from_attributes = True


class ProjectListResponse(PageMeta):
    items: List[ProjectResponse]
