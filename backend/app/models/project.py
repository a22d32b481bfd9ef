from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey, Text, Index, JSON
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, JSONList, generate_uuid, sql_enum


class ProjectCategory(str, enum.Enum):
    ECOMMERCE_PLATFORM = "E-commerce Platform"
    LEARNING_MANAGEMENT_SYSTEM = "Learning Management System"
    MOBILE_APPLICATION = "Mobile Application"
    IOT_SOLUTION = "IoT Solution"
    WEB_APPLICATION = "Web Application"
    PORTFOLIO_WEBSITE = "Portfolio Website"
    BUSINESS_PLATFORM = "Business Platform"
    GRAPHICS_DESIGN = "Graphics Design"
    ELECTRICAL_PROJECT = "Electrical Project"
    OTHER = "Other"


class ProjectStatus(str, enum.Enum):
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"
    CANCELLED = "cancelled"


class ProjectVisibility(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class Project(Base):
    """Portfolio project"""
    __tablename__ = "projects"

    __table_args__ = (
        Index('ix_projects_visibility', 'visibility'),
        Index('ix_projects_category', 'category'),
        Index('ix_projects_status', 'status'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)

    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    long_description = Column(Text, default="")
    category = Column(sql_enum(ProjectCategory), default=ProjectCategory.WEB_APPLICATION, nullable=False)
    status = Column(sql_enum(ProjectStatus), default=ProjectStatus.COMPLETED, nullable=False)

    # {name, company, industry, location, testimonial}
    client = Column(JSON, default=dict)

    technologies = Column(JSONList, default=list)
    # [{url, caption, is_primary}]
    images = Column(JSONList, default=list)
    # {live_demo, github, documentation}
    links = Column(JSON, default=dict)

    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)

    featured = Column(Boolean, default=False, nullable=False)
    visibility = Column(sql_enum(ProjectVisibility), default=ProjectVisibility.PUBLIC, nullable=False)
    order = Column(Integer, default=0, nullable=False)
    views = Column(Integer, default=0, nullable=False)

    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Project {self.title}>"

    @property
    def duration_days(self):
        if self.start_date and self.end_date:
            return (self.end_date - self.start_date).days
        return None
