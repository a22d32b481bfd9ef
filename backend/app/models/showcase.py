from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey, Text, Index
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, JSONList, generate_uuid, sql_enum

DEFAULT_SHOWCASE_CATEGORY = "General"


class IoTProjectStatus(str, enum.Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    PROTOTYPE = "prototype"
    PLANNING = "planning"


class SoftwareStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    COMING_SOON = "coming-soon"
    BETA = "beta"


class IoTProject(Base):
    """Hardware/IoT build shown in the IoT showcase"""
    __tablename__ = "iot_projects"

    __table_args__ = (
        Index('ix_iot_projects_public', 'is_public'),
        Index('ix_iot_projects_category', 'category'),
        Index('ix_iot_projects_status', 'status'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), default=DEFAULT_SHOWCASE_CATEGORY, nullable=False)
    status = Column(sql_enum(IoTProjectStatus), default=IoTProjectStatus.COMPLETED, nullable=False)

    technologies = Column(JSONList, default=list)
    hardware = Column(JSONList, default=list)
    features = Column(JSONList, default=list)
    # [{url, caption}]
    images = Column(JSONList, default=list)

    project_url = Column(String(500), nullable=True)
    github_url = Column(String(500), nullable=True)
    video_url = Column(String(500), nullable=True)
    completion_date = Column(DateTime, nullable=True)

    is_public = Column(Boolean, default=True, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    order = Column(Integer, default=0, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    likes = Column(Integer, default=0, nullable=False)

    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<IoTProject {self.title}>"


class SoftwareProduct(Base):
    """Software product or hosted tool linked from the software showcase"""
    __tablename__ = "software_products"

    __table_args__ = (
        Index('ix_software_products_public_status', 'is_public', 'status'),
        Index('ix_software_products_category', 'category'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    url = Column(String(500), nullable=False)
    image = Column(String(500), nullable=True)
    # [{url, alt}]
    images = Column(JSONList, default=list)
    category = Column(String(100), default=DEFAULT_SHOWCASE_CATEGORY, nullable=False)
    features = Column(JSONList, default=list)
    technologies = Column(JSONList, default=list)
    status = Column(sql_enum(SoftwareStatus), default=SoftwareStatus.ACTIVE, nullable=False)
    launch_date = Column(DateTime, nullable=True)

    is_public = Column(Boolean, default=True, nullable=False)
    order = Column(Integer, default=0, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    clicks = Column(Integer, default=0, nullable=False)

    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<SoftwareProduct {self.name}>"
