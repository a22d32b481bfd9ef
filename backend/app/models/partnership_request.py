from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Index
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, LowerCaseString, generate_uuid, sql_enum


class PartnershipRequestStatus(str, enum.Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    REJECTED = "rejected"


class PartnershipRequest(Base):
    """Request from a company that wants to become a partner"""
    __tablename__ = "partnership_requests"

    __table_args__ = (
        Index('ix_partnership_requests_status_created', 'status', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    company_name = Column(String(200), nullable=False)
    contact_person = Column(String(200), nullable=True)
    contact_email = Column(LowerCaseString, nullable=False, index=True)
    website = Column(String(500), nullable=True)
    description = Column(Text, nullable=False)
    partnership_type = Column(String(100), nullable=True)

    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = Column(sql_enum(PartnershipRequestStatus), default=PartnershipRequestStatus.PENDING, nullable=False)
    admin_notes = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<PartnershipRequest {self.company_name} ({self.status})>"
