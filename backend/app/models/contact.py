from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Index
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, LowerCaseString, generate_uuid, sql_enum


class ContactStatus(str, enum.Enum):
    PENDING = "pending"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class Contact(Base):
    """Message submitted through the contact form"""
    __tablename__ = "contacts"

    __table_args__ = (
        Index('ix_contacts_status_created', 'status', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    email = Column(LowerCaseString, nullable=False, index=True)
    subject = Column(String(200), nullable=True)
    message = Column(Text, nullable=False)

    status = Column(sql_enum(ContactStatus), default=ContactStatus.PENDING, nullable=False)

    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    read_at = Column(DateTime, nullable=True)
    replied_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Contact {self.email} ({self.status})>"
