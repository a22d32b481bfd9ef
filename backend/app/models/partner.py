from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey, Index
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Partner(Base):
    """Partner organisation shown on the public site"""
    __tablename__ = "partners"

    __table_args__ = (
        Index('ix_partners_active_order', 'is_active', 'order'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    logo = Column(String(500), nullable=False)
    website = Column(String(500), nullable=True)
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    order = Column(Integer, default=0, nullable=False)

    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Partner {self.name}>"
