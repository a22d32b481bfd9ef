from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Index
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, LowerCaseString, generate_uuid, sql_enum


class CertificateType(str, enum.Enum):
    WINNER = "winner"
    FINALIST = "finalist"
    PARTICIPATION = "participation"


class CertificateStatus(str, enum.Enum):
    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"


class Certificate(Base):
    """Issued award certificate, looked up by the public verify endpoint"""
    __tablename__ = "certificates"

    __table_args__ = (
        Index('ix_certificates_status', 'status'),
        Index('ix_certificates_recipient_email', 'recipient_email'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    certificate_id = Column(String(50), unique=True, index=True, nullable=False)

    recipient_name = Column(String(100), nullable=False)
    recipient_email = Column(LowerCaseString, nullable=True)
    category_name = Column(String(100), nullable=False)
    certificate_type = Column(sql_enum(CertificateType), nullable=False)
    award_year = Column(String(4), nullable=False)
    issue_date = Column(DateTime, default=datetime.utcnow, nullable=False)

    file_name = Column(String(255), nullable=False)
    verification_url = Column(String(500), nullable=False)

    status = Column(sql_enum(CertificateStatus), default=CertificateStatus.ACTIVE, nullable=False)
    verification_count = Column(Integer, default=0, nullable=False)
    last_verified_at = Column(DateTime, nullable=True)

    generated_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    nomination_id = Column(GUID, ForeignKey("nominations.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Certificate {self.certificate_id} ({self.status})>"
