from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from app.models.award import NominationStatus
from app.models.certificate import CertificateType, CertificateStatus
from app.schemas.common import PageMeta


class CertificateResponse(BaseModel):
    id: str
    certificate_id: str
    recipient_name: str
    recipient_email: Optional[str] = None
    category_name: str
    certificate_type: CertificateType
    award_year: str
    issue_date: datetime
    file_name: str
    verification_url: str
    status: CertificateStatus
    verification_count: int
    last_verified_at: Optional[datetime] = None
    nomination_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CertificateListResponse(PageMeta):
    items: List[CertificateResponse]


class CertificateGenerateResponse(BaseModel):
    success: bool = True
    message: str
    certificate_id: str
    file_name: str
    download_url: str
    verification_url: str


class CertificateInfo(BaseModel):
    """Certificate fields of a nomination"""
    nomination_id: str
    nominee_name: str
    status: NominationStatus
    has_certificate: bool
    certificate_id: Optional[str] = None
    certificate_file: Optional[str] = None
    download_url: Optional[str] = None
    certificate_generated_at: Optional[datetime] = None


class BulkGenerateRequest(BaseModel):
    status: Optional[NominationStatus] = None


class BulkGenerateItem(BaseModel):
    nomination_id: str
    nominee_name: str
    success: bool
    certificate_id: Optional[str] = None
    error: Optional[str] = None


class BulkGenerateResponse(BaseModel):
    total: int
    succeeded: int
    failed: int
    results: List[BulkGenerateItem]


class CertificateVerifyResponse(BaseModel):
    valid: bool
    certificate_id: str
    recipient_name: Optional[str] = None
    category_name: Optional[str] = None
    certificate_type: Optional[CertificateType] = None
    award_year: Optional[str] = None
    issue_date: Optional[datetime] = None
    verification_count: Optional[int] = None
    message: Optional[str] = None


class SignatureInfo(BaseModel):
    filename: str
    original_name: Optional[str] = None
    mimetype: str
    size: int
    uploaded_at: datetime
    uploaded_by: Optional[str] = None
    url: str


class SignatureStatus(BaseModel):
    configured: bool
    file_exists: bool
    corrupted: bool
    info: Optional[SignatureInfo] = None
