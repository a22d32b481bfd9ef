"""
Admin certificate management: generation, revocation, listing and the
signature image drawn on every certificate.
"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models import CertificateStatus, CertificateType, User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.certificate import (
    BulkGenerateRequest,
    BulkGenerateResponse,
    CertificateGenerateResponse,
    CertificateListResponse,
    CertificateResponse,
    SignatureInfo,
    SignatureStatus,
)
from app.schemas.common import MessageResponse
from app.services.award_service import award_service
from app.services.certificate_service import certificate_service

router = APIRouter()


def _generated(certificate, message: str) -> CertificateGenerateResponse:
    return CertificateGenerateResponse(
        message=message,
        certificate_id=certificate.certificate_id,
        file_name=certificate.file_name,
        download_url=certificate_service.download_url(certificate.file_name),
        verification_url=certificate.verification_url,
    )


@router.get("", response_model=CertificateListResponse)
async def list_certificates(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    certificate_type: Optional[CertificateType] = Query(None, alias="type"),
    certificate_status: Optional[CertificateStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await certificate_service.list_certificates(
        db,
        page=page,
        page_size=page_size,
        search=search,
        certificate_type=certificate_type,
        status=certificate_status,
        transform=CertificateResponse.model_validate,
    )


@router.post("/generate/{nomination_id}", response_model=CertificateGenerateResponse)
async def generate_certificate(
    nomination_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    nomination = await award_service.get_nomination(db, nomination_id, public=False)
    certificate = await certificate_service.generate_for_nomination(db, nomination, current_admin.id)
    logger.log_admin_action("generate", "certificate", certificate.certificate_id, nomination_id=nomination_id)
    return _generated(certificate, "Certificate generated successfully")


@router.post("/regenerate/{nomination_id}", response_model=CertificateGenerateResponse)
async def regenerate_certificate(
    nomination_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    nomination = await award_service.get_nomination(db, nomination_id, public=False)
    certificate = await certificate_service.regenerate(db, nomination, current_admin.id)
    logger.log_admin_action("regenerate", "certificate", certificate.certificate_id, nomination_id=nomination_id)
    return _generated(certificate, "Certificate regenerated successfully")


@router.post("/bulk", response_model=BulkGenerateResponse)
async def bulk_generate_certificates(
    payload: Optional[BulkGenerateRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Generate certificates for all eligible nominations"""
    status_filter = payload.status if payload else None
    result = await certificate_service.bulk_generate(db, status=status_filter, generated_by=current_admin.id)
    logger.log_admin_action(
        "bulk_generate", "certificate",
        total=result["total"], succeeded=result["succeeded"], admin_id=current_admin.id
    )
    return result


@router.delete("/nomination/{nomination_id}", response_model=MessageResponse)
async def delete_certificate(
    nomination_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    nomination = await award_service.get_nomination(db, nomination_id, public=False)
    if not await certificate_service.delete_for_nomination(db, nomination):
        raise HTTPException(status_code=404, detail="Nomination has no certificate")
    logger.log_admin_action("delete", "certificate", nomination_id=nomination_id)
    return MessageResponse(message="Certificate deleted")


@router.post("/{certificate_id}/revoke", response_model=CertificateResponse)
async def revoke_certificate(
    certificate_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    certificate = await certificate_service.revoke(db, certificate_id)
    logger.log_admin_action("revoke", "certificate", certificate_id, admin_id=current_admin.id)
    return certificate


# ============== Signature ==============

@router.post("/signature", response_model=SignatureInfo)
async def upload_signature(
    signature: UploadFile = File(...),
    current_admin: User = Depends(get_current_admin)
):
    """Upload the signature image; replaces any existing one"""
    info = await certificate_service.signatures.save(signature, uploaded_by=current_admin.email)
    logger.log_admin_action("upload", "signature", info["filename"], admin_id=current_admin.id)
    return info


@router.get("/signature", response_model=SignatureInfo)
async def get_signature(current_admin: User = Depends(get_current_admin)):
    info = await certificate_service.signatures.get_current()
    if not info:
        raise HTTPException(status_code=404, detail="No signature configured")
    return info


@router.get("/signature/status", response_model=SignatureStatus)
async def signature_status(current_admin: User = Depends(get_current_admin)):
    return await certificate_service.signatures.status()


@router.delete("/signature", response_model=MessageResponse)
async def delete_signature(current_admin: User = Depends(get_current_admin)):
    if not await certificate_service.signatures.delete():
        raise HTTPException(status_code=404, detail="No signature configured")
    logger.log_admin_action("delete", "signature", admin_id=current_admin.id)
    return MessageResponse(message="Signature deleted")
