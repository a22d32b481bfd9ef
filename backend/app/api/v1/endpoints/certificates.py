"""
Public certificate endpoints: verification, download and nomination info
"""
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.certificate import CertificateInfo, CertificateVerifyResponse
from app.services.award_service import award_service
from app.services.certificate_service import certificate_service

router = APIRouter()


@router.get("/verify/{certificate_id}", response_model=CertificateVerifyResponse)
async def verify_certificate(certificate_id: str, db: AsyncSession = Depends(get_db)):
    """Check a certificate ID (the QR code on every certificate points here)"""
    certificate = await certificate_service.verify(db, certificate_id)
    if not certificate:
        return JSONResponse(
            status_code=404,
            content=CertificateVerifyResponse(
                valid=False,
                certificate_id=certificate_id,
                message="Certificate not found or no longer valid",
            ).model_dump(mode="json"),
        )

    return CertificateVerifyResponse(
        valid=True,
        certificate_id=certificate.certificate_id,
        recipient_name=certificate.recipient_name,
        category_name=certificate.category_name,
        certificate_type=certificate.certificate_type,
        award_year=certificate.award_year,
        issue_date=certificate.issue_date,
        verification_count=certificate.verification_count,
        message="Certificate is valid",
    )


@router.get("/download/{filename}")
async def download_certificate(filename: str):
    path = certificate_service.file_path(filename)
    return FileResponse(path, media_type="application/pdf", filename=path.name)


@router.get("/nomination/{nomination_id}", response_model=CertificateInfo)
async def certificate_info(
    nomination_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Certificate fields of a nomination"""
    nomination = await award_service.get_nomination(db, nomination_id, public=False)
    return CertificateInfo(
        nomination_id=nomination.id,
        nominee_name=nomination.nominee_name,
        status=nomination.status,
        has_certificate=bool(nomination.certificate_id),
        certificate_id=nomination.certificate_id,
        certificate_file=nomination.certificate_file,
        download_url=nomination.certificate_url,
        certificate_generated_at=nomination.certificate_generated_at,
    )
