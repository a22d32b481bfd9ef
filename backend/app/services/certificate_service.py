"""
Certificate Service - award certificates for nominations

Pipeline:
1. Certificate ID  {WIN|FIN|PAR|CER}-{year}-{ID6}-{RAND4}
2. PDF rendered with the reportlab canvas (A4 landscape, 842x595)
   with a QR code pointing at the public verification URL
3. PDF written to UPLOAD_DIR/certificates/certificate_{id}.pdf
4. Certificate row upserted by certificate ID

The signature drawn on certificates is uploaded by an admin and
described by a JSON sidecar (signature-info.json) next to the image.
"""

import io
import json
import secrets
import string
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import aiofiles
import qrcode
from fastapi import UploadFile
from qrcode.constants import ERROR_CORRECT_H
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    CertificateError,
    CertificateGenerationError,
    ResourceNotFoundError,
    SAPTechError,
)
from app.core.logging_config import logger
from app.models.award import Nomination, NominationStatus
from app.models.certificate import Certificate, CertificateStatus, CertificateType
from app.services.storage_service import (
    FOLDER_CERTIFICATES,
    FOLDER_SIGNATURES,
    StorageService,
    storage_service,
)
from app.utils.pagination import paginate
from app.utils.query_filters import search_filter

PAGE_WIDTH, PAGE_HEIGHT = landscape(A4)

ID_PREFIXES = {
    NominationStatus.WINNER: "WIN",
    NominationStatus.FINALIST: "FIN",
    NominationStatus.APPROVED: "PAR",
}

STATUS_TO_TYPE = {
    NominationStatus.WINNER: CertificateType.WINNER,
    NominationStatus.FINALIST: CertificateType.FINALIST,
    NominationStatus.APPROVED: CertificateType.PARTICIPATION,
}

BASE36_UPPER = string.digits + string.ascii_uppercase

SIGNATURE_INFO_FILE = "signature-info.json"
MIN_SIGNATURE_BYTES = 1024

Color = Tuple[float, float, float]


@dataclass(frozen=True)
class CertificateStyle:
    """Wording and colours that differ between certificate types"""
    accent: Color
    title: str
    lead_in: str
    banner: str
    category_prefix: str
    category_color: Color
    recognition: str


CERTIFICATE_STYLES: Dict[CertificateType, CertificateStyle] = {
    CertificateType.WINNER: CertificateStyle(
        accent=(0.96, 0.62, 0.07),
        title="CERTIFICATE OF ACHIEVEMENT",
        lead_in="has been awarded the",
        banner="* * * WINNER * * *",
        category_prefix="WINNER - ",
        category_color=(0.8, 0.1, 0.1),
        recognition="in recognition of outstanding excellence in engineering and technology",
    ),
    CertificateType.FINALIST: CertificateStyle(
        accent=(0.75, 0.75, 0.75),
        title="CERTIFICATE OF ACHIEVEMENT",
        lead_in="has been named a",
        banner="* * * FINALIST * * *",
        category_prefix="FINALIST - ",
        category_color=(0.4, 0.4, 0.4),
        recognition="in recognition of outstanding achievement in engineering and technology",
    ),
    CertificateType.PARTICIPATION: CertificateStyle(
        accent=(0.8, 0.5, 0.2),
        title="CERTIFICATE OF PARTICIPATION",
        lead_in="participated in the",
        banner="* * * SAPHANIOX AWARDS * * *",
        category_prefix="",
        category_color=(0.4, 0.4, 0.4),
        recognition="demonstrating commitment to excellence in engineering and technology",
    ),
}


def certificate_type_for_status(status: NominationStatus) -> CertificateType:
    """Certificate type earned by a nomination status"""
    try:
        return STATUS_TO_TYPE[NominationStatus(status)]
    except (KeyError, ValueError):
        raise CertificateError(
            f"Certificates can only be generated for approved, finalist or winner nominations "
            f"(status: {getattr(status, 'value', status)})"
        )


def generate_certificate_id(nomination_id: str, status, year: Optional[int] = None) -> str:
    """
    {PREFIX}-{YEAR}-{ID6}-{RAND4}

    PREFIX is WIN / FIN / PAR by status (CER otherwise), ID6 the first six
    characters of the nomination id without dashes, RAND4 four random
    upper-case base-36 characters.
    """
    try:
        prefix = ID_PREFIXES.get(NominationStatus(status), "CER")
    except ValueError:
        prefix = "CER"
    year = year or datetime.utcnow().year
    id_part = str(nomination_id).replace("-", "")[:6].upper()
    random_part = "".join(secrets.choice(BASE36_UPPER) for _ in range(4))
    return f"{prefix}-{year}-{id_part}-{random_part}"


def certificate_filename(certificate_id: str) -> str:
    return f"certificate_{certificate_id}.pdf"


def build_qr_png(data: str, box_size: int = 10) -> bytes:
    """PNG bytes of a high error correction QR code"""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=box_size, border=1)
    qr.add_data(data)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer)
    return buffer.getvalue()


@dataclass
class CertificateContent:
    """Everything printed on a certificate"""
    recipient_name: str
    category_name: str
    certificate_type: CertificateType
    certificate_id: str
    award_year: str
    issue_date: datetime
    verification_url: str


class CertificateRenderer:
    """Draws a certificate onto a reportlab canvas"""

    def __init__(
        self,
        awards_name: str = settings.AWARDS_NAME,
        company_name: str = settings.COMPANY_NAME,
        company_website: str = settings.COMPANY_WEBSITE,
        logo_path: Optional[str] = settings.CERTIFICATE_LOGO_PATH,
    ):
        self.awards_name = awards_name
        self.company_name = company_name
        self.company_website = company_website
        self.logo_path = logo_path

    @property
    def committee_name(self) -> str:
        return f"{self.awards_name.split()[0].upper()} Awards Committee"

    def render(self, content: CertificateContent, signature_path: Optional[Path] = None) -> bytes:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
        pdf.setTitle(f"{self.awards_name} {content.award_year} - {content.recipient_name}")
        pdf.setAuthor(self.company_name)
        pdf.setSubject(f"Certificate {content.certificate_id}")

        style = CERTIFICATE_STYLES[content.certificate_type]
        width, height = PAGE_WIDTH, PAGE_HEIGHT

        self._draw_borders(pdf, style.accent)
        self._draw_corners(pdf, style.accent)
        offset = self._draw_logo(pdf)
        self._draw_body(pdf, content, style, offset)
        self._draw_footer(pdf, content)
        self._draw_qr_code(pdf, content.verification_url, width - 150, 60, 80)

        if not self._draw_signature(pdf, signature_path, width - 250, 175, 120, 40):
            pdf.setStrokeColorRGB(0.2, 0.2, 0.2)
            pdf.setLineWidth(1)
            pdf.line(width - 250, 165, width - 100, 165)
            pdf.setFont("Times-Italic", 11)
            pdf.setFillColorRGB(0.3, 0.3, 0.3)
            pdf.drawCentredString(width - 175, 145, "Authorized Signature")

        pdf.setFont("Times-Roman", 10)
        pdf.setFillColorRGB(0.4, 0.4, 0.4)
        pdf.drawCentredString(width - 175, 125, self.committee_name)

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def _draw_borders(self, pdf: canvas.Canvas, accent: Color) -> None:
        pdf.setStrokeColorRGB(*accent)
        pdf.setLineWidth(15)
        pdf.rect(20, 20, PAGE_WIDTH - 40, PAGE_HEIGHT - 40, stroke=1, fill=0)
        pdf.setLineWidth(3)
        pdf.rect(40, 40, PAGE_WIDTH - 80, PAGE_HEIGHT - 80, stroke=1, fill=0)

    def _draw_corners(self, pdf: canvas.Canvas, accent: Color, inset: int = 50, size: int = 40) -> None:
        w, h = PAGE_WIDTH, PAGE_HEIGHT
        pdf.setStrokeColorRGB(*accent)
        pdf.setLineWidth(2)
        for x, y, dx, dy in (
            (inset, h - inset, 1, -1),
            (w - inset, h - inset, -1, -1),
            (inset, inset, 1, 1),
            (w - inset, inset, -1, 1),
        ):
            pdf.line(x, y, x + dx * size, y)
            pdf.line(x, y, x, y + dy * size)

    def _draw_logo(self, pdf: canvas.Canvas) -> float:
        """Draw the logo at the top centre; returns how far to push the header down"""
        if not self.logo_path or not Path(self.logo_path).is_file():
            return 0
        logo_width, logo_height = 120, 60
        try:
            pdf.drawImage(
                ImageReader(self.logo_path),
                PAGE_WIDTH / 2 - logo_width / 2,
                PAGE_HEIGHT - 80,
                width=logo_width,
                height=logo_height,
                mask="auto",
            )
        except Exception as e:
            logger.warning(f"[Certificate] Skipping logo: {e}")
            return 0
        return logo_height + 15

    def _draw_body(self, pdf: canvas.Canvas, content: CertificateContent,
                   style: CertificateStyle, offset: float) -> None:
        cx = PAGE_WIDTH / 2
        top = PAGE_HEIGHT - offset

        pdf.setFillColorRGB(*style.accent)
        pdf.setFont("Times-Bold", 40)
        pdf.drawCentredString(cx, top - 100, self.awards_name)

        pdf.setFillColorRGB(0.2, 0.2, 0.2)
        pdf.setFont("Helvetica-Bold", 28)
        pdf.drawCentredString(cx, top - 135, content.award_year)

        pdf.setFillColorRGB(0.3, 0.3, 0.3)
        pdf.setFont("Times-Roman", 18)
        pdf.drawCentredString(cx, top - 180, style.title)

        pdf.setStrokeColorRGB(*style.accent)
        pdf.setLineWidth(2)
        pdf.line(cx - 200, top - 195, cx + 200, top - 195)

        pdf.setFillColorRGB(0.2, 0.2, 0.2)
        pdf.setFont("Times-Italic", 15)
        pdf.drawCentredString(cx, top - 230, "This is to certify that")

        name_size = 34
        name_width = pdf.stringWidth(content.recipient_name, "Times-Bold", name_size)
        pdf.setFillColorRGB(0.1, 0.1, 0.5)
        pdf.setFont("Times-Bold", name_size)
        pdf.drawCentredString(cx, top - 270, content.recipient_name)
        pdf.line(cx - name_width / 2 - 10, top - 280, cx + name_width / 2 + 10, top - 280)

        pdf.setFillColorRGB(0.2, 0.2, 0.2)
        pdf.setFont("Times-Italic", 14)
        pdf.drawCentredString(cx, top - 310, style.lead_in)

        pdf.setFillColorRGB(*style.accent)
        pdf.setFont("Times-Bold", 17)
        pdf.drawCentredString(cx, top - 338, style.banner)

        pdf.setFillColorRGB(*style.category_color)
        pdf.setFont("Times-Bold", 20)
        pdf.drawCentredString(cx, top - 370, f"{style.category_prefix}{content.category_name}")

        pdf.setFillColorRGB(0.3, 0.3, 0.3)
        pdf.setFont("Times-Italic", 12)
        pdf.drawCentredString(cx, top - 400, style.recognition)

        pdf.setFillColorRGB(0.5, 0.5, 0.5)
        pdf.setFont("Times-Italic", 9)
        pdf.drawCentredString(cx, top - 435, f"Powered by {self.company_name}")

        pdf.setFillColorRGB(0.4, 0.4, 0.4)
        pdf.setFont("Times-Roman", 11)
        pdf.drawCentredString(cx, top - 455, self.company_website)

    def _draw_footer(self, pdf: canvas.Canvas, content: CertificateContent) -> None:
        pdf.setFillColorRGB(0.2, 0.2, 0.2)
        pdf.setFont("Times-Roman", 12)
        pdf.drawString(100, 145, f"Date: {content.issue_date.strftime('%B %d, %Y').replace(' 0', ' ')}")

        pdf.setFillColorRGB(0.5, 0.5, 0.5)
        pdf.setFont("Times-Roman", 10)
        pdf.drawString(100, 120, f"Certificate ID: {content.certificate_id}")

    def _draw_qr_code(self, pdf: canvas.Canvas, url: str, x: float, y: float, size: float) -> bool:
        try:
            qr_png = build_qr_png(url)
            pdf.drawImage(ImageReader(io.BytesIO(qr_png)), x, y, width=size, height=size)
        except Exception as e:
            logger.warning(f"[Certificate] QR code not drawn: {e}")
            return False

        pdf.setFillColorRGB(0.4, 0.4, 0.4)
        pdf.setFont("Times-Italic", 8)
        pdf.drawCentredString(x + size / 2, y - 15, "Scan to Verify")
        return True

    def _draw_signature(self, pdf: canvas.Canvas, path: Optional[Path],
                        x: float, y: float, width: float, height: float) -> bool:
        if path is None or not path.is_file():
            return False
        try:
            pdf.drawImage(ImageReader(str(path)), x, y, width=width, height=height, mask="auto")
            return True
        except Exception as e:
            logger.warning(f"[Certificate] Signature not drawn, using text line: {e}")
            return False


class SignatureStore:
    """Admin-uploaded signature image plus its JSON sidecar"""

    def __init__(self, storage: StorageService):
        self.storage = storage

    @property
    def info_path(self) -> Path:
        return self.storage.folder_path(FOLDER_SIGNATURES) / SIGNATURE_INFO_FILE

    async def read_info(self) -> Optional[Dict[str, Any]]:
        if not self.info_path.is_file():
            return None
        async with aiofiles.open(self.info_path, "r", encoding="utf-8") as f:
            try:
                return json.loads(await f.read())
            except json.JSONDecodeError:
                logger.warning("[Signature] Sidecar is not valid JSON")
                return None

    async def get_current(self) -> Optional[Dict[str, Any]]:
        """Sidecar info when the referenced image exists, flagged corrupted when under 1KB"""
        info = await self.read_info()
        if not info or not info.get("filename"):
            return None
        path = self.storage.resolve(FOLDER_SIGNATURES, info["filename"])
        if not path.is_file():
            return None
        size = path.stat().st_size
        info["corrupted"] = size < MIN_SIGNATURE_BYTES
        info["actual_size"] = size
        return info

    async def current_image_path(self) -> Optional[Path]:
        info = await self.get_current()
        if not info or info.get("corrupted"):
            return None
        return self.storage.resolve(FOLDER_SIGNATURES, info["filename"])

    async def save(self, upload: UploadFile, uploaded_by: Optional[str] = None) -> Dict[str, Any]:
        """Store a new signature, replacing any existing one"""
        stored = await self.storage.save_upload(
            upload,
            FOLDER_SIGNATURES,
            allowed_types=settings.ALLOWED_SIGNATURE_TYPES,
            prefix="signature",
        )
        await self.delete(keep=stored.filename)

        info = {
            "filename": stored.filename,
            "original_name": stored.original_name,
            "mimetype": stored.content_type,
            "size": stored.size,
            "uploaded_at": datetime.utcnow().isoformat(),
            "uploaded_by": uploaded_by,
            "url": stored.url,
        }
        async with aiofiles.open(self.info_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(info, indent=2))
        logger.info(f"[Signature] Uploaded {stored.filename} ({stored.size} bytes)")
        return info

    async def delete(self, keep: Optional[str] = None) -> bool:
        """Remove the current signature image and sidecar"""
        info = await self.read_info()
        removed = False
        if info and info.get("filename") and info["filename"] != keep:
            removed = await self.storage.delete(FOLDER_SIGNATURES, info["filename"])
        if self.info_path.is_file():
            self.info_path.unlink()
            removed = True
        return removed

    async def status(self) -> Dict[str, Any]:
        info = await self.read_info()
        if not info:
            return {"configured": False, "file_exists": False, "corrupted": False, "info": None}
        current = await self.get_current()
        return {
            "configured": True,
            "file_exists": current is not None,
            "corrupted": bool(current and current.get("corrupted")),
            "info": info,
        }


class CertificateService:
    """Generate, store, verify and revoke nomination certificates"""

    def __init__(
        self,
        storage: StorageService = storage_service,
        renderer: Optional[CertificateRenderer] = None,
    ):
        self.storage = storage
        self.renderer = renderer or CertificateRenderer()
        self.signatures = SignatureStore(storage)

    @staticmethod
    def download_url(filename: str) -> str:
        return f"{settings.API_PREFIX}/certificates/download/{filename}"

    async def render(self, content: CertificateContent) -> bytes:
        signature_path = await self.signatures.current_image_path()
        try:
            return self.renderer.render(content, signature_path)
        except Exception as e:
            logger.log_error_with_context(e, "certificate rendering", certificate_id=content.certificate_id)
            raise CertificateGenerationError(f"Failed to render certificate: {e}", content.certificate_id)

    async def generate_for_nomination(
        self,
        db: AsyncSession,
        nomination: Nomination,
        generated_by: Optional[str] = None,
    ) -> Certificate:
        """
        Render and store the certificate for an eligible nomination.

        An existing certificate ID on the nomination is reused.
        """
        cert_type = certificate_type_for_status(nomination.status)
        certificate_id = nomination.certificate_id or generate_certificate_id(nomination.id, nomination.status)
        filename = certificate_filename(certificate_id)
        issue_date = datetime.utcnow()
        verification_url = settings.get_verification_url(certificate_id)

        content = CertificateContent(
            recipient_name=nomination.nominee_name,
            category_name=nomination.category_name,
            certificate_type=cert_type,
            certificate_id=certificate_id,
            award_year=settings.AWARD_YEAR,
            issue_date=issue_date,
            verification_url=verification_url,
        )
        pdf_bytes = await self.render(content)
        try:
            await self.storage.save_bytes(FOLDER_CERTIFICATES, filename, pdf_bytes)
        except OSError as e:
            logger.log_error_with_context(e, "certificate storage", certificate_id=certificate_id)
            raise CertificateGenerationError(f"Failed to store certificate: {e}", certificate_id)

        certificate = await self._upsert_record(
            db,
            certificate_id=certificate_id,
            recipient_name=nomination.nominee_name,
            recipient_email=nomination.nominator_email,
            category_name=content.category_name,
            certificate_type=cert_type,
            award_year=settings.AWARD_YEAR,
            issue_date=issue_date,
            file_name=filename,
            verification_url=verification_url,
            generated_by=generated_by,
            nomination_id=nomination.id,
        )

        nomination.certificate_id = certificate_id
        nomination.certificate_file = filename
        nomination.certificate_url = self.download_url(filename)
        nomination.certificate_generated_at = issue_date
        await db.commit()

        logger.info(
            f"[Certificate] Generated {certificate_id} ({cert_type.value}) for {nomination.nominee_name}",
            extra={"certificate_id": certificate_id, "nomination_id": nomination.id}
        )
        return certificate

    async def regenerate(
        self,
        db: AsyncSession,
        nomination: Nomination,
        generated_by: Optional[str] = None,
    ) -> Certificate:
        """
        Render again under the same ID.

        The new PDF is written first; a previous file under another name is
        removed only once the new one is stored.
        """
        old_file = nomination.certificate_file
        certificate = await self.generate_for_nomination(db, nomination, generated_by)
        if old_file and old_file != certificate.file_name:
            await self.storage.delete(FOLDER_CERTIFICATES, old_file)
        return certificate

    @staticmethod
    def _bulk_failure(nomination_id: str, nominee_name: str, error: SAPTechError) -> Dict[str, Any]:
        logger.warning(f"[Certificate] Bulk generation failed for {nomination_id}: {error.message}")
        return {
            "nomination_id": nomination_id,
            "nominee_name": nominee_name,
            "success": False,
            "error": error.message,
        }

    async def bulk_generate(
        self,
        db: AsyncSession,
        status: Optional[NominationStatus] = None,
        generated_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Generate certificates for every eligible nomination (optionally one status)"""
        statuses = [status] if status else list(STATUS_TO_TYPE.keys())
        result = await db.execute(
            select(Nomination)
            .where(Nomination.status.in_(statuses))
            .order_by(Nomination.created_at)
        )
        pending = [(n.id, n.nominee_name) for n in result.scalars().all()]

        results: List[Dict[str, Any]] = []
        for nomination_id, nominee_name in pending:
            # rollback expires loaded rows
            nomination = await db.get(Nomination, nomination_id)
            try:
                certificate = await self.generate_for_nomination(db, nomination, generated_by)
                results.append({
                    "nomination_id": nomination_id,
                    "nominee_name": nominee_name,
                    "success": True,
                    "certificate_id": certificate.certificate_id,
                })
            except OSError as e:
                await db.rollback()
                error = CertificateGenerationError(f"Failed to store certificate: {e}")
                results.append(self._bulk_failure(nomination_id, nominee_name, error))
            except (CertificateError, CertificateGenerationError) as e:
                await db.rollback()
                results.append(self._bulk_failure(nomination_id, nominee_name, e))

        succeeded = sum(1 for r in results if r["success"])
        logger.info(f"[Certificate] Bulk generation: {succeeded}/{len(results)} succeeded")
        return {
            "total": len(results),
            "succeeded": succeeded,
            "failed": len(results) - succeeded,
            "results": results,
        }

    async def delete_for_nomination(self, db: AsyncSession, nomination: Nomination) -> bool:
        """Remove the PDF and record, and clear the nomination's certificate fields"""
        if not nomination.certificate_id and not nomination.certificate_file:
            return False

        if nomination.certificate_file:
            await self.storage.delete(FOLDER_CERTIFICATES, nomination.certificate_file)

        if nomination.certificate_id:
            record = await self.get_by_certificate_id(db, nomination.certificate_id)
            if record:
                await db.delete(record)

        logger.info(f"[Certificate] Deleted {nomination.certificate_id} for nomination {nomination.id}")
        nomination.certificate_id = None
        nomination.certificate_file = None
        nomination.certificate_url = None
        nomination.certificate_generated_at = None
        await db.commit()
        return True

    async def revoke(self, db: AsyncSession, certificate_id: str) -> Certificate:
        certificate = await self.get_by_certificate_id(db, certificate_id)
        if not certificate:
            raise ResourceNotFoundError("Certificate", certificate_id)
        certificate.status = CertificateStatus.REVOKED
        await db.commit()
        logger.info(f"[Certificate] Revoked {certificate_id}")
        return certificate

    async def verify(self, db: AsyncSession, certificate_id: str) -> Optional[Certificate]:
        """Active certificate by ID, recording the verification; None otherwise"""
        result = await db.execute(
            select(Certificate).where(
                Certificate.certificate_id == certificate_id.strip().upper(),
                Certificate.status == CertificateStatus.ACTIVE,
            )
        )
        certificate = result.scalar_one_or_none()
        if not certificate:
            logger.info(f"[Certificate] Verification failed for {certificate_id}")
            return None

        certificate.verification_count = (certificate.verification_count or 0) + 1
        certificate.last_verified_at = datetime.utcnow()
        await db.commit()
        return certificate

    async def get_by_certificate_id(self, db: AsyncSession, certificate_id: str) -> Optional[Certificate]:
        result = await db.execute(
            select(Certificate).where(Certificate.certificate_id == certificate_id)
        )
        return result.scalar_one_or_none()

    async def list_certificates(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 20,
        search: Optional[str] = None,
        certificate_type: Optional[CertificateType] = None,
        status: Optional[CertificateStatus] = None,
        transform=None,
    ) -> dict:
        query = select(Certificate)
        if search and search.strip():
            query = query.where(search_filter(
                search,
                Certificate.recipient_name,
                Certificate.certificate_id,
                Certificate.category_name,
            ))
        if certificate_type:
            query = query.where(Certificate.certificate_type == certificate_type)
        if status:
            query = query.where(Certificate.status == status)
        query = query.order_by(Certificate.issue_date.desc())
        return await paginate(db, query, page, page_size, transform=transform)

    def file_path(self, filename: str) -> Path:
        """Path of a stored certificate PDF (basename only)"""
        path = self.storage.resolve(FOLDER_CERTIFICATES, filename)
        if path.suffix.lower() != ".pdf" or not path.is_file():
            raise ResourceNotFoundError("Certificate file", Path(filename).name)
        return path

    async def _upsert_record(self, db: AsyncSession, **fields) -> Certificate:
        certificate = await self.get_by_certificate_id(db, fields["certificate_id"])
        if certificate is None:
            certificate = Certificate(status=CertificateStatus.ACTIVE, verification_count=0, **fields)
            db.add(certificate)
        else:
            for key, value in fields.items():
                setattr(certificate, key, value)
        await db.flush()
        return certificate


certificate_service = CertificateService()
