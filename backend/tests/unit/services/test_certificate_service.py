"""
Unit Tests for certificate IDs, type mapping, PDF rendering and the
signature store
"""
import io
import re
import pytest
from datetime import datetime
from pathlib import Path
from starlette.datastructures import Headers
from fastapi import UploadFile

from app.core.exceptions import CertificateError
from app.models.award import NominationStatus
from app.models.certificate import CertificateType
from app.services.certificate_service import (
    CertificateContent,
    CertificateRenderer,
    SignatureStore,
    build_qr_png,
    certificate_filename,
    certificate_type_for_status,
    generate_certificate_id,
)
from app.services.storage_service import StorageService

ID_PATTERN = re.compile(r"^(WIN|FIN|PAR|CER)-\d{4}-[0-9A-Z]{6}-[0-9A-Z]{4}$")
NOMINATION_ID = "3f2a9c1e-8b7d-4e6f-a5b4-c3d2e1f0a9b8"


def _upload(data: bytes, content_type: str = "image/png", filename: str = "signature.png") -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


class TestCertificateIds:

    @pytest.mark.parametrize("status,prefix", [
        (NominationStatus.WINNER, "WIN"),
        (NominationStatus.FINALIST, "FIN"),
        (NominationStatus.APPROVED, "PAR"),
        (NominationStatus.PENDING, "CER"),
    ])
    def test_prefix_by_status(self, status, prefix):
        certificate_id = generate_certificate_id(NOMINATION_ID, status, year=2025)

        assert certificate_id.startswith(f"{prefix}-2025-3F2A9C-")
        assert ID_PATTERN.match(certificate_id)

    def test_unknown_status_uses_generic_prefix(self):
        assert generate_certificate_id(NOMINATION_ID, "something-else").startswith("CER-")

    def test_defaults_to_current_year(self):
        certificate_id = generate_certificate_id(NOMINATION_ID, NominationStatus.WINNER)
        assert certificate_id.split("-")[1] == str(datetime.utcnow().year)

    def test_random_suffix_varies(self):
        ids = {generate_certificate_id(NOMINATION_ID, NominationStatus.WINNER, 2025) for _ in range(20)}
        assert len(ids) > 1

    def test_filename(self):
        assert certificate_filename("WIN-2025-ABCDEF-1234") == "certificate_WIN-2025-ABCDEF-1234.pdf"


class TestCertificateType:

    def test_eligible_statuses(self):
        assert certificate_type_for_status(NominationStatus.WINNER) == CertificateType.WINNER
        assert certificate_type_for_status(NominationStatus.FINALIST) == CertificateType.FINALIST
        assert certificate_type_for_status(NominationStatus.APPROVED) == CertificateType.PARTICIPATION

    @pytest.mark.parametrize("status", [NominationStatus.PENDING, NominationStatus.REJECTED])
    def test_ineligible_statuses(self, status):
        with pytest.raises(CertificateError) as exc_info:
            certificate_type_for_status(status)
        assert exc_info.value.status_code == 400


class TestRendering:

    def _content(self, certificate_type=CertificateType.WINNER) -> CertificateContent:
        return CertificateContent(
            recipient_name="Jane Namukasa",
            category_name="Innovation Excellence",
            certificate_type=certificate_type,
            certificate_id="WIN-2025-ABCDEF-1234",
            award_year="2025",
            issue_date=datetime(2025, 11, 20),
            verification_url="https://www.sap-technologies.com/verify/WIN-2025-ABCDEF-1234",
        )

    def test_qr_png(self):
        assert build_qr_png("https://example.com/verify/X").startswith(b"\x89PNG")

    @pytest.mark.parametrize("certificate_type", list(CertificateType))
    def test_render_produces_pdf(self, certificate_type):
        pdf = CertificateRenderer(logo_path="").render(self._content(certificate_type))

        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_missing_logo_and_signature_do_not_abort(self, tmp_path: Path):
        renderer = CertificateRenderer(logo_path=str(tmp_path / "missing-logo.png"))
        pdf = renderer.render(self._content(), signature_path=tmp_path / "missing-signature.png")
        assert pdf.startswith(b"%PDF")

    def test_committee_name(self):
        assert CertificateRenderer(awards_name="SAPHANIOX AWARDS").committee_name == "SAPHANIOX Awards Committee"


class TestSignatureStore:

    @pytest.fixture
    def store(self, tmp_path: Path) -> SignatureStore:
        return SignatureStore(StorageService(base_dir=tmp_path))

    @pytest.mark.asyncio
    async def test_status_when_unconfigured(self, store):
        status = await store.status()
        assert status == {"configured": False, "file_exists": False, "corrupted": False, "info": None}

    @pytest.mark.asyncio
    async def test_save_writes_sidecar(self, store):
        info = await store.save(_upload(b"\x89PNG" + b"\x00" * 2048), uploaded_by="admin@example.com")

        assert info["mimetype"] == "image/png"
        assert info["uploaded_by"] == "admin@example.com"
        assert store.info_path.is_file()
        current = await store.get_current()
        assert current["filename"] == info["filename"]
        assert current["corrupted"] is False
        assert await store.current_image_path() is not None

    @pytest.mark.asyncio
    async def test_small_signature_flagged_corrupted(self, store):
        await store.save(_upload(b"\x89PNG tiny"))
        status = await store.status()

        assert status["configured"] is True
        assert status["corrupted"] is True
        assert await store.current_image_path() is None

    @pytest.mark.asyncio
    async def test_new_upload_replaces_old_file(self, store):
        first = await store.save(_upload(b"A" * 2048))
        second = await store.save(_upload(b"B" * 2048))

        folder = store.info_path.parent
        assert not (folder / first["filename"]).exists()
        assert (folder / second["filename"]).exists()

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.save(_upload(b"A" * 2048))

        assert await store.delete() is True
        assert await store.get_current() is None
        assert await store.delete() is False

    @pytest.mark.asyncio
    async def test_rejects_non_image(self, store):
        from app.core.exceptions import InvalidFileTypeError
        with pytest.raises(InvalidFileTypeError):
            await store.save(_upload(b"GIF89a" + b"0" * 2048, content_type="image/gif", filename="sig.gif"))


class TestCertificateService:

    @pytest.fixture
    def service(self, tmp_path: Path):
        from app.services.certificate_service import CertificateService
        return CertificateService(
            storage=StorageService(base_dir=tmp_path),
            renderer=CertificateRenderer(logo_path=""),
        )

    @pytest.mark.asyncio
    async def test_generate_for_winner(self, service, db_session, make_nomination):
        nomination = await make_nomination(NominationStatus.WINNER)

        certificate = await service.generate_for_nomination(db_session, nomination)

        assert certificate.certificate_id.startswith("WIN-")
        assert certificate.certificate_type == CertificateType.WINNER
        assert certificate.category_name == "Innovation Excellence"
        assert nomination.certificate_id == certificate.certificate_id
        assert nomination.certificate_url.endswith(certificate.file_name)
        assert service.file_path(certificate.file_name).read_bytes().startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_pending_nomination_rejected(self, service, db_session, make_nomination):
        nomination = await make_nomination(NominationStatus.PENDING)

        with pytest.raises(CertificateError):
            await service.generate_for_nomination(db_session, nomination)

    @pytest.mark.asyncio
    async def test_regenerate_keeps_id(self, service, db_session, make_nomination):
        nomination = await make_nomination(NominationStatus.FINALIST)
        first = await service.generate_for_nomination(db_session, nomination)
        first_id = first.certificate_id

        second = await service.regenerate(db_session, nomination)

        assert second.certificate_id == first_id
        assert service.file_path(second.file_name).is_file()

    @pytest.mark.asyncio
    async def test_verify_counts_and_normalizes(self, service, db_session, make_nomination):
        nomination = await make_nomination(NominationStatus.APPROVED)
        certificate = await service.generate_for_nomination(db_session, nomination)

        verified = await service.verify(db_session, f"  {certificate.certificate_id.lower()} ")

        assert verified is not None
        assert verified.verification_count == 1
        assert verified.last_verified_at is not None

    @pytest.mark.asyncio
    async def test_revoked_certificate_does_not_verify(self, service, db_session, make_nomination):
        nomination = await make_nomination(NominationStatus.WINNER)
        certificate = await service.generate_for_nomination(db_session, nomination)

        await service.revoke(db_session, certificate.certificate_id)

        assert await service.verify(db_session, certificate.certificate_id) is None

    @pytest.mark.asyncio
    async def test_delete_for_nomination(self, service, db_session, make_nomination):
        from app.core.exceptions import ResourceNotFoundError
        nomination = await make_nomination(NominationStatus.WINNER)
        certificate = await service.generate_for_nomination(db_session, nomination)
        file_name = certificate.file_name

        assert await service.delete_for_nomination(db_session, nomination) is True
        assert nomination.certificate_id is None
        with pytest.raises(ResourceNotFoundError):
            service.file_path(file_name)
        assert await service.delete_for_nomination(db_session, nomination) is False

    @pytest.mark.asyncio
    async def test_bulk_generate_skips_pending(self, service, db_session, make_nomination):
        await make_nomination(NominationStatus.WINNER)
        await make_nomination(NominationStatus.APPROVED)
        await make_nomination(NominationStatus.PENDING)

        result = await service.bulk_generate(db_session)

        assert result["total"] == 2
        assert result["succeeded"] == 2
        assert result["failed"] == 0

    @pytest.mark.asyncio
    async def test_regenerate_keeps_old_pdf_when_write_fails(self, service, db_session, make_nomination, monkeypatch):
        from app.core.exceptions import CertificateGenerationError
        nomination = await make_nomination(NominationStatus.WINNER)
        first = await service.generate_for_nomination(db_session, nomination)
        original = service.file_path(first.file_name).read_bytes()

        async def disk_full(*args, **kwargs):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(service.storage, "save_bytes", disk_full)

        with pytest.raises(CertificateGenerationError):
            await service.regenerate(db_session, nomination)
        assert service.file_path(first.file_name).read_bytes() == original

    @pytest.mark.asyncio
    async def test_regenerate_removes_renamed_file(self, service, db_session, make_nomination):
        from app.services.storage_service import FOLDER_CERTIFICATES
        nomination = await make_nomination(NominationStatus.WINNER)
        await service.generate_for_nomination(db_session, nomination)
        await service.storage.save_bytes(FOLDER_CERTIFICATES, "certificate_legacy.pdf", b"%PDF-1.4 old")
        nomination.certificate_file = "certificate_legacy.pdf"
        await db_session.commit()

        certificate = await service.regenerate(db_session, nomination)

        assert not service.storage.exists(FOLDER_CERTIFICATES, "certificate_legacy.pdf")
        assert service.file_path(certificate.file_name).is_file()
        assert nomination.certificate_file == certificate.file_name

    @pytest.mark.asyncio
    async def test_bulk_generate_reports_storage_errors(self, service, db_session, make_nomination, monkeypatch):
        await make_nomination(NominationStatus.WINNER)
        await make_nomination(NominationStatus.FINALIST)

        async def read_only(*args, **kwargs):
            raise PermissionError(13, "Read-only file system")

        monkeypatch.setattr(service.storage, "save_bytes", read_only)

        result = await service.bulk_generate(db_session)

        assert result["total"] == 2
        assert result["succeeded"] == 0
        assert result["failed"] == 2
        for item in result["results"]:
            assert item["success"] is False
            assert "Failed to store certificate" in item["error"]
