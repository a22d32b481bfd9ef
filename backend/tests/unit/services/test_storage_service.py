"""
Unit Tests for local-disk upload storage
"""
import io
import pytest
from pathlib import Path
from starlette.datastructures import Headers
from fastapi import UploadFile

from app.core.exceptions import FileUploadError, InvalidFileTypeError
from app.services.storage_service import FOLDER_PARTNERS, StorageService


def _upload(data: bytes, content_type: str = "image/png", filename: str = "logo.png") -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


@pytest.fixture
def storage(tmp_path: Path) -> StorageService:
    return StorageService(base_dir=tmp_path)


class TestSaveUpload:

    @pytest.mark.asyncio
    async def test_save_returns_public_url(self, storage, tmp_path):
        stored = await storage.save_upload(_upload(b"png-data"), FOLDER_PARTNERS, prefix="partner")

        assert stored.filename.startswith("partner-")
        assert stored.filename.endswith(".png")
        assert stored.url == f"/uploads/partners/{stored.filename}"
        assert (tmp_path / "partners" / stored.filename).read_bytes() == b"png-data"

    @pytest.mark.asyncio
    async def test_generated_names_do_not_collide(self, storage):
        first = await storage.save_upload(_upload(b"one"), FOLDER_PARTNERS)
        second = await storage.save_upload(_upload(b"two"), FOLDER_PARTNERS)
        assert first.filename != second.filename

    @pytest.mark.asyncio
    async def test_rejects_disallowed_type(self, storage):
        with pytest.raises(InvalidFileTypeError):
            await storage.save_upload(_upload(b"%PDF", "application/pdf", "doc.pdf"), FOLDER_PARTNERS)

    @pytest.mark.asyncio
    async def test_rejects_oversized_file(self, storage, tmp_path):
        with pytest.raises(FileUploadError):
            await storage.save_upload(_upload(b"x" * 2048), FOLDER_PARTNERS, max_size=1024)
        assert list((tmp_path / "partners").iterdir()) == []

    @pytest.mark.asyncio
    async def test_rejects_empty_file(self, storage):
        with pytest.raises(FileUploadError):
            await storage.save_upload(_upload(b""), FOLDER_PARTNERS)


class TestDeleteAndReplace:

    @pytest.mark.asyncio
    async def test_delete_by_url(self, storage):
        stored = await storage.save_upload(_upload(b"data"), FOLDER_PARTNERS)

        assert await storage.delete(FOLDER_PARTNERS, stored.url) is True
        assert storage.exists(FOLDER_PARTNERS, stored.filename) is False
        assert await storage.delete(FOLDER_PARTNERS, stored.url) is False

    @pytest.mark.asyncio
    async def test_delete_ignores_directory_traversal(self, storage, tmp_path):
        outside = tmp_path / "secret.txt"
        outside.write_text("keep me")

        assert await storage.delete(FOLDER_PARTNERS, "../secret.txt") is False
        assert outside.exists()

    @pytest.mark.asyncio
    async def test_replace_removes_old_file(self, storage):
        old = await storage.save_upload(_upload(b"old"), FOLDER_PARTNERS)
        new = await storage.replace(_upload(b"new"), FOLDER_PARTNERS, old.url)

        assert storage.exists(FOLDER_PARTNERS, new.filename)
        assert not storage.exists(FOLDER_PARTNERS, old.filename)

    @pytest.mark.asyncio
    async def test_save_bytes(self, storage):
        stored = await storage.save_bytes("certificates", "certificate_X.pdf", b"%PDF-1.4")

        assert stored.content_type == "application/pdf"
        assert storage.resolve("certificates", "certificate_X.pdf").read_bytes() == b"%PDF-1.4"
