"""
Storage Service - local-disk uploads

Files live under UPLOAD_DIR/<folder>/ and are served by the /uploads
static mount, so the public URL of a stored file is /uploads/<folder>/<name>.
"""

import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import FileUploadError, InvalidFileTypeError
from app.core.logging_config import logger

UPLOADS_URL_PREFIX = "/uploads"

# Folders used by the API
FOLDER_SERVICES = "services"
FOLDER_PROJECTS = "projects"
FOLDER_PRODUCTS = "products"
FOLDER_PARTNERS = "partners"
FOLDER_AWARDS = "awards"
FOLDER_SIGNATURES = "signatures"
FOLDER_CERTIFICATES = "certificates"
FOLDER_PROFILE_PICS = "profile-pics"
FOLDER_IOT = "iot"
FOLDER_SOFTWARE = "software"

EXTENSIONS_BY_TYPE = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "application/pdf": ".pdf",
}

CHUNK_SIZE = 64 * 1024


@dataclass
class StoredFile:
    """Result of saving an upload"""
    filename: str
    folder: str
    path: Path
    size: int
    content_type: str
    original_name: str = ""

    @property
    def url(self) -> str:
        return f"{UPLOADS_URL_PREFIX}/{self.folder}/{self.filename}"


class StorageService:
    """Validates, stores and deletes uploaded files on local disk"""

    def __init__(self, base_dir: Optional[Path] = None):
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base_dir or settings.UPLOAD_DIR

    def folder_path(self, folder: str) -> Path:
        path = self.base_dir / folder
        path.mkdir(parents=True, exist_ok=True)
        return path

    def resolve(self, folder: str, name_or_url: str) -> Path:
        """Path of a stored file; only the basename of the input is used"""
        return self.folder_path(folder) / Path(name_or_url).name

    @staticmethod
    def generate_filename(prefix: str, content_type: str, original_name: str = "") -> str:
        ext = EXTENSIONS_BY_TYPE.get(content_type) or Path(original_name).suffix.lower()
        return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"

    async def save_upload(
        self,
        file: UploadFile,
        folder: str,
        allowed_types: Optional[List[str]] = None,
        max_size: Optional[int] = None,
        prefix: Optional[str] = None,
    ) -> StoredFile:
        """
        Validate and write an UploadFile.

        Raises InvalidFileTypeError for a disallowed content type and
        FileUploadError for an empty or oversized file.
        """
        allowed_types = allowed_types or settings.ALLOWED_IMAGE_TYPES
        max_size = max_size or settings.MAX_UPLOAD_SIZE
        content_type = (file.content_type or "").lower()

        if content_type not in allowed_types:
            raise InvalidFileTypeError(content_type or "unknown", allowed_types)

        filename = self.generate_filename(prefix or folder.rstrip("s"), content_type, file.filename or "")
        target = self.folder_path(folder) / filename

        size = 0
        try:
            async with aiofiles.open(target, "wb") as out:
                while True:
                    chunk = await file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > max_size:
                        raise FileUploadError(
                            f"File too large. Maximum size is {max_size // 1024 // 1024}MB"
                        )
                    await out.write(chunk)
        except FileUploadError:
            await self._remove(target)
            raise

        if size == 0:
            await self._remove(target)
            raise FileUploadError("Uploaded file is empty")

        logger.info(f"[Storage] Saved {folder}/{filename} ({size} bytes)")
        return StoredFile(
            filename=filename,
            folder=folder,
            path=target,
            size=size,
            content_type=content_type,
            original_name=file.filename or "",
        )

    async def replace(
        self,
        file: UploadFile,
        folder: str,
        old: Optional[str],
        **kwargs,
    ) -> StoredFile:
        """Save a new upload, then remove the file it supersedes"""
        stored = await self.save_upload(file, folder, **kwargs)
        if old and Path(old).name != stored.filename:
            await self.delete(folder, old)
        return stored

    async def save_bytes(self, folder: str, filename: str, data: bytes) -> StoredFile:
        """Write generated content (e.g. a rendered PDF) under a fixed name"""
        target = self.resolve(folder, filename)
        async with aiofiles.open(target, "wb") as out:
            await out.write(data)
        content_type = "application/pdf" if target.suffix == ".pdf" else "application/octet-stream"
        return StoredFile(
            filename=target.name,
            folder=folder,
            path=target,
            size=len(data),
            content_type=content_type,
        )

    async def delete(self, folder: str, name_or_url: Optional[str]) -> bool:
        """Delete a stored file by filename or public URL; False when absent"""
        if not name_or_url:
            return False
        target = self.resolve(folder, name_or_url)
        removed = await self._remove(target)
        if removed:
            logger.info(f"[Storage] Deleted {folder}/{target.name}")
        return removed

    def exists(self, folder: str, name_or_url: str) -> bool:
        return self.resolve(folder, name_or_url).is_file()

    @staticmethod
    async def _remove(path: Path) -> bool:
        try:
            await aiofiles.os.remove(path)
            return True
        except FileNotFoundError:
            return False


storage_service = StorageService()
