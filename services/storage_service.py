# services/storage_service.py
import logging
import mimetypes
import os
import re
import time
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from core.config import settings
from core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: Optional[str], default: str = "upload") -> str:
    """Keep only the basename and a conservative character set."""
    name = Path(filename or "").name.strip()
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name[:120] or default


def _now_ms() -> int:
    return int(time.time() * 1000)


def proof_object_name(filename: Optional[str], now_ms: Optional[int] = None) -> str:
    """Unique receipt name: time prefix plus a random tag, then the original filename."""
    stamp = now_ms if now_ms is not None else _now_ms()
    return f"proof_{stamp}_{uuid.uuid4().hex[:8]}_{sanitize_filename(filename, 'receipt')}"


def qr_object_name(filename: Optional[str], content_type: Optional[str] = None,
                   now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else _now_ms()
    ext = Path(filename or "").suffix.lower()
    if not ext and content_type:
        ext = mimetypes.guess_extension(content_type) or ""
    return f"qr_code_{stamp}{_UNSAFE_CHARS.sub('', ext)}"


def resolve_content_type(content_type: Optional[str], filename: Optional[str]) -> str:
    return content_type or mimetypes.guess_type(filename or "")[0] or "application/octet-stream"


def validate_image(content: bytes, content_type: Optional[str], filename: Optional[str],
                   max_size: Optional[int] = None, label: str = "Receipt") -> str:
    """Check an uploaded image before anything is written. Returns the content type."""
    max_size = settings.MAX_PROOF_SIZE if max_size is None else max_size

    if not content:
        raise ValidationError(f"{label} image is required.")

    if len(content) > max_size:
        raise ValidationError(
            f"{label} image exceeds {max_size // (1024 * 1024)}MB. Please upload a smaller image."
        )

    mime_type = resolve_content_type(content_type, filename)
    if not mime_type.startswith(settings.ALLOWED_IMAGE_PREFIX):
        raise ValidationError(f"{label} must be an image, got {mime_type}.")

    return mime_type


class FileStorage:
    """Bucketed object storage on the local filesystem.

    Objects live under ``<root>/<bucket>/<name>`` and are served publicly under
    ``<base_url><media_prefix>/<bucket>/<name>``.
    """

    def __init__(
            self,
            root: Optional[str] = None,
            base_url: Optional[str] = None,
            media_prefix: Optional[str] = None,
    ):
        self.root = Path(root or settings.FILE_STORAGE_PATH)
        self.base_url = (base_url if base_url is not None else settings.PUBLIC_BASE_URL).rstrip("/")
        self.media_prefix = "/" + (media_prefix or settings.MEDIA_URL_PREFIX).strip("/")

    def _object_path(self, bucket: str, name: str) -> Path:
        if not name or name.startswith(".") or _UNSAFE_CHARS.search(name):
            raise StorageError(f"Invalid object name: {name!r}")
        return self.root / bucket / name

    async def upload(
            self,
            bucket: str,
            name: str,
            content: bytes,
            content_type: Optional[str] = None,
            upsert: bool = False,
    ) -> str:
        """Store ``content`` and return its object key (``bucket/name``)."""
        path = self._object_path(bucket, name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if path.exists() and not upsert:
                raise StorageError(f"Object already exists: {bucket}/{name}")
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise StorageError(f"Failed to write {bucket}/{name}: {e}") from e

        logger.info(f"Stored {bucket}/{name} ({len(content)} bytes, {content_type or 'unknown type'})")
        return f"{bucket}/{name}"

    def public_url(self, bucket: str, name: str) -> str:
        return f"{self.base_url}{self.media_prefix}/{bucket}/{name}"

    async def remove(self, bucket: str, name: str) -> None:
        path = self._object_path(bucket, name)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Failed to delete {bucket}/{name}: {e}") from e
        logger.info(f"Removed {bucket}/{name}")
