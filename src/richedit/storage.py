"""Image uploads to the managed object store."""

from __future__ import annotations

import logging
import secrets
import string
import time
from pathlib import PurePath

import httpx

from richedit.config import (
    RICHEDIT_IMAGE_TABLE,
    RICHEDIT_STORAGE_BUCKET,
    RICHEDIT_STORAGE_KEY,
    RICHEDIT_STORAGE_PREFIX,
    RICHEDIT_STORAGE_URL,
)
from richedit.exceptions import StorageError, UploadError
from richedit.http_utils import request_with_retries
from richedit.schemas.upload import ImageRecord, UploadFile

logger = logging.getLogger(__name__)

_BASE36_DIGITS = string.digits + string.ascii_lowercase


def _base36(value: int) -> str:
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits)) or "0"


def _extension(file: UploadFile) -> str:
    suffix = PurePath(file.filename).suffix.lstrip(".").lower()
    if suffix:
        return suffix
    return file.content_type.partition("/")[2].split("+")[0] or "bin"


def storage_name(file: UploadFile, now_ms: int | None = None) -> str:
    """Collision-resistant object name: ``{epoch_ms}-{random base36}.{ext}``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-{_base36(secrets.randbits(52))}.{_extension(file)}"


class StorageUploader:
    """Uploads images to a bucket and optionally records them in a table.

    Failures are logged and reported as ``None`` so the image dialog can offer
    a retry.
    """

    def __init__(
        self,
        base_url: str = RICHEDIT_STORAGE_URL,
        *,
        api_key: str = RICHEDIT_STORAGE_KEY,
        bucket: str = RICHEDIT_STORAGE_BUCKET,
        prefix: str = RICHEDIT_STORAGE_PREFIX,
        table: str = RICHEDIT_IMAGE_TABLE,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.table = table
        self.client = client

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = dict(extra)
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def object_path(self, name: str) -> str:
        return f"{self.prefix}/{name}" if self.prefix else name

    def upload_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/{self.bucket}/{path}"

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    async def upload(
        self,
        file: UploadFile,
        *,
        alt_text: str,
        caption: str = "",
        document_id: str | None = None,
    ) -> str | None:
        """Store ``file`` and return its public URL, or None on failure."""
        name = storage_name(file)
        path = self.object_path(name)
        try:
            await request_with_retries(
                "POST",
                self.upload_url(path),
                client=self.client,
                headers=self._headers(
                    **{
                        "Content-Type": file.content_type,
                        "Cache-Control": "3600",
                        "x-upsert": "false",
                    }
                ),
                content=file.data,
                error_class=UploadError,
            )
        except (UploadError, httpx.HTTPError) as exc:
            logger.warning("Upload of %s failed: %s", file.filename, exc)
            return None

        logger.info("Uploaded %s to %s/%s", file.filename, self.bucket, path)

        if document_id:
            record = ImageRecord(
                filename=name,
                original_filename=file.filename,
                file_path=path,
                file_size=file.size,
                mime_type=file.content_type,
                alt_text=alt_text or None,
                caption=caption or None,
                blog_post_id=document_id,
            )
            await self._record(record)

        return self.public_url(path)

    async def _record(self, record: ImageRecord) -> None:
        try:
            await request_with_retries(
                "POST",
                f"{self.base_url}/rest/v1/{self.table}",
                client=self.client,
                headers=self._headers(Prefer="return=minimal"),
                json=record.model_dump(),
            )
        except (StorageError, httpx.HTTPError) as exc:
            logger.warning("Could not record image %s: %s", record.file_path, exc)
