"""Schemas for image uploads."""

from __future__ import annotations

from pydantic import BaseModel


class UploadFile(BaseModel):
    """A file picked or dropped into the image dialog."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class PendingUpload(BaseModel):
    """Image dialog state between file selection and insertion."""

    file: UploadFile
    preview_url: str
    alt_text: str = ""
    caption: str = ""


class ImageRecord(BaseModel):
    """Row recorded in the image table after an upload tied to a document."""

    filename: str
    original_filename: str
    file_path: str
    file_size: int
    mime_type: str
    alt_text: str | None = None
    caption: str | None = None
    blog_post_id: str
    is_active: bool = True
