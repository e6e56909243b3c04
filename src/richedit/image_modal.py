"""Image upload dialog state machine."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import PurePath
from typing import Callable, Protocol, Sequence

from richedit.config import RICHEDIT_MAX_UPLOAD_BYTES
from richedit.exceptions import RicheditError
from richedit.preview import PreviewRegistry
from richedit.schemas.upload import PendingUpload, UploadFile

logger = logging.getLogger(__name__)

INVALID_TYPE_MESSAGE = "Please select an image file"
MISSING_FIELDS_MESSAGE = "Please select an image and provide alt text"
UPLOAD_FAILED_MESSAGE = "Failed to upload image. Please try again."


class ImageModalState(str, Enum):
    EMPTY = "empty"
    FILE_SELECTED = "file_selected"
    UPLOADING = "uploading"
    INSERTED = "inserted"
    FAILED = "failed"


class Uploader(Protocol):
    async def upload(
        self,
        file: UploadFile,
        *,
        alt_text: str,
        caption: str,
        document_id: str | None,
    ) -> str | None: ...


def default_alt_text(filename: str) -> str:
    return PurePath(filename).stem


def _size_message(max_bytes: int) -> str:
    return f"File size must be less than {max_bytes // (1024 * 1024)}MB"


class ImageUploadModal:
    """Pick or drop an image, upload it, then hand the URL to ``on_insert``.

    Validation problems are stored in ``error`` rather than raised. A submit
    whose result arrives after the dialog was closed or re-submitted is
    ignored.
    """

    def __init__(
        self,
        uploader: Uploader,
        on_insert: Callable[[str, str], object],
        *,
        previews: PreviewRegistry | None = None,
        document_id: str | None = None,
        max_bytes: int = RICHEDIT_MAX_UPLOAD_BYTES,
    ) -> None:
        self.uploader = uploader
        self.on_insert = on_insert
        self.previews = previews if previews is not None else PreviewRegistry()
        self.document_id = document_id
        self.max_bytes = max_bytes
        self.is_open = False
        self.is_dragging = False
        self.state = ImageModalState.EMPTY
        self.pending: PendingUpload | None = None
        self.error: str | None = None
        self._generation = 0

    @property
    def can_submit(self) -> bool:
        return (
            self.pending is not None
            and bool(self.pending.alt_text.strip())
            and self.state is not ImageModalState.UPLOADING
        )

    def open(self) -> None:
        self._reset()
        self.is_open = True

    def close(self) -> None:
        if self.state is ImageModalState.UPLOADING:
            logger.debug("Image dialog closed during upload; the result will be ignored")
        self._generation += 1
        self._reset()
        self.is_open = False

    def _reset(self) -> None:
        if self.pending is not None:
            self.previews.revoke(self.pending.preview_url)
        self.pending = None
        self.state = ImageModalState.EMPTY
        self.error = None
        self.is_dragging = False

    def select_file(self, file: UploadFile) -> bool:
        """Validate and stage ``file``. A rejected file keeps the previous one."""
        if self.state is ImageModalState.UPLOADING:
            return False
        if not file.content_type.startswith("image/"):
            self.error = INVALID_TYPE_MESSAGE
            return False
        if file.size > self.max_bytes:
            self.error = _size_message(self.max_bytes)
            return False

        if self.pending is not None:
            self.previews.revoke(self.pending.preview_url)
        self.pending = PendingUpload(
            file=file,
            preview_url=self.previews.create(file),
            alt_text=default_alt_text(file.filename),
        )
        self.state = ImageModalState.FILE_SELECTED
        self.error = None
        return True

    def drag_enter(self) -> None:
        self.is_dragging = True

    def drag_leave(self) -> None:
        self.is_dragging = False

    def drop(self, files: Sequence[UploadFile]) -> bool:
        self.is_dragging = False
        if not files:
            return False
        return self.select_file(files[0])

    def clear_file(self) -> None:
        if self.state is ImageModalState.UPLOADING:
            return
        self._reset()

    def set_alt_text(self, value: str) -> None:
        if self.pending is not None:
            self.pending = self.pending.model_copy(update={"alt_text": value})

    def set_caption(self, value: str) -> None:
        if self.pending is not None:
            self.pending = self.pending.model_copy(update={"caption": value})

    async def submit(self) -> bool:
        """Upload the staged file once and insert it on success."""
        if self.state is ImageModalState.UPLOADING:
            return False
        if not self.can_submit:
            self.error = MISSING_FIELDS_MESSAGE
            return False

        pending = self.pending
        self._generation += 1
        generation = self._generation
        self.state = ImageModalState.UPLOADING
        self.error = None

        try:
            url = await self.uploader.upload(
                pending.file,
                alt_text=pending.alt_text.strip(),
                caption=pending.caption.strip(),
                document_id=self.document_id,
            )
        except RicheditError as exc:
            logger.warning("Image upload failed for %s: %s", pending.file.filename, exc)
            url = None
        except Exception as exc:
            logger.warning(
                "Uploader raised %s for %s: %s", type(exc).__name__, pending.file.filename, exc
            )
            url = None

        if generation != self._generation:
            logger.info("Ignoring late upload result for %s", pending.file.filename)
            return False

        if not url:
            self.state = ImageModalState.FAILED
            self.error = UPLOAD_FAILED_MESSAGE
            return False

        self.on_insert(url, pending.alt_text.strip())
        self._reset()
        self.state = ImageModalState.INSERTED
        self.is_open = False
        return True
