"""Tests for the image upload dialog."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from richedit.exceptions import UploadError
from richedit.image_modal import (
    MISSING_FIELDS_MESSAGE,
    UPLOAD_FAILED_MESSAGE,
    ImageModalState,
    ImageUploadModal,
    default_alt_text,
)
from richedit.preview import PreviewRegistry
from richedit.schemas.upload import UploadFile

URL = "http://localhost:54321/storage/v1/object/public/blog-images/content/1-abc.png"


def _modal(upload_result=URL, **kwargs) -> tuple[ImageUploadModal, MagicMock, MagicMock]:
    uploader = MagicMock()
    uploader.upload = AsyncMock(return_value=upload_result)
    on_insert = MagicMock()
    modal = ImageUploadModal(uploader, on_insert, **kwargs)
    modal.open()
    return modal, uploader, on_insert


class TestFileSelection:
    """Tests for choosing, dropping and clearing files."""

    def test_select_file(self, png_file: UploadFile) -> None:
        previews = PreviewRegistry()
        modal, _, _ = _modal(previews=previews)

        assert modal.select_file(png_file)

        assert modal.state is ImageModalState.FILE_SELECTED
        assert modal.pending.alt_text == "sunset.beach"
        assert modal.pending.preview_url.startswith("blob:")
        assert modal.pending.preview_url in previews
        assert modal.error is None

    def test_rejects_non_image(self) -> None:
        modal, _, _ = _modal()
        pdf = UploadFile(filename="doc.pdf", content_type="application/pdf", data=b"%PDF")

        assert not modal.select_file(pdf)

        assert modal.state is ImageModalState.EMPTY
        assert modal.pending is None
        assert modal.error == "Please select an image file"

    def test_rejects_oversized_file(self) -> None:
        modal, _, _ = _modal(max_bytes=1024 * 1024)
        big = UploadFile(filename="big.jpg", content_type="image/jpeg", data=b"0" * (1024 * 1024 + 1))

        assert not modal.select_file(big)

        assert modal.error == "File size must be less than 1MB"

    def test_rejected_file_keeps_previous_selection(self, png_file: UploadFile) -> None:
        modal, _, _ = _modal()
        modal.select_file(png_file)

        modal.select_file(UploadFile(filename="a.txt", content_type="text/plain", data=b"a"))

        assert modal.pending.file == png_file
        assert modal.state is ImageModalState.FILE_SELECTED

    def test_replacing_file_revokes_old_preview(self, png_file: UploadFile) -> None:
        previews = PreviewRegistry()
        modal, _, _ = _modal(previews=previews)
        modal.select_file(png_file)
        first_preview = modal.pending.preview_url

        modal.select_file(UploadFile(filename="other.gif", content_type="image/gif", data=b"GIF"))

        assert first_preview not in previews
        assert len(previews) == 1

    def test_drop_and_drag_tracking(self, png_file: UploadFile) -> None:
        modal, _, _ = _modal()

        modal.drag_enter()
        assert modal.is_dragging
        assert modal.drop([png_file])
        assert not modal.is_dragging
        assert modal.state is ImageModalState.FILE_SELECTED

    def test_drop_nothing(self) -> None:
        modal, _, _ = _modal()
        modal.drag_enter()
        modal.drag_leave()

        assert not modal.is_dragging
        assert not modal.drop([])

    def test_clear_file(self, png_file: UploadFile) -> None:
        previews = PreviewRegistry()
        modal, _, _ = _modal(previews=previews)
        modal.select_file(png_file)

        modal.clear_file()

        assert modal.pending is None
        assert modal.state is ImageModalState.EMPTY
        assert len(previews) == 0

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [("photo.png", "photo"), ("archive.tar.gz", "archive.tar"), ("noext", "noext")],
    )
    def test_default_alt_text(self, filename: str, expected: str) -> None:
        assert default_alt_text(filename) == expected


class TestSubmit:
    """Tests for submitting uploads."""

    @pytest.mark.asyncio
    async def test_requires_alt_text(self, png_file: UploadFile) -> None:
        modal, uploader, _ = _modal()
        modal.select_file(png_file)
        modal.set_alt_text("   ")

        assert not modal.can_submit
        assert not await modal.submit()

        assert modal.error == MISSING_FIELDS_MESSAGE
        uploader.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_requires_file(self) -> None:
        modal, uploader, _ = _modal()

        assert not await modal.submit()
        uploader.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_inserts_and_resets(self, png_file: UploadFile) -> None:
        previews = PreviewRegistry()
        modal, uploader, on_insert = _modal(previews=previews, document_id="post-1")
        modal.select_file(png_file)
        modal.set_alt_text(" A beach at sunset ")
        modal.set_caption("Taken in May")

        assert await modal.submit()

        uploader.upload.assert_awaited_once_with(
            png_file, alt_text="A beach at sunset", caption="Taken in May", document_id="post-1"
        )
        on_insert.assert_called_once_with(URL, "A beach at sunset")
        assert modal.state is ImageModalState.INSERTED
        assert modal.pending is None
        assert not modal.is_open
        assert len(previews) == 0

    @pytest.mark.asyncio
    async def test_failure_can_be_retried(self, png_file: UploadFile) -> None:
        modal, uploader, on_insert = _modal(upload_result=None)
        modal.select_file(png_file)

        assert not await modal.submit()
        assert modal.state is ImageModalState.FAILED
        assert modal.error == UPLOAD_FAILED_MESSAGE
        assert modal.can_submit

        uploader.upload.return_value = URL
        assert await modal.submit()
        assert uploader.upload.await_count == 2
        on_insert.assert_called_once()

    @pytest.mark.asyncio
    async def test_upload_error_moves_to_failed(self, png_file: UploadFile) -> None:
        modal, uploader, on_insert = _modal()
        uploader.upload.side_effect = UploadError("bucket unavailable")
        modal.select_file(png_file)

        assert not await modal.submit()

        assert modal.state is ImageModalState.FAILED
        on_insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_transport_error_moves_to_failed(self, png_file: UploadFile) -> None:
        """Any uploader exception leaves the dialog ready for a retry."""
        modal, uploader, on_insert = _modal()
        uploader.upload.side_effect = httpx.ConnectError("connection refused")
        modal.select_file(png_file)

        assert not await modal.submit()

        assert modal.state is ImageModalState.FAILED
        assert modal.error == UPLOAD_FAILED_MESSAGE
        assert modal.can_submit
        on_insert.assert_not_called()

        uploader.upload.side_effect = None
        uploader.upload.return_value = URL
        assert await modal.submit()
        on_insert.assert_called_once_with(URL, "sunset.beach")

    @pytest.mark.asyncio
    async def test_late_result_after_close_is_ignored(self, png_file: UploadFile) -> None:
        release = asyncio.Event()

        async def slow_upload(*args, **kwargs) -> str:
            await release.wait()
            return URL

        previews = PreviewRegistry()
        modal, uploader, on_insert = _modal(previews=previews)
        uploader.upload = AsyncMock(side_effect=slow_upload)
        modal.select_file(png_file)
        assert len(previews) == 1

        task = asyncio.create_task(modal.submit())
        await asyncio.sleep(0)
        assert modal.state is ImageModalState.UPLOADING
        assert not modal.can_submit

        modal.close()
        assert len(previews) == 0
        release.set()

        assert not await task
        on_insert.assert_not_called()
        assert modal.state is ImageModalState.EMPTY
