"""Registry of preview URLs handed out for selected image files."""

from __future__ import annotations

import logging
import uuid

from richedit.schemas.upload import UploadFile

logger = logging.getLogger(__name__)


class PreviewRegistry:
    """Issues ``blob:`` URLs for in-memory files until they are revoked."""

    def __init__(self, origin: str = "richedit") -> None:
        self.origin = origin
        self._files: dict[str, UploadFile] = {}

    def create(self, file: UploadFile) -> str:
        url = f"blob:{self.origin}/{uuid.uuid4()}"
        self._files[url] = file
        return url

    def revoke(self, url: str | None) -> None:
        if url is None:
            return
        if self._files.pop(url, None) is None:
            logger.debug("Preview URL %s was not registered", url)

    def resolve(self, url: str) -> UploadFile | None:
        return self._files.get(url)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, url: object) -> bool:
        return url in self._files
