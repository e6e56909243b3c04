"""Link dialog form."""

from __future__ import annotations

from typing import Callable, Optional

from richedit.schemas.link import PendingLinkState
from richedit.urls import format_url, is_valid_url

TARGETS = ("_self", "_blank")

InsertLink = Callable[[str, Optional[str], Optional[str]], object]


class LinkModal:
    """Form over ``url``, ``text`` and ``target``.

    ``on_insert`` receives ``(url, text, target)``. ``text`` is None when the
    typed text still equals the selected text, so the existing selection is
    linked in place and keeps its formatting. ``target`` is None for
    ``_self``.
    """

    def __init__(self, on_insert: InsertLink, on_remove: Callable[[], object] | None = None) -> None:
        self.on_insert = on_insert
        self.on_remove = on_remove
        self.is_open = False
        self.is_editing = False
        self.url = ""
        self.text = ""
        self.target = "_self"
        self._initial_text = ""

    def open(self, pending: PendingLinkState | None = None) -> None:
        pending = pending or PendingLinkState()
        self.url = pending.url
        self.text = pending.text
        self._initial_text = pending.text
        self.is_editing = pending.is_editing
        self.target = "_self"
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.url = ""
        self.text = ""
        self._initial_text = ""
        self.target = "_self"
        self.is_editing = False

    def set_url(self, value: str) -> None:
        self.url = value

    def set_text(self, value: str) -> None:
        self.text = value

    def set_target(self, value: str) -> None:
        if value in TARGETS:
            self.target = value

    @property
    def is_valid_url(self) -> bool:
        return is_valid_url(self.url)

    @property
    def can_submit(self) -> bool:
        return self.is_open and self.is_valid_url

    @property
    def can_remove(self) -> bool:
        return self.is_editing and self.on_remove is not None

    @property
    def preview_url(self) -> str:
        """The URL as it will be stored, or empty while invalid."""
        return format_url(self.url) if self.is_valid_url else ""

    def submit(self) -> bool:
        if not self.can_submit:
            return False
        text = self.text.strip()
        if not text or text == self._initial_text.strip():
            text = None
        target = None if self.target == "_self" else self.target
        self.on_insert(format_url(self.url), text, target)
        self.close()
        return True

    def remove(self) -> bool:
        if not self.can_remove:
            return False
        self.on_remove()
        self.close()
        return True
