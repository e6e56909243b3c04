"""Host widget: one editor, its toolbar state and the three dialogs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal

from richedit.editor import Editor
from richedit.image_modal import ImageUploadModal, Uploader
from richedit.link_modal import LinkModal
from richedit.preview import PreviewRegistry
from richedit.storage import StorageUploader
from richedit.table_modal import TableModal

logger = logging.getLogger(__name__)

EditorMode = Literal["visual", "html"]

DEFAULT_PLACEHOLDER = "Start writing your blog content..."


@dataclass(frozen=True)
class ToolbarState:
    """Which toolbar buttons are highlighted or enabled."""

    bold: bool
    italic: bool
    strike: bool
    code: bool
    heading_1: bool
    heading_2: bool
    heading_3: bool
    bullet_list: bool
    ordered_list: bool
    blockquote: bool
    align_left: bool
    align_center: bool
    align_right: bool
    link: bool
    can_undo: bool
    can_redo: bool


class RichTextEditor:
    """Wires an ``Editor`` to its dialogs and the visual/HTML source toggle.

    In HTML mode the markup is edited as text; switching back to visual mode
    parses it into the document without calling ``on_change`` again.
    """

    def __init__(
        self,
        content: str = "",
        *,
        on_change: Callable[[str], None] | None = None,
        placeholder: str = DEFAULT_PLACEHOLDER,
        uploader: Uploader | None = None,
        document_id: str | None = None,
        editable: bool = True,
    ) -> None:
        self.on_change = on_change
        self.mode: EditorMode = "visual"
        self.editor = Editor(
            content,
            on_change=self._handle_update,
            placeholder=placeholder,
            document_id=document_id,
            editable=editable,
        )
        self.html_content = self.editor.get_html()
        self.previews = PreviewRegistry()
        self.image_modal = ImageUploadModal(
            uploader or StorageUploader(),
            self.insert_image,
            previews=self.previews,
            document_id=document_id,
        )
        self.link_modal = LinkModal(self.insert_link, self.remove_link)
        self.table_modal = TableModal(self.insert_table)

    def _handle_update(self, html: str) -> None:
        self.html_content = html
        if self.on_change is not None:
            self.on_change(html)

    # -- dialog callbacks -------------------------------------------------

    def insert_image(self, url: str, alt_text: str) -> bool:
        return self.editor.insert_image(url, alt_text)

    def insert_link(self, url: str, text: str | None = None, target: str | None = None) -> bool:
        return self.editor.insert_link(url, text, target)

    def remove_link(self) -> bool:
        return self.editor.remove_link()

    def insert_table(self, rows: int, cols: int, with_header_row: bool) -> bool:
        return self.editor.insert_table(rows, cols, with_header_row)

    def insert_line_break(self) -> bool:
        return self.editor.insert_hard_break()

    # -- dialogs ----------------------------------------------------------

    def open_image_modal(self) -> ImageUploadModal:
        self.image_modal.open()
        return self.image_modal

    def open_link_modal(self) -> LinkModal:
        """Open the link dialog prefilled from the current selection."""
        self.link_modal.open(self.editor.pending_link())
        return self.link_modal

    def open_table_modal(self) -> TableModal:
        self.table_modal.open()
        return self.table_modal

    # -- toolbar and modes -------------------------------------------------

    def toolbar_state(self) -> ToolbarState:
        editor = self.editor
        return ToolbarState(
            bold=editor.is_active("bold"),
            italic=editor.is_active("italic"),
            strike=editor.is_active("strike"),
            code=editor.is_active("code"),
            heading_1=editor.is_active("heading", {"level": 1}),
            heading_2=editor.is_active("heading", {"level": 2}),
            heading_3=editor.is_active("heading", {"level": 3}),
            bullet_list=editor.is_active("bullet_list"),
            ordered_list=editor.is_active("ordered_list"),
            blockquote=editor.is_active("blockquote"),
            align_left=editor.is_active(attrs={"text_align": "left"}),
            align_center=editor.is_active(attrs={"text_align": "center"}),
            align_right=editor.is_active(attrs={"text_align": "right"}),
            link=editor.is_active("link"),
            can_undo=editor.can_apply("undo"),
            can_redo=editor.can_apply("redo"),
        )

    def switch_mode(self, mode: EditorMode) -> None:
        if mode not in ("visual", "html"):
            raise ValueError(f"Unknown editor mode: {mode}")
        if mode == "html":
            self.html_content = self.editor.get_html()
        elif self.mode == "html":
            self.editor.set_content(self.html_content, emit_update=False)
        self.mode = mode
        logger.debug("Editor mode switched to %s", mode)

    def set_html(self, value: str) -> None:
        """Edit the markup directly while in HTML mode."""
        self.html_content = value
        if self.on_change is not None:
            self.on_change(value)
