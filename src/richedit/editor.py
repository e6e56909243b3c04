"""Stateful editor: applies commands, records history and emits markup."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Mapping

from richedit.commands import COMMANDS
from richedit.config import RICHEDIT_HISTORY_DEPTH
from richedit.history import ContentReset, History, Mutation
from richedit.html_parser import parse_html
from richedit.inline import plain_text
from richedit.positions import (
    EditorState,
    Position,
    Selection,
    find_text,
    first_position,
    iter_textblocks,
    selection_is_valid,
)
from richedit.queries import is_active, pending_link_state
from richedit.schemas.document import Document, Paragraph
from richedit.schemas.link import PendingLinkState
from richedit.serializer import serialize

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str], None]


class EditorStatus(str, Enum):
    IDLE = "idle"
    SELECTION_ACTIVE = "selection_active"
    DISABLED = "disabled"


def _with_textblock(doc: Document) -> Document:
    """Give the cursor somewhere to land in documents without any textblock."""
    if first_position(doc) is None:
        doc.content.append(Paragraph())
    return doc


class Editor:
    """Headless rich-text editor.

    Holds the document and selection, dispatches commands and keeps a bounded
    undo history. After every command that changes the document the new
    markup is passed to ``on_change``; no-ops never call it.

    Args:
        content: Initial markup.
        on_change: Called with the serialized markup after each mutation.
        placeholder: Text a host shows while the document is empty.
        document_id: Owning document, forwarded to image uploads.
        editable: Start disabled when False.
        history_depth: Maximum number of undo entries.
    """

    def __init__(
        self,
        content: str = "",
        *,
        on_change: ChangeCallback | None = None,
        placeholder: str = "",
        document_id: str | None = None,
        editable: bool = True,
        history_depth: int = RICHEDIT_HISTORY_DEPTH,
    ) -> None:
        self.on_change = on_change
        self.placeholder = placeholder
        self.document_id = document_id
        self.history = History(history_depth)
        doc = _with_textblock(parse_html(content))
        self._state = EditorState(doc=doc, selection=Selection.collapsed(first_position(doc)))
        self._status = EditorStatus.IDLE if editable else EditorStatus.DISABLED

    # -- state ------------------------------------------------------------

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def doc(self) -> Document:
        return self._state.doc

    @property
    def selection(self) -> Selection:
        return self._state.selection

    @property
    def status(self) -> EditorStatus:
        return self._status

    @property
    def editable(self) -> bool:
        return self._status is not EditorStatus.DISABLED

    def focus(self) -> None:
        if self.editable:
            self._status = EditorStatus.SELECTION_ACTIVE

    def blur(self) -> None:
        if self.editable:
            self._status = EditorStatus.IDLE

    def set_editable(self, editable: bool) -> None:
        if not editable:
            self._status = EditorStatus.DISABLED
        elif self._status is EditorStatus.DISABLED:
            self._status = EditorStatus.IDLE

    def set_selection(self, anchor: Position, head: Position | None = None) -> bool:
        """Move the selection. Positions that do not address a textblock are rejected."""
        selection = Selection(anchor=anchor, head=head if head is not None else anchor)
        if not selection_is_valid(self.doc, selection):
            logger.debug("Rejected selection %s", selection)
            return False
        self._state = EditorState(doc=self.doc, selection=selection)
        self.focus()
        return True

    def select_text(self, needle: str, occurrence: int = 0) -> bool:
        """Select the ``occurrence``-th match of ``needle`` within one textblock."""
        selection = find_text(self.doc, needle, occurrence)
        if selection is None:
            return False
        return self.set_selection(selection.anchor, selection.head)

    # -- reading ----------------------------------------------------------

    def get_html(self) -> str:
        return serialize(self.doc)

    def get_text(self) -> str:
        return "\n".join(plain_text(node.content) for _, node in iter_textblocks(self.doc))

    def is_empty(self) -> bool:
        content = self.doc.content
        return len(content) == 1 and isinstance(content[0], Paragraph) and not content[0].content

    def is_active(self, name: str | None = None, attrs: Mapping[str, Any] | None = None) -> bool:
        return is_active(self._state, name, attrs)

    def pending_link(self) -> PendingLinkState:
        return pending_link_state(self._state)

    def can_apply(self, name: str, *args: Any, **kwargs: Any) -> bool:
        """Dry-run a command against the current state."""
        if name == "undo":
            return self.editable and self.history.can_undo
        if name == "redo":
            return self.editable and self.history.can_redo
        command = COMMANDS.get(name)
        if command is None or not self.editable:
            return False
        return command(self._state, *args, **kwargs) is not None

    # -- commands ---------------------------------------------------------

    def _run(self, name: str, *args: Any, **kwargs: Any) -> bool:
        if not self.editable:
            logger.debug("Ignored %s: editor is disabled", name)
            return False
        if self._status is EditorStatus.IDLE:
            self.focus()
        new_state = COMMANDS[name](self._state, *args, **kwargs)
        if new_state is None:
            logger.debug("No-op command %s", name)
            return False
        self.history.record(Mutation(command=name, before=self._state))
        self._commit(new_state)
        return True

    def _commit(self, new_state: EditorState) -> None:
        self._state = new_state
        if self.on_change is not None:
            self.on_change(self.get_html())

    def toggle_mark(self, kind: str, href: str | None = None, target: str | None = None) -> bool:
        return self._run("toggle_mark", kind, href=href, target=target)

    def toggle_bold(self) -> bool:
        return self.toggle_mark("bold")

    def toggle_italic(self) -> bool:
        return self.toggle_mark("italic")

    def toggle_strike(self) -> bool:
        return self.toggle_mark("strike")

    def toggle_code(self) -> bool:
        return self.toggle_mark("code")

    def set_heading(self, level: int) -> bool:
        return self._run("set_heading", level)

    def toggle_heading(self, level: int) -> bool:
        return self._run("toggle_heading", level)

    def set_paragraph(self) -> bool:
        return self._run("set_paragraph")

    def toggle_blockquote(self) -> bool:
        return self._run("toggle_blockquote")

    def toggle_list(self, kind: str) -> bool:
        return self._run("toggle_list", kind)

    def toggle_bullet_list(self) -> bool:
        return self.toggle_list("bullet_list")

    def toggle_ordered_list(self) -> bool:
        return self.toggle_list("ordered_list")

    def set_text_align(self, value: str) -> bool:
        return self._run("set_text_align", value)

    def insert_image(self, src: str, alt: str | None = None, title: str | None = None) -> bool:
        return self._run("insert_image", src, alt, title)

    def insert_link(self, url: str, text: str | None = None, target: str | None = None) -> bool:
        return self._run("insert_link", url, text, target)

    def remove_link(self) -> bool:
        return self._run("remove_link")

    def insert_table(self, rows: int, cols: int, with_header_row: bool = True) -> bool:
        return self._run("insert_table", rows, cols, with_header_row)

    def insert_hard_break(self) -> bool:
        return self._run("insert_hard_break")

    def undo(self) -> bool:
        if not self.editable:
            return False
        previous = self.history.undo(self._state)
        if previous is None:
            return False
        self._commit(previous)
        return True

    def redo(self) -> bool:
        if not self.editable:
            return False
        following = self.history.redo(self._state)
        if following is None:
            return False
        self._commit(following)
        return True

    def set_content(self, markup: str, emit_update: bool = False) -> bool:
        """Replace the whole document with parsed ``markup``.

        The replacement is undoable. ``on_change`` is only called when
        ``emit_update`` is set.
        """
        doc = _with_textblock(parse_html(markup))
        if doc == self.doc:
            return False
        self.history.record(ContentReset(before=self._state))
        new_state = EditorState(doc=doc, selection=Selection.collapsed(first_position(doc)))
        if emit_update:
            self._commit(new_state)
        else:
            self._state = new_state
        return True
