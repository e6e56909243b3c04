"""Read-only queries over an editor state, used by the toolbar and dialogs."""

from __future__ import annotations

from typing import Any, Mapping

from richedit.inline import explode, find_mark, marks_at
from richedit.positions import (
    EditorState,
    ancestors,
    node_at,
    selection_is_valid,
    text_between,
    textblock_ranges,
)
from richedit.schemas.document import TEXTBLOCK_TYPES, Mark, MarkType
from richedit.schemas.link import PendingLinkState

BLOCK_NAMES = frozenset(
    {
        "paragraph",
        "heading",
        "bullet_list",
        "ordered_list",
        "list_item",
        "blockquote",
        "table",
        "table_row",
        "table_cell",
        "table_header",
    }
)
MARK_NAMES = frozenset(mark_type.value for mark_type in MarkType)


def _attrs_match(node: Any, attrs: Mapping[str, Any] | None) -> bool:
    for key, expected in (attrs or {}).items():
        value = getattr(node, key, None)
        if key == "text_align":
            value = value or "left"
        if value != expected:
            return False
    return True


def is_active(
    state: EditorState, name: str | None = None, attrs: Mapping[str, Any] | None = None
) -> bool:
    """Report whether a node kind, mark or attribute applies at the selection."""
    if not selection_is_valid(state.doc, state.selection):
        return False
    selection = state.selection

    if name is None:
        if not attrs:
            return False
        node = node_at(state.doc, selection.anchor.path)
        return isinstance(node, TEXTBLOCK_TYPES) and _attrs_match(node, attrs)

    if name in BLOCK_NAMES:
        return any(
            node.type == name and _attrs_match(node, attrs)
            for _, node in ancestors(state.doc, selection.anchor.path)
        )

    if name in MARK_NAMES:
        mark_type = MarkType(name)
        selected = _selected_marks(state)
        for marks in selected:
            mark = find_mark(marks, mark_type)
            if mark is None or not _attrs_match(mark, attrs):
                return False
        return bool(selected)

    return False


def _selected_marks(state: EditorState) -> list[tuple[Mark, ...]]:
    """Mark sets of every selected text character, or the cursor marks."""
    selection = state.selection
    if selection.empty:
        node = node_at(state.doc, selection.head.path)
        return [marks_at(explode(node.content), selection.head.offset)]
    found = []
    for covered in textblock_ranges(state.doc, selection.start, selection.end):
        chars = explode(covered.node.content)
        found.extend(marks for char, marks in chars[covered.start : covered.end] if char is not None)
    return found


def active_marks(state: EditorState) -> set[MarkType]:
    if not selection_is_valid(state.doc, state.selection):
        return set()
    return {mark_type for mark_type in MarkType if is_active(state, mark_type.value)}


def link_at_selection(state: EditorState) -> Mark | None:
    """The link mark at the start of the selection."""
    if not selection_is_valid(state.doc, state.selection):
        return None
    start = state.selection.start
    node = node_at(state.doc, start.path)
    chars = explode(node.content)
    if not state.selection.empty and start.offset < len(chars):
        marks = chars[start.offset][1]
    else:
        marks = marks_at(chars, start.offset)
    return find_mark(marks, MarkType.LINK)


def pending_link_state(state: EditorState) -> PendingLinkState:
    """Values that prefill the link dialog."""
    if not selection_is_valid(state.doc, state.selection):
        return PendingLinkState()
    link = link_at_selection(state)
    url = link.href if link is not None else ""
    selection = state.selection
    return PendingLinkState(
        url=url,
        text=text_between(state.doc, selection.start, selection.end),
        is_editing=bool(url),
    )
