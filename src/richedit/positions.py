"""Positions, selections and tree navigation.

A position addresses a textblock by its path of ``content`` indices from the
document root, plus a character offset inside it. Tuples compare
lexicographically, which matches document order for textblocks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from richedit.inline import inline_length, plain_text
from richedit.schemas.document import TEXTBLOCK_TYPES, Document, Image

Path = tuple[int, ...]


@dataclass(frozen=True, order=True)
class Position:
    path: Path
    offset: int = 0


@dataclass(frozen=True)
class Selection:
    """An ``(anchor, head)`` pair. ``head`` is where the cursor sits."""

    anchor: Position
    head: Position

    @classmethod
    def collapsed(cls, position: Position) -> "Selection":
        return cls(anchor=position, head=position)

    @property
    def empty(self) -> bool:
        return self.anchor == self.head

    @property
    def start(self) -> Position:
        return min(self.anchor, self.head)

    @property
    def end(self) -> Position:
        return max(self.anchor, self.head)


@dataclass(frozen=True)
class EditorState:
    doc: Document
    selection: Selection


@dataclass
class TextblockRange:
    """The part of one textblock covered by a selection."""

    path: Path
    node: Any
    start: int
    end: int


def node_at(doc: Document, path: Path) -> Any:
    """Return the node at ``path`` or None when the path does not resolve."""
    node: Any = doc
    for index in path:
        if isinstance(node, TEXTBLOCK_TYPES) or isinstance(node, Image):
            return None
        content = getattr(node, "content", None)
        if content is None or not 0 <= index < len(content):
            return None
        node = content[index]
    return node


def ancestors(doc: Document, path: Path) -> list[tuple[Path, Any]]:
    """Nodes from the root down to ``path`` inclusive, with their paths."""
    chain: list[tuple[Path, Any]] = [((), doc)]
    for depth in range(1, len(path) + 1):
        node = node_at(doc, path[:depth])
        if node is None:
            break
        chain.append((path[:depth], node))
    return chain


def iter_textblocks(node: Any, path: Path = ()) -> Iterator[tuple[Path, Any]]:
    if isinstance(node, TEXTBLOCK_TYPES):
        yield path, node
        return
    for index, child in enumerate(getattr(node, "content", None) or []):
        yield from iter_textblocks(child, (*path, index))


def is_valid(doc: Document, position: Position) -> bool:
    node = node_at(doc, position.path)
    if not isinstance(node, TEXTBLOCK_TYPES):
        return False
    return 0 <= position.offset <= inline_length(node.content)


def selection_is_valid(doc: Document, selection: Selection | None) -> bool:
    if selection is None:
        return False
    return is_valid(doc, selection.anchor) and is_valid(doc, selection.head)


def first_position(doc: Document) -> Position | None:
    for path, _ in iter_textblocks(doc):
        return Position(path, 0)
    return None


def textblock_ranges(doc: Document, start: Position, end: Position) -> list[TextblockRange]:
    """Textblocks overlapped by ``[start, end]`` with the covered offsets."""
    ranges: list[TextblockRange] = []
    for path, node in iter_textblocks(doc):
        if path < start.path or path > end.path:
            continue
        length = inline_length(node.content)
        lo = start.offset if path == start.path else 0
        hi = end.offset if path == end.path else length
        ranges.append(TextblockRange(path=path, node=node, start=lo, end=hi))
    return ranges


def text_between(doc: Document, start: Position, end: Position) -> str:
    parts = []
    for covered in textblock_ranges(doc, start, end):
        parts.append(plain_text(covered.node.content)[covered.start : covered.end])
    return "".join(parts)


def find_text(doc: Document, needle: str, occurrence: int = 0) -> Selection | None:
    """Select the ``occurrence``-th match of ``needle`` inside a single textblock."""
    if not needle:
        return None
    seen = 0
    for path, node in iter_textblocks(doc):
        text = plain_text(node.content)
        index = text.find(needle)
        while index != -1:
            if seen == occurrence:
                return Selection(Position(path, index), Position(path, index + len(needle)))
            seen += 1
            index = text.find(needle, index + 1)
    return None
