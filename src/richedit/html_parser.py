"""Parse stored HTML markup into the document tree."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator

from richedit.exceptions import ParseError
from richedit.html_utils import find_fragment_root, strip_unwanted_elements, text_align_of
from richedit.inline import normalize, with_mark
from richedit.schemas.document import (
    Blockquote,
    BulletList,
    Document,
    HardBreak,
    Heading,
    Image,
    ListItem,
    Mark,
    MarkType,
    OrderedList,
    Paragraph,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    Text,
)

try:
    from bs4 import BeautifulSoup
    from bs4.element import NavigableString, PreformattedString, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise ParseError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc

logger = logging.getLogger(__name__)

_MARK_TAGS = {
    "strong": MarkType.BOLD,
    "b": MarkType.BOLD,
    "em": MarkType.ITALIC,
    "i": MarkType.ITALIC,
    "s": MarkType.STRIKE,
    "strike": MarkType.STRIKE,
    "del": MarkType.STRIKE,
    "code": MarkType.CODE,
}
_HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3}
_TABLE_SECTIONS = {"thead", "tbody", "tfoot"}
# Unsupported tags that still separate blocks; their text becomes paragraphs.
_BLOCKISH_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "center",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "main",
        "nav",
        "pre",
        "section",
        "summary",
    }
)

InlineItem = Text | HardBreak | Image


def parse_html(markup: str) -> Document:
    """Parse markup into a document.

    Unknown tags are dropped and their text is kept. Anything that cannot be
    represented is normalized here, once, so that serializing the result and
    parsing it again yields the same tree.
    """
    soup = BeautifulSoup(markup or "", "lxml")
    strip_unwanted_elements(soup)
    root = find_fragment_root(soup)
    blocks = _parse_blocks(root.children)
    return Document(content=blocks or [Paragraph()])


class _BlockCollector:
    """Collects the blocks of one container, wrapping stray inline content."""

    def __init__(self) -> None:
        self.blocks: list = []
        self._pending: list[Text | HardBreak] = []

    def add_inline(self, items: Iterable[InlineItem]) -> None:
        for item in items:
            if isinstance(item, Image):
                self.add_block(item)
            else:
                self._pending.append(item)

    def add_block(self, block) -> None:
        self.flush()
        self.blocks.append(block)

    def flush(self) -> None:
        if _has_content(self._pending):
            self.blocks.append(Paragraph(content=normalize(self._pending)))
        self._pending = []


def _has_content(items: Iterable[Text | HardBreak]) -> bool:
    return any(isinstance(item, HardBreak) or item.text.strip() for item in items)


def _parse_blocks(nodes: Iterable) -> list:
    collector = _BlockCollector()
    for node in nodes:
        _collect(node, collector)
    collector.flush()
    return collector.blocks


def _collect(node, collector: _BlockCollector) -> None:
    if isinstance(node, PreformattedString):
        return
    if isinstance(node, NavigableString):
        collector.add_inline(_iter_inline(node, ()))
        return
    if not isinstance(node, Tag):
        return

    name = node.name
    if name == "p":
        align = text_align_of(node)
        for block in _parse_textblock(
            node, lambda content: Paragraph(text_align=align, content=content)
        ):
            collector.add_block(block)
        return

    if name in _HEADING_TAGS:
        align = text_align_of(node)
        level = _HEADING_TAGS[name]
        for block in _parse_textblock(
            node, lambda content: Heading(level=level, text_align=align, content=content)
        ):
            collector.add_block(block)
        return

    if name in {"ul", "ol"}:
        parsed = _parse_list(node, BulletList if name == "ul" else OrderedList)
        if parsed is not None:
            collector.add_block(parsed)
        return

    if name == "blockquote":
        collector.add_block(Blockquote(content=_parse_blocks(node.children) or [Paragraph()]))
        return

    if name == "table":
        table = _parse_table(node)
        if table is not None:
            collector.add_block(table)
        return

    if name in _BLOCKISH_TAGS:
        logger.debug("Dropping unsupported block tag <%s>", name)
        collector.flush()
        for child in node.children:
            _collect(child, collector)
        collector.flush()
        return

    collector.add_inline(_iter_inline(node, ()))


def _parse_textblock(tag: Tag, factory: Callable[[list], object]) -> list:
    """Parse a paragraph or heading. Images inside it split it into blocks."""
    blocks: list = []
    current: list[Text | HardBreak] = []
    for child in tag.children:
        for item in _iter_inline(child, ()):
            if isinstance(item, Image):
                if _has_content(current):
                    blocks.append(factory(normalize(current)))
                current = []
                blocks.append(item)
            else:
                current.append(item)
    if _has_content(current) or not blocks:
        blocks.append(factory(normalize(current)))
    return blocks


def _iter_inline(node, marks: tuple[Mark, ...]) -> Iterator[InlineItem]:
    if isinstance(node, PreformattedString):
        return
    if isinstance(node, NavigableString):
        text = str(node)
        if text:
            yield Text(text=text, marks=marks)
        return
    if not isinstance(node, Tag):
        return

    name = node.name
    if name == "br":
        yield HardBreak()
        return
    if name == "img":
        image = _parse_image(node)
        if image is not None:
            yield image
        return

    child_marks = marks
    if name in _MARK_TAGS:
        child_marks = with_mark(marks, Mark(type=_MARK_TAGS[name]))
    elif name == "a":
        href = node.get("href")
        if href:
            mark = Mark(type=MarkType.LINK, href=href, target=node.get("target") or None)
            child_marks = with_mark(marks, mark)
    elif name != "span":
        logger.debug("Dropping unsupported inline tag <%s>", name)

    for child in node.children:
        yield from _iter_inline(child, child_marks)


def _parse_image(tag: Tag) -> Image | None:
    src = tag.get("src")
    if src is None:
        return None
    return Image(src=src, alt=tag.get("alt"), title=tag.get("title"))


def _parse_list(tag: Tag, list_cls: type[BulletList] | type[OrderedList]):
    items: list[ListItem] = []
    stray = _BlockCollector()

    def flush_stray() -> None:
        nonlocal stray
        stray.flush()
        if stray.blocks:
            items.append(ListItem(content=stray.blocks))
        stray = _BlockCollector()

    for child in tag.children:
        if isinstance(child, Tag) and child.name == "li":
            flush_stray()
            items.append(ListItem(content=_parse_blocks(child.children) or [Paragraph()]))
        else:
            _collect(child, stray)
    flush_stray()

    if not items:
        return None
    return list_cls(content=items)


def _iter_rows(table: Tag) -> Iterator[Tag]:
    for child in table.children:
        if not isinstance(child, Tag):
            continue
        if child.name == "tr":
            yield child
        elif child.name in _TABLE_SECTIONS:
            yield from child.find_all("tr", recursive=False)


def _parse_table(table: Tag) -> Table | None:
    rows: list[list] = []
    for row in _iter_rows(table):
        cells = []
        for cell in row.find_all(["th", "td"], recursive=False):
            cell_cls = TableHeader if cell.name == "th" else TableCell
            cells.append(cell_cls(content=_parse_blocks(cell.children) or [Paragraph()]))
        if cells:
            rows.append(cells)

    if not rows:
        return None

    # Pad short rows so the grid stays rectangular.
    width = max(len(cells) for cells in rows)
    return Table(
        content=[
            TableRow(content=cells + [TableCell() for _ in range(width - len(cells))])
            for cells in rows
        ]
    )
