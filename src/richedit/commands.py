"""Editor commands.

Every command is a pure function ``(state, ...) -> EditorState | None``. It
works on a deep copy of the document; ``None`` means the command does not
apply and the caller must leave the document untouched. Commands never
raise for bad input or an unusable selection.
"""

from __future__ import annotations

from typing import Any, Callable

from richedit.inline import (
    explode,
    find_mark,
    implode,
    inline_length,
    mark_extent,
    split_content,
    with_mark,
    without_mark,
)
from richedit.positions import (
    EditorState,
    Path,
    Position,
    Selection,
    TextblockRange,
    node_at,
    selection_is_valid,
    textblock_ranges,
)
from richedit.schemas.document import (
    ALIGNMENTS,
    BLOCK_CONTAINER_TYPES,
    LIST_TYPES,
    TEXTBLOCK_TYPES,
    Blockquote,
    BulletList,
    Document,
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
    unix_newlines,
)


_LIST_CLASSES = {"bullet_list": BulletList, "ordered_list": OrderedList}


def _copy(state: EditorState) -> Document | None:
    if not selection_is_valid(state.doc, state.selection):
        return None
    return state.doc.model_copy(deep=True)


def _changed(state: EditorState, doc: Document, selection: Selection) -> EditorState | None:
    if doc == state.doc:
        return None
    return EditorState(doc=doc, selection=selection)


def _apply_to_chars(
    ranges: list[TextblockRange], change: Callable[[tuple[Mark, ...]], tuple[Mark, ...]]
) -> None:
    for covered in ranges:
        chars = explode(covered.node.content)
        for index in range(covered.start, covered.end):
            char, marks = chars[index]
            if char is not None:
                chars[index] = (char, change(marks))
        covered.node.content = implode(chars)


def _text_marks(ranges: list[TextblockRange]) -> list[tuple[Mark, ...]]:
    marks = []
    for covered in ranges:
        chars = explode(covered.node.content)
        marks.extend(m for char, m in chars[covered.start : covered.end] if char is not None)
    return marks


def range_has_mark(ranges: list[TextblockRange], mark_type: MarkType) -> bool:
    """True when every text character in ``ranges`` carries ``mark_type``."""
    marks = _text_marks(ranges)
    return bool(marks) and all(find_mark(m, mark_type) is not None for m in marks)


def _link_range_at(doc: Document, position: Position) -> list[TextblockRange]:
    node = node_at(doc, position.path)
    extent = mark_extent(explode(node.content), position.offset, MarkType.LINK)
    if extent is None:
        return []
    return [TextblockRange(path=position.path, node=node, start=extent[0], end=extent[1])]


# -- marks -------------------------------------------------------------------


def toggle_mark(
    state: EditorState,
    mark_type: MarkType | str,
    *,
    href: str | None = None,
    target: str | None = None,
) -> EditorState | None:
    """Add ``mark_type`` to the selection, or remove it where it covers all of it."""
    try:
        mark_type = MarkType(mark_type)
    except ValueError:
        return None
    doc = _copy(state)
    if doc is None:
        return None
    selection = state.selection

    if mark_type is MarkType.LINK:
        if selection.empty:
            ranges = _link_range_at(doc, selection.head)
        else:
            ranges = textblock_ranges(doc, selection.start, selection.end)
        if not ranges:
            return None
        if range_has_mark(ranges, MarkType.LINK):
            _apply_to_chars(ranges, lambda marks: without_mark(marks, MarkType.LINK))
        elif href:
            link = Mark(type=MarkType.LINK, href=href, target=_normalize_target(target))
            _apply_to_chars(ranges, lambda marks: with_mark(marks, link))
        else:
            return None
        return _changed(state, doc, selection)

    if selection.empty:
        return None
    ranges = textblock_ranges(doc, selection.start, selection.end)
    if range_has_mark(ranges, mark_type):
        _apply_to_chars(ranges, lambda marks: without_mark(marks, mark_type))
    else:
        mark = Mark(type=mark_type)
        _apply_to_chars(ranges, lambda marks: with_mark(marks, mark))
    return _changed(state, doc, selection)


def _normalize_target(target: str | None) -> str | None:
    if not target or target == "_self":
        return None
    return target


def insert_link(
    state: EditorState, url: str, text: str | None = None, target: str | None = None
) -> EditorState | None:
    """Insert a new linked run when ``text`` is given, else link the selection.

    Without ``text`` a collapsed cursor inside an existing link re-targets that
    whole link.
    """
    if not url:
        return None
    doc = _copy(state)
    if doc is None:
        return None
    selection = state.selection
    link = Mark(type=MarkType.LINK, href=url, target=_normalize_target(target))

    if text:
        text = unix_newlines(text)
        start, end = _single_block_range(selection)
        node = node_at(doc, start.path)
        chars = explode(node.content)
        chars[start.offset : end.offset] = [(char, (link,)) for char in text]
        node.content = implode(chars)
        cursor = Position(start.path, start.offset + len(text))
        return _changed(state, doc, Selection.collapsed(cursor))

    if selection.empty:
        ranges = _link_range_at(doc, selection.head)
    else:
        ranges = textblock_ranges(doc, selection.start, selection.end)
    if not _text_marks(ranges):
        return None
    _apply_to_chars(ranges, lambda marks: with_mark(marks, link))
    return _changed(state, doc, selection)


def remove_link(state: EditorState) -> EditorState | None:
    """Strip the link from the selection, widened to the whole link range."""
    doc = _copy(state)
    if doc is None:
        return None
    selection = state.selection

    if selection.empty:
        ranges = _link_range_at(doc, selection.head)
    else:
        ranges = textblock_ranges(doc, selection.start, selection.end)
        _widen_to_links(ranges)
    if not ranges:
        return None
    _apply_to_chars(ranges, lambda marks: without_mark(marks, MarkType.LINK))
    return _changed(state, doc, selection)


def _widen_to_links(ranges: list[TextblockRange]) -> None:
    first, last = ranges[0], ranges[-1]
    chars = explode(first.node.content)
    if first.start < len(chars):
        extent = mark_extent(chars, first.start + 1, MarkType.LINK)
        if extent is not None and extent[0] <= first.start < extent[1]:
            first.start = extent[0]
    chars = explode(last.node.content)
    if last.end > 0:
        extent = mark_extent(chars, last.end, MarkType.LINK)
        if extent is not None and extent[0] < last.end <= extent[1]:
            last.end = extent[1]


# -- textblock type and attributes ---------------------------------------------


def _retype_textblocks(
    state: EditorState, build: Callable[[Any], Any]
) -> EditorState | None:
    doc = _copy(state)
    if doc is None:
        return None
    selection = state.selection
    for covered in textblock_ranges(doc, selection.start, selection.end):
        parent = node_at(doc, covered.path[:-1])
        parent.content[covered.path[-1]] = build(covered.node)
    return _changed(state, doc, selection)


def set_heading(state: EditorState, level: int) -> EditorState | None:
    if level not in (1, 2, 3):
        return None
    return _retype_textblocks(
        state,
        lambda node: Heading(level=level, text_align=node.text_align, content=node.content),
    )


def set_paragraph(state: EditorState) -> EditorState | None:
    return _retype_textblocks(
        state, lambda node: Paragraph(text_align=node.text_align, content=node.content)
    )


def toggle_heading(state: EditorState, level: int) -> EditorState | None:
    """Turn the covered textblocks into headings, or back into paragraphs."""
    if level not in (1, 2, 3) or not selection_is_valid(state.doc, state.selection):
        return None
    selection = state.selection
    covered = textblock_ranges(state.doc, selection.start, selection.end)
    if all(isinstance(c.node, Heading) and c.node.level == level for c in covered):
        return set_paragraph(state)
    return set_heading(state, level)


def set_text_align(state: EditorState, value: str) -> EditorState | None:
    if value not in ALIGNMENTS:
        return None
    stored = None if value == "left" else value
    doc = _copy(state)
    if doc is None:
        return None
    selection = state.selection
    for covered in textblock_ranges(doc, selection.start, selection.end):
        covered.node.text_align = stored
    return _changed(state, doc, selection)


# -- block wrapping ------------------------------------------------------------


def block_range(doc: Document, start: Path, end: Path) -> tuple[Path, int, int]:
    """Sibling blocks spanning two textblock paths, as ``(container, lo, hi)``.

    The container always holds blocks (document, list item, blockquote or
    cell); a range that would fall inside a list or table selects the list or
    table itself.
    """
    depth = 0
    limit = min(len(start), len(end)) - 1
    while depth < limit and start[depth] == end[depth]:
        depth += 1
    container, lo, hi = start[:depth], start[depth], end[depth]
    while not isinstance(node_at(doc, container), BLOCK_CONTAINER_TYPES):
        lo = hi = container[-1]
        container = container[:-1]
    return container, lo, hi


def _common_ancestor(doc: Document, start: Path, end: Path, kinds: tuple) -> Path | None:
    """Deepest ancestor of both paths whose node is one of ``kinds``."""
    for depth in range(min(len(start), len(end)), 0, -1):
        prefix = start[:depth]
        if end[:depth] != prefix:
            continue
        if isinstance(node_at(doc, prefix), kinds):
            return prefix
    return None


def _remap(selection: Selection, remap: Callable[[Path], Path]) -> Selection:
    return Selection(
        anchor=Position(remap(selection.anchor.path), selection.anchor.offset),
        head=Position(remap(selection.head.path), selection.head.offset),
    )


def toggle_blockquote(state: EditorState) -> EditorState | None:
    """Lift the enclosing blockquote, or wrap the covered blocks in one."""
    doc = _copy(state)
    if doc is None:
        return None
    selection = state.selection
    start, end = selection.start.path, selection.end.path

    quote_path = _common_ancestor(doc, start, end, (Blockquote,))
    if quote_path is not None:
        parent = node_at(doc, quote_path[:-1])
        index = quote_path[-1]
        parent.content[index : index + 1] = parent.content[index].content
        depth = len(quote_path)

        def lift(path: Path) -> Path:
            if path[:depth] != quote_path:
                return path
            return (*quote_path[:-1], index + path[depth], *path[depth + 1 :])

        return _changed(state, doc, _remap(selection, lift))

    container_path, lo, hi = block_range(doc, start, end)
    container = node_at(doc, container_path)
    container.content[lo : hi + 1] = [Blockquote(content=container.content[lo : hi + 1])]
    depth = len(container_path)

    def wrap(path: Path) -> Path:
        if path[:depth] != container_path or not lo <= path[depth] <= hi:
            return path
        return (*container_path, lo, path[depth] - lo, *path[depth + 1 :])

    return _changed(state, doc, _remap(selection, wrap))


def toggle_list(state: EditorState, kind: str) -> EditorState | None:
    """Wrap in a list of ``kind``, convert the enclosing list, or lift out of it."""
    list_cls = _LIST_CLASSES.get(kind)
    if list_cls is None:
        return None
    doc = _copy(state)
    if doc is None:
        return None
    selection = state.selection
    start, end = selection.start.path, selection.end.path

    list_path = _common_ancestor(doc, start, end, LIST_TYPES)
    if list_path is not None:
        parent = node_at(doc, list_path[:-1])
        index = list_path[-1]
        current = parent.content[index]
        if not isinstance(current, list_cls):
            parent.content[index] = list_cls(content=current.content)
            return _changed(state, doc, selection)
        return _lift_list_items(state, doc, list_path, list_cls)

    container_path, lo, hi = block_range(doc, start, end)
    container = node_at(doc, container_path)
    depth = len(container_path)
    items: list[ListItem] = []
    # block index -> (first item index, whether the block was itself a list)
    placement: dict[int, tuple[int, bool]] = {}
    for offset, block in enumerate(container.content[lo : hi + 1]):
        is_list = isinstance(block, LIST_TYPES)
        placement[lo + offset] = (len(items), is_list)
        if is_list:
            items.extend(block.content)
        else:
            items.append(ListItem(content=[block]))
    container.content[lo : hi + 1] = [list_cls(content=items)]

    def wrap(path: Path) -> Path:
        if path[:depth] != container_path or path[depth] not in placement:
            return path
        first, is_list = placement[path[depth]]
        if is_list:
            return (*container_path, lo, first + path[depth + 1], *path[depth + 2 :])
        return (*container_path, lo, first, 0, *path[depth + 1 :])

    return _changed(state, doc, _remap(selection, wrap))


def _lift_list_items(
    state: EditorState, doc: Document, list_path: Path, list_cls: type
) -> EditorState | None:
    selection = state.selection
    parent = node_at(doc, list_path[:-1])
    index = list_path[-1]
    items = parent.content[index].content
    depth = len(list_path)
    lo, hi = selection.start.path[depth], selection.end.path[depth]

    before, covered, after = items[:lo], items[lo : hi + 1], items[hi + 1 :]
    replacement: list = []
    if before:
        replacement.append(list_cls(content=before))
    # item index -> parent index of its first lifted block
    starts: dict[int, int] = {}
    for item_index, item in enumerate(covered, start=lo):
        starts[item_index] = index + len(replacement)
        replacement.extend(item.content)
    if after:
        replacement.append(list_cls(content=after))
    parent.content[index : index + 1] = replacement

    def lift(path: Path) -> Path:
        if path[:depth] != list_path or path[depth] not in starts:
            return path
        return (*list_path[:-1], starts[path[depth]] + path[depth + 1], *path[depth + 2 :])

    return _changed(state, doc, _remap(selection, lift))


# -- insertion -----------------------------------------------------------------


def _single_block_range(selection: Selection) -> tuple[Position, Position]:
    """The range an insertion replaces. Multi-block selections collapse to their end."""
    start, end = selection.start, selection.end
    if start.path != end.path:
        return end, end
    return start, end


def _delete_selection(doc: Document, selection: Selection) -> Position:
    """Remove the text a block insertion replaces and return where the block goes."""
    start, end = _single_block_range(selection)
    if start.offset == end.offset:
        return start
    node = node_at(doc, start.path)
    chars = explode(node.content)
    del chars[start.offset : end.offset]
    node.content = implode(chars)
    return start


def _insert_block(doc: Document, position: Position, block) -> tuple[Path, int]:
    """Insert ``block`` at ``position`` and return ``(container, index)`` of it.

    An empty textblock is replaced; otherwise the textblock is split at the
    offset when it falls inside the text.
    """
    container_path, index = position.path[:-1], position.path[-1]
    container = node_at(doc, container_path)
    textblock = container.content[index]
    length = inline_length(textblock.content)

    if length == 0:
        container.content[index] = block
        return container_path, index
    if position.offset == 0:
        container.content.insert(index, block)
        return container_path, index
    if position.offset >= length:
        container.content.insert(index + 1, block)
        return container_path, index + 1

    head, tail = split_content(textblock.content, position.offset)
    textblock.content = head
    rest = textblock.model_copy(update={"content": tail})
    container.content[index + 1 : index + 1] = [block, rest]
    return container_path, index + 1


def insert_image(
    state: EditorState, src: str, alt: str | None = None, title: str | None = None
) -> EditorState | None:
    """Insert an image at the cursor; the cursor lands just after it.

    The URL is not checked here.
    """
    doc = _copy(state)
    if doc is None:
        return None
    image = Image(src=src, alt=alt, title=title)
    container_path, index = _insert_block(doc, _delete_selection(doc, state.selection), image)

    container = node_at(doc, container_path)
    following = index + 1
    if following >= len(container.content) or not isinstance(
        container.content[following], TEXTBLOCK_TYPES
    ):
        container.content.insert(following, Paragraph())
    cursor = Position((*container_path, following), 0)
    return _changed(state, doc, Selection.collapsed(cursor))


def build_table(rows: int, cols: int, with_header_row: bool = True) -> Table:
    table_rows = []
    for row in range(rows):
        cell_cls = TableHeader if with_header_row and row == 0 else TableCell
        table_rows.append(TableRow(content=[cell_cls() for _ in range(cols)]))
    return Table(content=table_rows)


def insert_table(
    state: EditorState, rows: int, cols: int, with_header_row: bool = True
) -> EditorState | None:
    """Insert an empty ``rows`` x ``cols`` table; the cursor moves to its first cell."""
    if not isinstance(rows, int) or not isinstance(cols, int) or rows < 1 or cols < 1:
        return None
    doc = _copy(state)
    if doc is None:
        return None
    container_path, index = _insert_block(
        doc, _delete_selection(doc, state.selection), build_table(rows, cols, with_header_row)
    )
    cursor = Position((*container_path, index, 0, 0, 0), 0)
    return _changed(state, doc, Selection.collapsed(cursor))


def insert_hard_break(state: EditorState) -> EditorState | None:
    doc = _copy(state)
    if doc is None:
        return None
    start, end = _single_block_range(state.selection)
    node = node_at(doc, start.path)
    chars = explode(node.content)
    chars[start.offset : end.offset] = [(None, ())]
    node.content = implode(chars)
    return _changed(state, doc, Selection.collapsed(Position(start.path, start.offset + 1)))


COMMANDS: dict[str, Callable[..., EditorState | None]] = {
    "toggle_mark": toggle_mark,
    "set_heading": set_heading,
    "toggle_heading": toggle_heading,
    "set_paragraph": set_paragraph,
    "toggle_blockquote": toggle_blockquote,
    "toggle_list": toggle_list,
    "set_text_align": set_text_align,
    "insert_image": insert_image,
    "insert_link": insert_link,
    "remove_link": remove_link,
    "insert_table": insert_table,
    "insert_hard_break": insert_hard_break,
}
