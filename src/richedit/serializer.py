"""Serialize the document tree to HTML markup with a custom serializer."""

from __future__ import annotations

from html import escape

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
    TableHeader,
    Text,
    sort_marks,
)

_MARK_TAGS = {
    MarkType.BOLD: "strong",
    MarkType.ITALIC: "em",
    MarkType.STRIKE: "s",
    MarkType.CODE: "code",
    MarkType.LINK: "a",
}
_BLANK_TARGET_REL = "noopener noreferrer"


def serialize(doc: Document) -> str:
    """Render the document as markup. Equal trees always give equal strings."""
    return "".join(_serialize_block(block) for block in doc.content)


def _serialize_block(node) -> str:
    if isinstance(node, Paragraph):
        attrs = _attrs(style=_align_style(node.text_align))
        return f"<p{attrs}>{_serialize_inline(node.content)}</p>"

    if isinstance(node, Heading):
        attrs = _attrs(style=_align_style(node.text_align))
        return f"<h{node.level}{attrs}>{_serialize_inline(node.content)}</h{node.level}>"

    if isinstance(node, BulletList):
        return "<ul>" + "".join(_serialize_list_item(item) for item in node.content) + "</ul>"

    if isinstance(node, OrderedList):
        return "<ol>" + "".join(_serialize_list_item(item) for item in node.content) + "</ol>"

    if isinstance(node, Blockquote):
        return f"<blockquote>{_serialize_blocks(node.content)}</blockquote>"

    if isinstance(node, Table):
        return f"<table><tbody>{_serialize_rows(node)}</tbody></table>"

    if isinstance(node, Image):
        return f"<img{_attrs(src=node.src, alt=node.alt, title=node.title)}>"

    raise TypeError(f"Unsupported block node: {type(node).__name__}")


def _serialize_blocks(blocks) -> str:
    return "".join(_serialize_block(block) for block in blocks)


def _serialize_list_item(item: ListItem) -> str:
    return f"<li>{_serialize_blocks(item.content)}</li>"


def _serialize_rows(table: Table) -> str:
    rows = []
    for row in table.content:
        cells = []
        for cell in row.content:
            tag = "th" if isinstance(cell, TableHeader) else "td"
            cells.append(f"<{tag}>{_serialize_blocks(cell.content)}</{tag}>")
        rows.append("<tr>" + "".join(cells) + "</tr>")
    return "".join(rows)


def _serialize_inline(content) -> str:
    """Render inline runs, keeping shared marks open across adjacent runs."""
    parts: list[str] = []
    open_marks: list[Mark] = []
    for node in content:
        marks = sort_marks(node.marks) if isinstance(node, Text) else ()

        keep = 0
        while keep < len(open_marks) and keep < len(marks) and open_marks[keep] == marks[keep]:
            keep += 1
        for mark in reversed(open_marks[keep:]):
            parts.append(f"</{_MARK_TAGS[mark.type]}>")
        del open_marks[keep:]
        for mark in marks[keep:]:
            parts.append(_open_tag(mark))
            open_marks.append(mark)

        if isinstance(node, HardBreak):
            parts.append("<br>")
        else:
            parts.append(escape(node.text, quote=False))

    for mark in reversed(open_marks):
        parts.append(f"</{_MARK_TAGS[mark.type]}>")
    return "".join(parts)


def _open_tag(mark: Mark) -> str:
    if mark.type is MarkType.LINK:
        rel = _BLANK_TARGET_REL if mark.target == "_blank" else None
        return f"<a{_attrs(href=mark.href, target=mark.target, rel=rel)}>"
    return f"<{_MARK_TAGS[mark.type]}>"


def _align_style(text_align: str | None) -> str | None:
    return f"text-align: {text_align}" if text_align else None


def _attrs(**values: str | None) -> str:
    return "".join(
        f' {name}="{escape(value, quote=True)}"' for name, value in values.items() if value is not None
    )
