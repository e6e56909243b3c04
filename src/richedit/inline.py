"""Character-level helpers for textblock inline content.

Inline content is exploded into one entry per offset: ``(char, marks)`` for
text and ``(None, ())`` for a hard break. Imploding merges adjacent text with
equal marks back into runs, so exploding then imploding also normalizes.
"""

from __future__ import annotations

from typing import Iterable, Optional

from richedit.schemas.document import HardBreak, Mark, MarkType, Text, sort_marks

Char = tuple[Optional[str], tuple[Mark, ...]]


def explode(content: Iterable[Text | HardBreak]) -> list[Char]:
    chars: list[Char] = []
    for node in content:
        if isinstance(node, HardBreak):
            chars.append((None, ()))
            continue
        chars.extend((ch, node.marks) for ch in node.text)
    return chars


def implode(chars: Iterable[Char]) -> list[Text | HardBreak]:
    content: list[Text | HardBreak] = []
    buffer: list[str] = []
    buffer_marks: tuple[Mark, ...] = ()

    def flush() -> None:
        if buffer:
            content.append(Text(text="".join(buffer), marks=buffer_marks))
            buffer.clear()

    for ch, marks in chars:
        if ch is None:
            flush()
            content.append(HardBreak())
            continue
        if buffer and marks != buffer_marks:
            flush()
        buffer_marks = marks
        buffer.append(ch)
    flush()
    return content


def normalize(content: Iterable[Text | HardBreak]) -> list[Text | HardBreak]:
    return implode(explode(content))


def inline_length(content: Iterable[Text | HardBreak]) -> int:
    return sum(1 if isinstance(node, HardBreak) else len(node.text) for node in content)


def plain_text(content: Iterable[Text | HardBreak]) -> str:
    return "".join("\n" if isinstance(node, HardBreak) else node.text for node in content)


def split_content(
    content: list[Text | HardBreak], offset: int
) -> tuple[list[Text | HardBreak], list[Text | HardBreak]]:
    chars = explode(content)
    return implode(chars[:offset]), implode(chars[offset:])


def with_mark(marks: tuple[Mark, ...], mark: Mark) -> tuple[Mark, ...]:
    """Add ``mark``; a new link replaces any existing link."""
    kept = [existing for existing in marks if existing.type is not mark.type]
    return sort_marks([*kept, mark])


def without_mark(marks: tuple[Mark, ...], mark_type: MarkType) -> tuple[Mark, ...]:
    return tuple(mark for mark in marks if mark.type is not mark_type)


def find_mark(marks: tuple[Mark, ...], mark_type: MarkType) -> Mark | None:
    for mark in marks:
        if mark.type is mark_type:
            return mark
    return None


def marks_at(chars: list[Char], offset: int) -> tuple[Mark, ...]:
    """Marks in effect at a cursor: the character before it, else the one after."""
    for index in (offset - 1, offset):
        if 0 <= index < len(chars) and chars[index][0] is not None:
            return chars[index][1]
    return ()


def mark_extent(chars: list[Char], offset: int, mark_type: MarkType) -> tuple[int, int] | None:
    """Return the contiguous range around ``offset`` carrying the same mark."""
    for index in (offset - 1, offset):
        if not 0 <= index < len(chars):
            continue
        mark = find_mark(chars[index][1], mark_type)
        if mark is None:
            continue
        start = index
        while start > 0 and mark in chars[start - 1][1]:
            start -= 1
        end = index + 1
        while end < len(chars) and mark in chars[end][1]:
            end += 1
        return start, end
    return None
