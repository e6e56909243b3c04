"""Document tree models.

The vocabulary is closed: every node carries a literal ``type`` tag and
containers hold discriminated unions of the kinds they accept.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MarkType(str, Enum):
    """Inline mark kinds, in canonical nesting order (outermost first)."""

    LINK = "link"
    BOLD = "bold"
    ITALIC = "italic"
    STRIKE = "strike"
    CODE = "code"


_MARK_RANK = {mark_type: rank for rank, mark_type in enumerate(MarkType)}

TextAlign = Literal["center", "right", "justify"]
ALIGNMENTS = ("left", "center", "right", "justify")


class Mark(BaseModel):
    """An inline mark. Only links carry attributes."""

    model_config = ConfigDict(frozen=True)

    type: MarkType
    href: str | None = None
    target: str | None = None

    @model_validator(mode="after")
    def check_attributes(self) -> "Mark":
        if self.type is MarkType.LINK:
            if not self.href:
                raise ValueError("link marks need an href")
        elif self.href is not None or self.target is not None:
            raise ValueError(f"{self.type.value} marks take no attributes")
        return self

    def sort_key(self) -> tuple[int, str, str]:
        return (_MARK_RANK[self.type], self.href or "", self.target or "")


class Text(BaseModel):
    """A run of text sharing one mark set."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str = Field(..., min_length=1)
    marks: tuple[Mark, ...] = ()

    @field_validator("text")
    @classmethod
    def newlines(cls, text: str) -> str:
        return unix_newlines(text)

    @field_validator("marks")
    @classmethod
    def canonical_marks(cls, marks: tuple[Mark, ...]) -> tuple[Mark, ...]:
        return sort_marks(marks)


class HardBreak(BaseModel):
    """A line break inside a textblock."""

    model_config = ConfigDict(frozen=True)

    type: Literal["hard_break"] = "hard_break"


Inline = Annotated[Union[Text, HardBreak], Field(discriminator="type")]


class Paragraph(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    text_align: TextAlign | None = None
    content: list[Inline] = Field(default_factory=list)


class Heading(BaseModel):
    type: Literal["heading"] = "heading"
    level: int = Field(default=1, ge=1, le=3)
    text_align: TextAlign | None = None
    content: list[Inline] = Field(default_factory=list)


class Image(BaseModel):
    type: Literal["image"] = "image"
    src: str
    alt: str | None = None
    title: str | None = None


class ListItem(BaseModel):
    type: Literal["list_item"] = "list_item"
    content: list[Block] = Field(default_factory=lambda: [Paragraph()], min_length=1)


class BulletList(BaseModel):
    type: Literal["bullet_list"] = "bullet_list"
    content: list[ListItem] = Field(..., min_length=1)


class OrderedList(BaseModel):
    type: Literal["ordered_list"] = "ordered_list"
    content: list[ListItem] = Field(..., min_length=1)


class Blockquote(BaseModel):
    type: Literal["blockquote"] = "blockquote"
    content: list[Block] = Field(default_factory=lambda: [Paragraph()], min_length=1)


class TableHeader(BaseModel):
    """A header cell. Distinct from ``TableCell`` by kind, not by style."""

    type: Literal["table_header"] = "table_header"
    content: list[Block] = Field(default_factory=lambda: [Paragraph()], min_length=1)


class TableCell(BaseModel):
    type: Literal["table_cell"] = "table_cell"
    content: list[Block] = Field(default_factory=lambda: [Paragraph()], min_length=1)


Cell = Annotated[Union[TableHeader, TableCell], Field(discriminator="type")]


class TableRow(BaseModel):
    type: Literal["table_row"] = "table_row"
    content: list[Cell] = Field(..., min_length=1)


class Table(BaseModel):
    type: Literal["table"] = "table"
    content: list[TableRow] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_rectangular(self) -> "Table":
        widths = {len(row.content) for row in self.content}
        if len(widths) > 1:
            raise ValueError(f"table rows have differing widths: {sorted(widths)}")
        return self

    @property
    def rows(self) -> int:
        return len(self.content)

    @property
    def cols(self) -> int:
        return len(self.content[0].content)


Block = Annotated[
    Union[Paragraph, Heading, BulletList, OrderedList, Blockquote, Table, Image],
    Field(discriminator="type"),
]


class Document(BaseModel):
    """Root of the tree. Always holds at least one block."""

    type: Literal["doc"] = "doc"
    content: list[Block] = Field(default_factory=lambda: [Paragraph()], min_length=1)


Textblock = Union[Paragraph, Heading]
TEXTBLOCK_TYPES = (Paragraph, Heading)
LIST_TYPES = (BulletList, OrderedList)
CELL_TYPES = (TableHeader, TableCell)
# Nodes whose ``content`` is a list of blocks.
BLOCK_CONTAINER_TYPES = (Document, ListItem, Blockquote, TableHeader, TableCell)

for _model in (
    ListItem,
    BulletList,
    OrderedList,
    Blockquote,
    TableHeader,
    TableCell,
    TableRow,
    Table,
    Document,
):
    _model.model_rebuild()


def sort_marks(marks) -> tuple[Mark, ...]:
    """Return marks deduplicated and in canonical order."""
    return tuple(sorted(set(marks), key=Mark.sort_key))


def unix_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")
