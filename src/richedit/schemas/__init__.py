"""Shared schemas for richedit."""

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
from richedit.schemas.link import PendingLinkState
from richedit.schemas.table import TableSpec
from richedit.schemas.upload import ImageRecord, PendingUpload, UploadFile

__all__ = [
    "Blockquote",
    "BulletList",
    "Document",
    "HardBreak",
    "Heading",
    "Image",
    "ImageRecord",
    "ListItem",
    "Mark",
    "MarkType",
    "OrderedList",
    "Paragraph",
    "PendingLinkState",
    "PendingUpload",
    "Table",
    "TableCell",
    "TableHeader",
    "TableRow",
    "TableSpec",
    "Text",
    "UploadFile",
]
