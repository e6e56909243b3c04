"""richedit: a headless rich-text editor with an HTML boundary."""

from richedit.editor import Editor, EditorStatus
from richedit.exceptions import ParseError, RicheditError, StorageError, UploadError
from richedit.html_parser import parse_html
from richedit.image_modal import ImageModalState, ImageUploadModal
from richedit.link_modal import LinkModal
from richedit.positions import EditorState, Position, Selection
from richedit.schemas import Document, PendingLinkState, TableSpec, UploadFile
from richedit.serializer import serialize
from richedit.storage import StorageUploader
from richedit.table_modal import TableModal
from richedit.widget import RichTextEditor

__all__ = [
    "Document",
    "Editor",
    "EditorState",
    "EditorStatus",
    "ImageModalState",
    "ImageUploadModal",
    "LinkModal",
    "ParseError",
    "PendingLinkState",
    "Position",
    "RicheditError",
    "RichTextEditor",
    "Selection",
    "StorageError",
    "StorageUploader",
    "TableModal",
    "TableSpec",
    "UploadError",
    "UploadFile",
    "parse_html",
    "serialize",
]
