"""Link dialog state."""

from __future__ import annotations

from pydantic import BaseModel


class PendingLinkState(BaseModel):
    """Values read from the selection when the link dialog opens.

    Attributes:
        url: ``href`` of the link mark at the selection, or empty.
        text: Plain text covered by the selection.
        is_editing: True when an existing link was found.
    """

    url: str = ""
    text: str = ""
    is_editing: bool = False
