"""Table dialog schema."""

from __future__ import annotations

from pydantic import BaseModel, Field

from richedit.config import TABLE_PICKER_MAX_COLS, TABLE_PICKER_MAX_ROWS


class TableSpec(BaseModel):
    """Table dimensions chosen in the table dialog."""

    rows: int = Field(default=3, ge=1, le=TABLE_PICKER_MAX_ROWS)
    cols: int = Field(default=3, ge=1, le=TABLE_PICKER_MAX_COLS)
    with_header_row: bool = True
