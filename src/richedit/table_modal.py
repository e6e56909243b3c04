"""Table size picker dialog."""

from __future__ import annotations

from typing import Callable

from richedit.config import TABLE_PICKER_MAX_COLS, TABLE_PICKER_MAX_ROWS
from richedit.schemas.table import TableSpec

InsertTable = Callable[[int, int, bool], object]


def _clamp(value: int, upper: int) -> int:
    return max(1, min(int(value), upper))


class TableModal:
    """Hover grid plus row/column selects over one ``TableSpec``.

    Hovering, clicking and the selects all write the same dimensions, so the
    last interaction wins. Submitting always inserts and then resets to a
    3x3 table with a header row.
    """

    max_rows = TABLE_PICKER_MAX_ROWS
    max_cols = TABLE_PICKER_MAX_COLS

    def __init__(self, on_insert: InsertTable) -> None:
        self.on_insert = on_insert
        self.is_open = False
        self.spec = TableSpec()
        self.hovered: tuple[int, int] | None = None

    def open(self) -> None:
        self._reset()
        self.is_open = True

    def close(self) -> None:
        self._reset()
        self.is_open = False

    def _reset(self) -> None:
        self.spec = TableSpec()
        self.hovered = None

    def _resize(self, rows: int, cols: int) -> None:
        self.spec = self.spec.model_copy(
            update={"rows": _clamp(rows, self.max_rows), "cols": _clamp(cols, self.max_cols)}
        )

    def hover_cell(self, row: int, col: int) -> None:
        """Hover the zero-based grid cell ``(row, col)``."""
        self.hovered = (_clamp(row + 1, self.max_rows) - 1, _clamp(col + 1, self.max_cols) - 1)
        self._resize(row + 1, col + 1)

    def click_cell(self, row: int, col: int) -> None:
        self._resize(row + 1, col + 1)

    def leave_grid(self) -> None:
        self.hovered = None

    def set_rows(self, rows: int) -> None:
        self._resize(rows, self.spec.cols)

    def set_cols(self, cols: int) -> None:
        self._resize(self.spec.rows, cols)

    def set_with_header_row(self, value: bool) -> None:
        self.spec = self.spec.model_copy(update={"with_header_row": bool(value)})

    def is_highlighted(self, row: int, col: int) -> bool:
        """Whether a grid cell is drawn as part of the chosen or hovered size."""
        if row < self.spec.rows and col < self.spec.cols:
            return True
        return self.hovered is not None and row <= self.hovered[0] and col <= self.hovered[1]

    def preview(self) -> list[list[str]]:
        """Cell labels for the table that would be inserted."""
        labels = []
        for row in range(self.spec.rows):
            if row == 0 and self.spec.with_header_row:
                labels.append([f"Header {col + 1}" for col in range(self.spec.cols)])
            else:
                labels.append([f"Cell {row + 1}-{col + 1}" for col in range(self.spec.cols)])
        return labels

    @property
    def summary(self) -> str:
        text = f"{self.spec.rows} × {self.spec.cols} table"
        if self.spec.with_header_row:
            text += " with header row"
        return text

    def submit(self) -> TableSpec:
        spec = self.spec
        self.on_insert(spec.rows, spec.cols, spec.with_header_row)
        self.close()
        return spec
