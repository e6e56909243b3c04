"""Bounded linear undo/redo history."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Union

from richedit.config import RICHEDIT_HISTORY_DEPTH
from richedit.positions import EditorState


@dataclass(frozen=True)
class Mutation:
    """A command that changed the document, with the state it replaced."""

    command: str
    before: EditorState


@dataclass(frozen=True)
class ContentReset:
    """A wholesale ``set_content`` replacement."""

    before: EditorState


HistoryEntry = Union[Mutation, ContentReset]


class History:
    """Undo and redo stacks of prior states.

    Both stacks hold at most ``depth`` entries; the oldest entries fall off
    first. Recording a new entry clears the redo stack.
    """

    def __init__(self, depth: int = RICHEDIT_HISTORY_DEPTH) -> None:
        if depth < 1:
            raise ValueError(f"history depth must be positive, got {depth}")
        self.depth = depth
        self._undo: deque[HistoryEntry] = deque(maxlen=depth)
        self._redo: deque[HistoryEntry] = deque(maxlen=depth)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def __len__(self) -> int:
        return len(self._undo)

    def record(self, entry: HistoryEntry) -> None:
        self._undo.append(entry)
        self._redo.clear()

    def undo(self, current: EditorState) -> EditorState | None:
        """Pop the latest entry and return the state to restore."""
        if not self._undo:
            return None
        entry = self._undo.pop()
        self._redo.append(_replace_before(entry, current))
        return entry.before

    def redo(self, current: EditorState) -> EditorState | None:
        if not self._redo:
            return None
        entry = self._redo.pop()
        self._undo.append(_replace_before(entry, current))
        return entry.before

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()


def _replace_before(entry: HistoryEntry, state: EditorState) -> HistoryEntry:
    if isinstance(entry, Mutation):
        return Mutation(command=entry.command, before=state)
    return ContentReset(before=state)
