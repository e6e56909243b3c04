"""Tests for the bounded history."""

from __future__ import annotations

import pytest

from richedit.history import ContentReset, History, Mutation
from richedit.html_parser import parse_html
from richedit.positions import EditorState, Position, Selection


def _state(markup: str) -> EditorState:
    return EditorState(doc=parse_html(markup), selection=Selection.collapsed(Position((0,), 0)))


class TestHistory:
    """Tests for History."""

    def test_rejects_non_positive_depth(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            History(0)

    def test_undo_returns_previous_state(self) -> None:
        history = History(5)
        first, second = _state("<p>a</p>"), _state("<p>b</p>")
        history.record(Mutation(command="set_heading", before=first))

        assert history.undo(second) is first
        assert history.redo(first) is second

    def test_entry_kind_survives_undo(self) -> None:
        """A content reset stays a content reset on the redo stack."""
        history = History(5)
        history.record(ContentReset(before=_state("<p>a</p>")))

        history.undo(_state("<p>b</p>"))

        assert isinstance(history._redo[-1], ContentReset)

    def test_oldest_entries_fall_off(self) -> None:
        history = History(2)
        states = [_state(f"<p>{n}</p>") for n in range(3)]
        for state in states:
            history.record(Mutation(command="insert_hard_break", before=state))

        assert len(history) == 2
        assert history.undo(_state("<p>x</p>")) is states[2]
        assert history.undo(states[2]) is states[1]
        assert history.undo(states[1]) is None

    def test_clear(self) -> None:
        history = History(2)
        history.record(Mutation(command="toggle_mark", before=_state("<p>a</p>")))

        history.clear()

        assert not history.can_undo
        assert not history.can_redo
