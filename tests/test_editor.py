"""Tests for the stateful editor: dispatch, history and change emission."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from richedit.editor import Editor, EditorStatus
from richedit.history import ContentReset, Mutation
from richedit.positions import Position


class TestConstruction:
    """Tests for Editor construction and reading."""

    def test_empty_content(self) -> None:
        editor = Editor()

        assert editor.get_html() == "<p></p>"
        assert editor.is_empty()
        assert editor.status is EditorStatus.IDLE
        assert editor.selection.anchor == Position((0,), 0)

    def test_document_without_textblock_gets_paragraph(self) -> None:
        editor = Editor('<img src="/a.png">')

        assert editor.get_html() == '<img src="/a.png"><p></p>'
        assert editor.selection.anchor == Position((1,), 0)

    def test_get_text(self) -> None:
        editor = Editor("<h1>Title</h1><p>one<br>two</p>")

        assert editor.get_text() == "Title\none\ntwo"
        assert not editor.is_empty()

    def test_options_are_kept(self) -> None:
        editor = Editor(placeholder="Write...", document_id="post-1", editable=False)

        assert editor.placeholder == "Write..."
        assert editor.document_id == "post-1"
        assert editor.status is EditorStatus.DISABLED


class TestStatus:
    """Tests for the focus/selection/disabled states."""

    def test_focus_and_blur(self) -> None:
        editor = Editor("<p>x</p>")

        editor.focus()
        assert editor.status is EditorStatus.SELECTION_ACTIVE
        editor.blur()
        assert editor.status is EditorStatus.IDLE

    def test_selection_change_activates(self) -> None:
        editor = Editor("<p>hello</p>")

        assert editor.select_text("ell")
        assert editor.status is EditorStatus.SELECTION_ACTIVE

    def test_invalid_selection_is_rejected(self) -> None:
        editor = Editor("<p>hello</p>")

        assert not editor.set_selection(Position((0,), 99))
        assert not editor.set_selection(Position((3,), 0))
        assert editor.selection.anchor == Position((0,), 0)

    def test_command_while_idle_focuses(self) -> None:
        editor = Editor("<p>hello</p>")

        assert editor.insert_hard_break()
        assert editor.status is EditorStatus.SELECTION_ACTIVE

    def test_disabled_editor_ignores_commands(self) -> None:
        on_change = MagicMock()
        editor = Editor("<p>hello</p>", on_change=on_change)
        editor.select_text("hello")
        editor.set_editable(False)

        assert not editor.toggle_bold()
        assert not editor.insert_table(2, 2)
        assert not editor.can_apply("toggle_mark", "bold")
        editor.focus()
        assert editor.status is EditorStatus.DISABLED
        assert editor.get_html() == "<p>hello</p>"
        on_change.assert_not_called()

        editor.set_editable(True)
        assert editor.status is EditorStatus.IDLE
        assert editor.toggle_bold()


class TestChangeEmission:
    """on_change is called after every mutation and never on a no-op."""

    def test_emits_markup_on_mutation(self, changes: list[str]) -> None:
        editor = Editor("<p>Hello world</p>", on_change=changes.append)
        editor.select_text("world")

        assert editor.toggle_bold()

        assert changes == ["<p>Hello <strong>world</strong></p>"]

    def test_noop_does_not_emit(self, changes: list[str]) -> None:
        editor = Editor("<p>Hello world</p>", on_change=changes.append)

        assert not editor.toggle_bold()
        assert not editor.remove_link()
        assert not editor.set_text_align("left")

        assert changes == []
        assert editor.get_html() == "<p>Hello world</p>"
        assert not editor.history.can_undo

    def test_undo_and_redo_emit(self, changes: list[str]) -> None:
        editor = Editor("<p>Hello</p>", on_change=changes.append)
        editor.select_text("Hello")
        editor.toggle_italic()

        editor.undo()
        editor.redo()

        assert changes == ["<p><em>Hello</em></p>", "<p>Hello</p>", "<p><em>Hello</em></p>"]


class TestHistory:
    """Tests for undo/redo through the editor."""

    def test_empty_document_table_and_undo(self) -> None:
        """Inserting a table into an empty document can be undone."""
        editor = Editor("")

        assert editor.insert_table(2, 2, False)
        assert editor.get_html().count("<td><p></p></td>") == 4
        assert "<th>" not in editor.get_html()

        assert editor.undo()
        assert editor.get_html() == "<p></p>"

    def test_undo_restores_selection(self) -> None:
        editor = Editor("<p>Hello world</p>")
        editor.select_text("world")
        before = editor.selection

        editor.insert_link("https://x.test", "site")
        assert editor.selection != before
        editor.undo()

        assert editor.selection == before

    def test_new_mutation_clears_redo(self) -> None:
        editor = Editor("<p>ab</p>")
        editor.insert_hard_break()
        editor.undo()
        assert editor.can_apply("redo")

        editor.set_heading(1)

        assert not editor.can_apply("redo")
        assert not editor.redo()

    def test_undo_on_empty_history(self) -> None:
        editor = Editor("<p>x</p>")

        assert not editor.can_apply("undo")
        assert not editor.undo()

    def test_history_is_bounded(self) -> None:
        editor = Editor("<p>x</p>", history_depth=3)

        for _ in range(5):
            editor.insert_hard_break()

        assert len(editor.history) == 3
        undone = 0
        while editor.undo():
            undone += 1
        assert undone == 3
        assert editor.get_html() == "<p><br><br>x</p>"

    def test_records_command_name(self) -> None:
        editor = Editor("<p>x</p>")
        editor.set_heading(2)

        entry = editor.history._undo[-1]
        assert isinstance(entry, Mutation)
        assert entry.command == "set_heading"


class TestSetContent:
    """Tests for set_content."""

    def test_replaces_document_without_emitting(self, changes: list[str]) -> None:
        editor = Editor("<p>old</p>", on_change=changes.append)

        assert editor.set_content("<h2>new</h2>")

        assert editor.get_html() == "<h2>new</h2>"
        assert editor.selection.anchor == Position((0,), 0)
        assert changes == []

    def test_emit_update(self, changes: list[str]) -> None:
        editor = Editor("<p>old</p>", on_change=changes.append)

        editor.set_content("<p>new</p>", emit_update=True)

        assert changes == ["<p>new</p>"]

    def test_is_undoable(self) -> None:
        editor = Editor("<p>old</p>")
        editor.set_content("<p>new</p>")

        assert isinstance(editor.history._undo[-1], ContentReset)
        assert editor.undo()
        assert editor.get_html() == "<p>old</p>"

    def test_same_content_is_noop(self) -> None:
        editor = Editor("<p>same</p>")

        assert not editor.set_content("<p>same</p>")
        assert not editor.history.can_undo


class TestQueries:
    """Tests for is_active, can_apply and pending_link."""

    def test_mark_activity(self) -> None:
        editor = Editor("<p><strong>bold</strong> plain</p>")
        editor.select_text("bold")
        assert editor.is_active("bold")

        editor.select_text("bold plain")
        assert not editor.is_active("bold")

        editor.set_selection(Position((0,), 2))
        assert editor.is_active("bold")

    def test_block_activity(self) -> None:
        editor = Editor("<ul><li><h2>x</h2></li></ul>")
        editor.set_selection(Position((0, 0, 0), 0))

        assert editor.is_active("bullet_list")
        assert editor.is_active("list_item")
        assert editor.is_active("heading", {"level": 2})
        assert not editor.is_active("heading", {"level": 1})
        assert not editor.is_active("ordered_list")
        assert not editor.is_active("blockquote")

    def test_alignment_activity(self) -> None:
        editor = Editor('<p style="text-align: center">x</p><p>y</p>')

        assert editor.is_active(attrs={"text_align": "center"})
        editor.set_selection(Position((1,), 0))
        assert editor.is_active(attrs={"text_align": "left"})

    def test_link_activity_with_attrs(self) -> None:
        editor = Editor('<p><a href="/x">link</a></p>')
        editor.select_text("link")

        assert editor.is_active("link")
        assert editor.is_active("link", {"href": "/x"})
        assert not editor.is_active("link", {"href": "/y"})

    def test_unknown_name(self) -> None:
        assert not Editor("<p>x</p>").is_active("video")

    def test_can_apply_is_a_dry_run(self) -> None:
        editor = Editor("<p>Hello</p>")
        editor.select_text("Hello")

        assert editor.can_apply("toggle_mark", "bold")
        assert not editor.can_apply("toggle_mark", "sparkle")
        assert not editor.can_apply("no_such_command")
        assert editor.get_html() == "<p>Hello</p>"

    @pytest.mark.parametrize(
        ("markup", "needle", "expected"),
        [
            ('<p>Go <a href="/x">here</a></p>', "here", ("/x", "here", True)),
            ("<p>Go here</p>", "here", ("", "here", False)),
        ],
    )
    def test_pending_link(self, markup: str, needle: str, expected: tuple) -> None:
        editor = Editor(markup)
        editor.select_text(needle)

        pending = editor.pending_link()

        assert (pending.url, pending.text, pending.is_editing) == expected

    def test_pending_link_for_cursor_in_link(self) -> None:
        editor = Editor('<p><a href="/x">here</a></p>')
        editor.set_selection(Position((0,), 2))

        pending = editor.pending_link()

        assert pending.url == "/x"
        assert pending.text == ""
        assert pending.is_editing
