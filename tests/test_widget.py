"""Tests for the host widget wiring."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from richedit.positions import Position
from richedit.schemas.upload import UploadFile
from richedit.widget import RichTextEditor


def _widget(content: str = "", **kwargs) -> tuple[RichTextEditor, list[str]]:
    changes: list[str] = []
    uploader = MagicMock()
    uploader.upload = AsyncMock(return_value="https://cdn.test/a.png")
    widget = RichTextEditor(content, on_change=changes.append, uploader=uploader, **kwargs)
    return widget, changes


class TestToolbar:
    """Tests for toolbar_state."""

    def test_reflects_selection(self) -> None:
        widget, _ = _widget('<h2 style="text-align: right"><em>Title</em></h2>')
        widget.editor.select_text("Title")

        toolbar = widget.toolbar_state()

        assert toolbar.italic
        assert toolbar.heading_2
        assert toolbar.align_right
        assert not toolbar.bold
        assert not toolbar.heading_1
        assert not toolbar.align_left
        assert not toolbar.can_undo

    def test_undo_button_follows_history(self) -> None:
        widget, _ = _widget("<p>x</p>")
        widget.editor.toggle_blockquote()

        assert widget.toolbar_state().blockquote
        assert widget.toolbar_state().can_undo


class TestDialogs:
    """Tests for dialog wiring."""

    def test_link_dialog_edits_existing_link(self) -> None:
        widget, changes = _widget('<p>See <a href="/old">docs</a></p>')
        widget.editor.set_selection(Position((0,), 5))

        modal = widget.open_link_modal()
        assert modal.is_editing
        assert modal.url == "/old"

        modal.set_url("example.com/docs")
        modal.set_target("_blank")
        assert modal.submit()

        assert changes[-1] == (
            '<p>See <a href="https://example.com/docs" target="_blank" '
            'rel="noopener noreferrer">docs</a></p>'
        )

    def test_link_dialog_removes_link(self) -> None:
        widget, _ = _widget('<p>See <a href="/old">docs</a></p>')
        widget.editor.set_selection(Position((0,), 5))

        assert widget.open_link_modal().remove()

        assert widget.editor.get_html() == "<p>See docs</p>"

    def test_table_dialog_inserts_table(self) -> None:
        widget, changes = _widget()

        modal = widget.open_table_modal()
        modal.hover_cell(1, 1)
        modal.submit()

        assert changes[-1].startswith("<table><tbody><tr><th><p></p></th><th><p></p></th></tr>")
        assert widget.editor.is_active("table_header")

    @pytest.mark.asyncio
    async def test_image_dialog_inserts_image(self) -> None:
        widget, changes = _widget("<p>Intro</p>", document_id="post-9")
        widget.editor.set_selection(Position((0,), 5))

        modal = widget.open_image_modal()
        modal.select_file(UploadFile(filename="cover.jpg", content_type="image/jpeg", data=b"jpg"))
        assert await modal.submit()

        assert changes[-1] == '<p>Intro</p><img src="https://cdn.test/a.png" alt="cover"><p></p>'
        modal.uploader.upload.assert_awaited_once()
        assert modal.uploader.upload.call_args.kwargs["document_id"] == "post-9"

    def test_line_break(self) -> None:
        widget, changes = _widget("<p>ab</p>")
        widget.editor.set_selection(Position((0,), 1))

        assert widget.insert_line_break()
        assert changes == ["<p>a<br>b</p>"]


class TestModes:
    """Tests for visual/HTML mode switching."""

    def test_html_mode_round_trip(self) -> None:
        widget, changes = _widget("<p>one</p>")

        widget.switch_mode("html")
        assert widget.html_content == "<p>one</p>"

        widget.set_html("<p>two</p><script>x</script>")
        assert changes == ["<p>two</p><script>x</script>"]

        widget.switch_mode("visual")
        assert widget.editor.get_html() == "<p>two</p>"
        assert len(changes) == 1
        assert widget.editor.undo()
        assert widget.editor.get_html() == "<p>one</p>"

    def test_visual_to_visual_keeps_document(self) -> None:
        widget, _ = _widget("<p>one</p>")
        widget.html_content = "<p>ignored</p>"

        widget.switch_mode("visual")

        assert widget.editor.get_html() == "<p>one</p>"

    def test_unknown_mode(self) -> None:
        widget, _ = _widget()

        with pytest.raises(ValueError, match="Unknown editor mode"):
            widget.switch_mode("markdown")
