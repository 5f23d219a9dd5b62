# =============================================================================
# tests/test_cells.py - Cell Rendering and Editor Input Tests
# =============================================================================

import pytest

from core.editor.cells import (
    EMPTY_PLACEHOLDER,
    editor_kind,
    editor_text,
    format_cell,
    parse_editor_input,
    stringify_value,
)
from core.models.editor import EditorKind
from core.models.schema import ColumnSpec, ColumnType


def column(column_type=ColumnType.TEXT, **kwargs):
    return ColumnSpec(key="field", label="Field", type=column_type, **kwargs)


STATUS = column(ColumnType.SELECT, options=["new", "won", "lost"])


class TestFormatCell:
    """Read-mode rendering."""

    def test_none_is_placeholder(self):
        display = format_cell(None, column())
        assert display.text == EMPTY_PLACEHOLDER
        assert display.empty

    def test_boolean_badge(self):
        assert format_cell(True, column(ColumnType.BOOLEAN)).text == "Yes"
        display = format_cell(False, column(ColumnType.BOOLEAN))
        assert display.text == "No"
        assert display.badge

    def test_array_joined(self):
        assert format_cell(["a", "b"], column(ColumnType.ARRAY)).text == "a, b"
        assert format_cell([], column(ColumnType.ARRAY)).empty

    def test_textarea_truncated(self):
        display = format_cell("x" * 150, column(ColumnType.TEXTAREA))
        assert len(display.text) == 100
        assert display.truncated
        assert not format_cell("short", column(ColumnType.TEXTAREA)).truncated

    def test_date_formatted(self):
        display = format_cell("2024-03-01T10:00:00Z", column(ColumnType.DATE))
        assert not display.empty
        assert "T10" not in display.text

    def test_unparseable_date_passes_through(self):
        assert format_cell("soon", column(ColumnType.DATE)).text == "soon"

    def test_image_shows_file_name(self):
        display = format_cell("https://cdn.example.com/img/hero.png?w=200", column(ColumnType.IMAGE))
        assert display.text == "hero.png"
        assert display.image_url == "https://cdn.example.com/img/hero.png?w=200"

    def test_plain_value(self):
        assert format_cell(42, column(ColumnType.NUMBER)).text == "42"


class TestEditorKind:

    @pytest.mark.parametrize("column_type,expected", [
        (ColumnType.SELECT, EditorKind.SELECT),
        (ColumnType.TEXTAREA, EditorKind.TEXTAREA),
        (ColumnType.DATE, EditorKind.DATE),
        (ColumnType.ARRAY, EditorKind.ARRAY),
        (ColumnType.BOOLEAN, EditorKind.BOOLEAN),
        (ColumnType.NUMBER, EditorKind.TEXT),
        (ColumnType.IMAGE, EditorKind.TEXT),
    ])
    def test_editor_per_type(self, column_type, expected):
        column_spec = STATUS if column_type == ColumnType.SELECT else column(column_type)
        assert editor_kind(column_spec) == expected

    def test_editor_text(self):
        assert editor_text(["a", "b"], column(ColumnType.ARRAY)) == "a, b"
        assert editor_text(None, column()) == ""
        assert editor_text("2024-03-01T10:00:00Z", column(ColumnType.DATE)) == "2024-03-01"


class TestParseEditorInput:
    """Editor input -> stored value."""

    def test_array_split_and_trimmed(self):
        assert parse_editor_input(" a, b ,, c ", column(ColumnType.ARRAY)) == ["a", "b", "c"]
        assert parse_editor_input("", column(ColumnType.ARRAY)) == []

    def test_boolean_words(self):
        assert parse_editor_input("Yes", column(ColumnType.BOOLEAN)) is True
        assert parse_editor_input("false", column(ColumnType.BOOLEAN)) is False
        assert parse_editor_input(True, column(ColumnType.BOOLEAN)) is True
        with pytest.raises(ValueError):
            parse_editor_input("maybe", column(ColumnType.BOOLEAN))

    def test_number(self):
        assert parse_editor_input("7", column(ColumnType.NUMBER)) == 7
        assert parse_editor_input("7.5", column(ColumnType.NUMBER)) == 7.5
        assert parse_editor_input("", column(ColumnType.NUMBER)) is None
        with pytest.raises(ValueError):
            parse_editor_input("seven", column(ColumnType.NUMBER))

    def test_select_must_be_an_option(self):
        assert parse_editor_input("won", STATUS) == "won"
        assert parse_editor_input("", STATUS) == ""
        with pytest.raises(ValueError):
            parse_editor_input("pending", STATUS)

    def test_date(self):
        assert parse_editor_input("2024-05-01", column(ColumnType.DATE)) == "2024-05-01"
        assert parse_editor_input(" ", column(ColumnType.DATE)) is None
        with pytest.raises(ValueError):
            parse_editor_input("May 1st", column(ColumnType.DATE))

    def test_text_kept_verbatim(self):
        assert parse_editor_input("  spaced  ", column()) == "  spaced  "


def test_stringify_value():
    assert stringify_value(None) == ""
    assert stringify_value(True) == "true"
    assert stringify_value(["a", "b"]) == "a,b"
    assert stringify_value({"k": 1}) == '{"k": 1}'
