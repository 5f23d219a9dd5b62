# =============================================================================
# core/editor/cells.py - Cell Rendering and Editor Input
# =============================================================================
# Read mode and edit mode for a single cell, driven by ColumnSpec.type:
#
# | Type     | Read mode                 | Editor                 |
# |----------|---------------------------|------------------------|
# | boolean  | Yes / No badge            | Yes/No toggle          |
# | array    | comma-joined text         | comma-separated text   |
# | date     | locale date               | date picker (ISO)      |
# | textarea | first 100 characters      | multi-line text        |
# | image    | thumbnail + file name     | text (URL)             |
# | select   | raw value                 | dropdown of options    |
# | other    | raw value                 | text                   |
# =============================================================================

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from core.models.editor import CellDisplay, EditorKind
from core.models.schema import ColumnSpec, ColumnType

EMPTY_PLACEHOLDER = "—"
TEXTAREA_PREVIEW_CHARS = 100

_EDITOR_KINDS = {
    ColumnType.SELECT: EditorKind.SELECT,
    ColumnType.TEXTAREA: EditorKind.TEXTAREA,
    ColumnType.DATE: EditorKind.DATE,
    ColumnType.ARRAY: EditorKind.ARRAY,
    ColumnType.BOOLEAN: EditorKind.BOOLEAN,
}

_TRUE_WORDS = {"true", "yes", "y", "1", "on"}
_FALSE_WORDS = {"false", "no", "n", "0", "off", ""}


def editor_kind(column: ColumnSpec) -> EditorKind:
    """Widget used to edit a column; plain text for everything unlisted."""
    return _EDITOR_KINDS.get(column.type, EditorKind.TEXT)


def stringify_value(value: Any) -> str:
    """
    Text form of a raw value, used by search.

    Lists are comma-joined and booleans lower-cased so the text matches what
    a person types into the search box.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify_value(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def format_date(value: Any) -> str:
    """Locale date for ISO strings and date objects; other values pass through."""
    parsed = _parse_date(value)
    if parsed is None:
        return str(value)
    return parsed.strftime("%x")


def _file_name(url: str) -> str:
    path = url.split("?", 1)[0].rstrip("/")
    return path.rsplit("/", 1)[-1] or url


def format_cell(value: Any, column: ColumnSpec) -> CellDisplay:
    """Render a cell in read mode."""
    kind = column.type

    if value is None:
        return CellDisplay(kind=kind, text=EMPTY_PLACEHOLDER, empty=True)

    if kind == ColumnType.BOOLEAN:
        return CellDisplay(kind=kind, text="Yes" if value else "No", badge=True)

    if kind == ColumnType.ARRAY:
        if isinstance(value, (list, tuple)) and value:
            return CellDisplay(kind=kind, text=", ".join(stringify_value(v) for v in value))
        return CellDisplay(kind=kind, text=EMPTY_PLACEHOLDER, empty=True)

    if kind == ColumnType.DATE:
        if value == "":
            return CellDisplay(kind=kind, text=EMPTY_PLACEHOLDER, empty=True)
        return CellDisplay(kind=kind, text=format_date(value))

    if kind == ColumnType.TEXTAREA:
        text = value if isinstance(value, str) else stringify_value(value)
        if not text:
            return CellDisplay(kind=kind, text=EMPTY_PLACEHOLDER, empty=True)
        return CellDisplay(
            kind=kind,
            text=text[:TEXTAREA_PREVIEW_CHARS],
            truncated=len(text) > TEXTAREA_PREVIEW_CHARS,
        )

    if kind == ColumnType.IMAGE:
        if not value:
            return CellDisplay(kind=kind, text=EMPTY_PLACEHOLDER, empty=True)
        url = str(value)
        return CellDisplay(kind=kind, text=_file_name(url), image_url=url)

    return CellDisplay(kind=kind, text=stringify_value(value))


def editor_text(value: Any, column: ColumnSpec) -> str:
    """Initial text shown in the editor for a value."""
    if value is None:
        return ""
    if column.type == ColumnType.ARRAY and isinstance(value, (list, tuple)):
        return ", ".join(stringify_value(v) for v in value)
    if column.type == ColumnType.BOOLEAN:
        return "true" if value else "false"
    if column.type == ColumnType.DATE:
        parsed = _parse_date(value)
        return parsed.isoformat() if parsed else str(value)
    return stringify_value(value)


def parse_editor_input(raw: Any, column: ColumnSpec) -> Any:
    """
    Convert editor input into the value stored in the row.

    Raises:
        ValueError: If the input can't be stored in this column
    """
    kind = column.type

    if kind == ColumnType.ARRAY:
        if isinstance(raw, (list, tuple)):
            items = [stringify_value(item).strip() for item in raw]
        else:
            items = [part.strip() for part in stringify_value(raw).split(",")]
        return [item for item in items if item]

    if kind == ColumnType.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        word = stringify_value(raw).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"{column.label} must be Yes or No")

    if kind == ColumnType.SELECT:
        if raw is None or raw == "":
            return ""
        if raw not in (column.options or []):
            raise ValueError(f"{column.label} must be one of: {', '.join(column.options or [])}")
        return raw

    if kind == ColumnType.NUMBER:
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return raw
        text = stringify_value(raw).strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            raise ValueError(f"{column.label} must be a number")

    if kind == ColumnType.DATE:
        text = stringify_value(raw).strip()
        if not text:
            return None
        if _parse_date(text) is None:
            raise ValueError(f"{column.label} must be a date (YYYY-MM-DD)")
        return text

    return "" if raw is None else stringify_value(raw)
