# =============================================================================
# core/editor/ - Spreadsheet Table Editor
# =============================================================================
# - cells.py: per-type cell rendering and editor input parsing
# - grid.py: SpreadsheetGrid (edit state, sort, search, selection, mutations)
# =============================================================================

from .cells import (
    EMPTY_PLACEHOLDER,
    editor_kind,
    editor_text,
    format_cell,
    parse_editor_input,
    stringify_value,
)
from .grid import DELETE_ROW_PROMPT, KeyAction, SpreadsheetGrid, bulk_delete_prompt

__all__ = [
    "EMPTY_PLACEHOLDER",
    "editor_kind",
    "editor_text",
    "format_cell",
    "parse_editor_input",
    "stringify_value",
    "DELETE_ROW_PROMPT",
    "KeyAction",
    "SpreadsheetGrid",
    "bulk_delete_prompt",
]
