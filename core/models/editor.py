# =============================================================================
# core/models/editor.py - Table Editor Schemas
# =============================================================================
# These models define what the table editor exposes:
# - EditState: ephemeral interaction state of one grid (never persisted)
# - MutationResult: outcome reported by a persistence callback
# - CellDisplay / GridView: read-only render snapshot sent to clients
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .schema import ColumnType, Row


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class EditorKind(str, Enum):
    """Inline editor widget used for a column type."""
    SELECT = "select"
    TEXTAREA = "textarea"
    DATE = "date"
    ARRAY = "array"          # comma-separated text
    BOOLEAN = "boolean"      # Yes/No toggle
    TEXT = "text"


@dataclass(frozen=True)
class CellRef:
    """One (row, column) pair."""
    row_id: Any
    column_key: str


@dataclass
class EditState:
    """
    Interaction state of a grid instance.

    At most one cell is being edited at a time; `edit_value` holds the
    uncommitted value of that cell.
    """
    editing_cell: CellRef | None = None
    edit_value: Any = None
    selected_rows: set = field(default_factory=set)
    sort_column: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
    search_term: str = ""


class MutationResult(BaseModel):
    """
    Result of a create/update/delete callback.

    Callers catch their own errors and report them here instead of raising.
    """
    success: bool
    error: str | None = None
    row: Row | None = None
    # The request timed out; the server may or may not have applied it
    outcome_unknown: bool = False

    @classmethod
    def ok(cls, row: Row | None = None) -> "MutationResult":
        return cls(success=True, row=row)

    @classmethod
    def failed(cls, error: str) -> "MutationResult":
        return cls(success=False, error=error)

    @classmethod
    def unknown(cls, error: str) -> "MutationResult":
        return cls(success=False, error=error, outcome_unknown=True)


# =============================================================================
# Render Snapshot
# =============================================================================

class CellDisplay(BaseModel):
    """Read-mode rendering of a single cell."""
    kind: ColumnType
    text: str
    empty: bool = False
    badge: bool = False
    truncated: bool = False
    image_url: str | None = None


class GridColumn(BaseModel):
    key: str
    label: str
    type: ColumnType
    width: int
    min_width: int
    read_only: bool
    sorted: SortDirection | None = None


class GridCell(BaseModel):
    column_key: str
    display: CellDisplay | None = None
    # Present only for the cell in edit mode
    editor: EditorKind | None = None
    editor_text: str | None = None
    options: list[str] | None = None


class GridRow(BaseModel):
    row_id: Any
    selected: bool = False
    cells: list[GridCell] = Field(default_factory=list)


class GridView(BaseModel):
    """Everything a client needs to draw the grid."""
    table: str
    columns: list[GridColumn]
    all_columns: list[GridColumn]
    rows: list[GridRow]
    editing: dict[str, Any] | None = None
    selected_count: int = 0
    all_selected: bool = False
    sort_column: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
    search_term: str = ""
    shown_count: int = 0
    total_count: int = 0
    is_loading: bool = False
    error: str | None = None
    footer: str = ""
