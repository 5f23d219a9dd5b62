# =============================================================================
# core/models/ - Data Models
# =============================================================================
# This package contains the schemas shared across the console:
# - schema.py: TableSchema / ColumnSpec (table metadata)
# - editor.py: grid edit state, mutation results, render snapshot
# - manager.py: per-table lifecycle state and stats
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Schema Models - Table metadata
# -----------------------------------------------------------------------------
from .schema import (
    ColumnSpec,
    ColumnType,
    Row,
    TableName,
    TableSchema,
    ValidationResult,
)

# -----------------------------------------------------------------------------
# Editor Models - Spreadsheet grid
# -----------------------------------------------------------------------------
from .editor import (
    CellDisplay,
    CellRef,
    EditorKind,
    EditState,
    GridCell,
    GridColumn,
    GridRow,
    GridView,
    MutationResult,
    SortDirection,
)

# -----------------------------------------------------------------------------
# Manager Models - Table lifecycle
# -----------------------------------------------------------------------------
from .manager import (
    TableLoadStatus,
    TableState,
    TableStateView,
    TableStats,
)

__all__ = [
    # Schema
    "ColumnSpec",
    "ColumnType",
    "Row",
    "TableName",
    "TableSchema",
    "ValidationResult",
    # Editor
    "CellDisplay",
    "CellRef",
    "EditorKind",
    "EditState",
    "GridCell",
    "GridColumn",
    "GridRow",
    "GridView",
    "MutationResult",
    "SortDirection",
    # Manager
    "TableLoadStatus",
    "TableState",
    "TableStateView",
    "TableStats",
]
