# =============================================================================
# core/editor/grid.py - Spreadsheet Grid
# =============================================================================
# Editable view of a table's rows. The grid owns presentation state only
# (edit state, sort, search, selection, column visibility); persistence is
# delegated to caller-supplied async callbacks, so the grid itself never
# talks to the network.
#
# Mutations are optimistic:
# - a committed cell edit is applied locally before on_update resolves and
#   rolled back if it fails
# - deleted rows disappear before on_delete resolves and come back at their
#   old position if it fails
#
# Usage:
#   grid = SpreadsheetGrid(schema, rows, on_update=..., on_create=..., on_delete=...)
#   grid.start_edit(row_id, "title")
#   grid.set_edit_value("New title")
#   await grid.commit_edit()
# =============================================================================

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable

from core.editor.cells import editor_kind, editor_text, format_cell, parse_editor_input, stringify_value
from core.models.editor import (
    CellRef,
    EditState,
    EditorKind,
    GridCell,
    GridColumn,
    GridRow,
    GridView,
    MutationResult,
    SortDirection,
)
from core.models.schema import ColumnSpec, Row, TableSchema
from core.schemas import build_default_row, get_server_owned_columns

logger = logging.getLogger(__name__)

# Callback signatures
UpdateCallback = Callable[[Any, Row], Awaitable[MutationResult]]
CreateCallback = Callable[[Row], Awaitable[MutationResult]]
DeleteCallback = Callable[[Any], Awaitable[MutationResult]]
ConfirmCallback = Callable[[str], bool]

DELETE_ROW_PROMPT = "Delete this row?"


def bulk_delete_prompt(count: int) -> str:
    return f"Delete {count} row(s)?"


class KeyAction(str, Enum):
    """What a key press did to the open editor."""
    COMMIT = "commit"
    CANCEL = "cancel"
    NONE = "none"


def _decline(message: str) -> bool:
    return False


class SpreadsheetGrid:
    """
    Interaction state for one table's spreadsheet view.

    Errors from the callbacks are not handled here beyond rolling back the
    optimistic change; the caller reports them through `error`.
    """

    def __init__(
        self,
        schema: TableSchema,
        rows: Iterable[Row] | None = None,
        *,
        on_update: UpdateCallback,
        on_create: CreateCallback,
        on_delete: DeleteCallback,
        confirm: ConfirmCallback | None = None,
    ):
        self.schema = schema
        self.rows: list[Row] = [dict(row) for row in rows or []]
        self.state = EditState()
        self.visible_columns: set[str] = {c.key for c in schema.columns if not c.hidden}
        self.on_update = on_update
        self.on_create = on_create
        self.on_delete = on_delete
        # Without a confirm hook every destructive prompt is declined
        self.confirm: ConfirmCallback = confirm or _decline

        # Reflected from the owner, never set by the grid itself
        self.is_loading = False
        self.error: str | None = None

        self.last_result: MutationResult | None = None

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    @property
    def primary_key(self) -> str:
        return self.schema.primary_key

    def row_id(self, row: Row) -> Any:
        return row.get(self.primary_key)

    def _index_of(self, row_id: Any) -> int | None:
        for index, row in enumerate(self.rows):
            if self.row_id(row) == row_id:
                return index
        return None

    def get_row(self, row_id: Any) -> Row | None:
        index = self._index_of(row_id)
        return None if index is None else self.rows[index]

    def set_rows(self, rows: Iterable[Row]) -> None:
        """Replace local rows with a fresh result set from the owner."""
        self.rows = [dict(row) for row in rows]
        ids = {self.row_id(row) for row in self.rows}

        cell = self.state.editing_cell
        if cell is not None and cell.row_id not in ids:
            self._close_editor()
        self.state.selected_rows &= ids

    # -------------------------------------------------------------------------
    # Inline Editing
    # -------------------------------------------------------------------------

    def _column(self, column_key: str) -> ColumnSpec:
        column = self.schema.column(column_key)
        if column is None:
            raise KeyError(f"Unknown column for {self.schema.table_name.value}: {column_key}")
        return column

    def start_edit(self, row_id: Any, column_key: str) -> bool:
        """
        Open the editor on a cell.

        Any other open editor is closed without committing. Read-only cells
        never open.

        Returns:
            True if the cell is now in edit mode
        """
        column = self._column(column_key)
        if column.read_only:
            return False

        row = self.get_row(row_id)
        if row is None:
            return False

        self._close_editor()
        self.state.editing_cell = CellRef(row_id=row_id, column_key=column_key)
        self.state.edit_value = row.get(column_key)
        return True

    def set_edit_value(self, raw: Any) -> Any:
        """
        Update the uncommitted value of the open editor.

        Raises:
            RuntimeError: If no cell is being edited
            ValueError: If the input doesn't fit the column type
        """
        cell = self.state.editing_cell
        if cell is None:
            raise RuntimeError("No cell is being edited")
        value = parse_editor_input(raw, self._column(cell.column_key))
        self.state.edit_value = value
        return value

    def cancel_edit(self) -> None:
        """Close the editor and discard the uncommitted value."""
        self._close_editor()

    def _close_editor(self) -> None:
        self.state.editing_cell = None
        self.state.edit_value = None

    async def commit_edit(self) -> MutationResult | None:
        """
        Commit the open editor through on_update.

        The new value is applied locally first. If on_update reports a
        failure (or raises), the cell goes back to its pre-edit value unless
        something newer has replaced it in the meantime. A timed-out update
        (outcome_unknown) is not rolled back; the owner reloads the rows.

        Returns:
            The callback's result, or None if no editor was open
        """
        cell = self.state.editing_cell
        if cell is None:
            return None
        value = self.state.edit_value
        self._close_editor()

        index = self._index_of(cell.row_id)
        if index is None:
            result = MutationResult.failed("Row no longer exists")
            self.last_result = result
            return result

        previous = self.rows[index].get(cell.column_key)
        self.rows[index] = {**self.rows[index], cell.column_key: value}

        try:
            result = await self.on_update(cell.row_id, {cell.column_key: value})
        except Exception:
            self._rollback_cell(cell, previous, value)
            raise

        if result.outcome_unknown:
            logger.warning(
                f"Update of {self.schema.table_name.value}.{cell.column_key} timed out, keeping local value"
            )
        elif not result.success:
            logger.warning(
                f"Update of {self.schema.table_name.value}.{cell.column_key} failed, rolling back"
            )
            self._rollback_cell(cell, previous, value)

        self.last_result = result
        return result

    def _rollback_cell(self, cell: CellRef, previous: Any, optimistic: Any) -> None:
        index = self._index_of(cell.row_id)
        if index is None:
            return
        if self.rows[index].get(cell.column_key) == optimistic:
            self.rows[index] = {**self.rows[index], cell.column_key: previous}

    async def handle_key(self, key: str, shift: bool = False) -> KeyAction:
        """
        Keyboard handling for the open editor.

        Enter commits, except with Shift held or in a textarea (where it
        inserts a newline). Escape cancels.
        """
        cell = self.state.editing_cell
        if cell is None:
            return KeyAction.NONE

        if key == "Escape":
            self.cancel_edit()
            return KeyAction.CANCEL

        if key == "Enter" and not shift:
            if editor_kind(self._column(cell.column_key)) == EditorKind.TEXTAREA:
                return KeyAction.NONE
            await self.commit_edit()
            return KeyAction.COMMIT

        return KeyAction.NONE

    # -------------------------------------------------------------------------
    # Add / Delete
    # -------------------------------------------------------------------------

    def new_row_payload(self, values: Row | None = None) -> Row:
        """
        Schema defaults overlaid with caller values.

        Server-owned and unknown keys never make it into the payload.
        """
        payload = build_default_row(self.schema.table_name)
        owned = get_server_owned_columns(self.schema.table_name)
        for key, value in (values or {}).items():
            if key in owned or self.schema.column(key) is None:
                continue
            payload[key] = value
        return payload

    async def add_row(self, values: Row | None = None) -> MutationResult:
        """
        Create a row through on_create.

        On success the server's representation (with its primary key and
        timestamps) is appended unless the owner already refreshed it in.
        """
        result = await self.on_create(self.new_row_payload(values))
        if result.success and result.row is not None:
            if self._index_of(self.row_id(result.row)) is None:
                self.rows.append(dict(result.row))
        self.last_result = result
        return result

    def _remove_local(self, row_id: Any) -> tuple[int, Row] | None:
        index = self._index_of(row_id)
        if index is None:
            return None
        row = self.rows.pop(index)
        self.state.selected_rows.discard(row_id)
        cell = self.state.editing_cell
        if cell is not None and cell.row_id == row_id:
            self._close_editor()
        return index, row

    def _restore_local(self, index: int, row: Row) -> None:
        if self._index_of(self.row_id(row)) is None:
            self.rows.insert(min(index, len(self.rows)), row)

    async def delete_row(self, row_id: Any) -> MutationResult | None:
        """
        Delete one row after confirmation.

        Returns:
            None if the prompt was declined, otherwise the callback's result
        """
        if not self.confirm(DELETE_ROW_PROMPT):
            return None

        removed = self._remove_local(row_id)
        if removed is None:
            result = MutationResult.failed("Row no longer exists")
            self.last_result = result
            return result

        try:
            result = await self.on_delete(row_id)
        except Exception:
            self._restore_local(*removed)
            raise

        if not result.success and not result.outcome_unknown:
            self._restore_local(*removed)
        self.last_result = result
        return result

    async def delete_selected(self) -> list[MutationResult]:
        """
        Delete every selected row after a single confirmation naming the count.

        Issues one on_delete per row. Returns an empty list when nothing is
        selected or the prompt was declined.
        """
        ids = self.selected_ids()
        if not ids:
            return []
        if not self.confirm(bulk_delete_prompt(len(ids))):
            return []

        removed = {row_id: self._remove_local(row_id) for row_id in ids}
        self.state.selected_rows.clear()

        results = []
        failed: list[tuple[int, Row]] = []
        for row_id in ids:
            try:
                result = await self.on_delete(row_id)
            except Exception as e:
                result = MutationResult.failed(str(e))
            if not result.success and not result.outcome_unknown:
                failed.append(removed[row_id])
            results.append(result)

        for index, row in sorted(failed, key=lambda pair: pair[0]):
            self._restore_local(index, row)

        if results:
            self.last_result = results[-1]
        return results

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def toggle_row_selection(self, row_id: Any, selected: bool | None = None) -> bool:
        """Select or deselect a row; flips the current state when `selected` is None."""
        if self._index_of(row_id) is None:
            return False
        if selected is None:
            selected = row_id not in self.state.selected_rows
        if selected:
            self.state.selected_rows.add(row_id)
        else:
            self.state.selected_rows.discard(row_id)
        return selected

    def selected_ids(self) -> list[Any]:
        """Selected row ids in row order."""
        selected = self.state.selected_rows
        return [self.row_id(row) for row in self.rows if self.row_id(row) in selected]

    def select_all(self, checked: bool) -> None:
        """Header checkbox: select every row currently shown, or clear."""
        if checked:
            self.state.selected_rows = {self.row_id(row) for row in self.view_rows()}
        else:
            self.state.selected_rows = set()

    # -------------------------------------------------------------------------
    # Sort / Search / Columns
    # -------------------------------------------------------------------------

    def toggle_sort(self, column_key: str) -> None:
        """Header click: flip direction on the sorted column, else sort ascending."""
        self._column(column_key)
        if self.state.sort_column == column_key:
            self.state.sort_direction = (
                SortDirection.DESC if self.state.sort_direction == SortDirection.ASC else SortDirection.ASC
            )
        else:
            self.state.sort_column = column_key
            self.state.sort_direction = SortDirection.ASC

    def set_search(self, term: str | None) -> None:
        self.state.search_term = term or ""

    def toggle_column_visibility(self, column_key: str) -> bool:
        """Show or hide a column. Sort and search state are left alone."""
        self._column(column_key)
        if column_key in self.visible_columns:
            self.visible_columns.discard(column_key)
            return False
        self.visible_columns.add(column_key)
        return True

    def visible_column_specs(self) -> list[ColumnSpec]:
        return [column for column in self.schema.columns if column.key in self.visible_columns]

    def filtered_rows(self) -> list[Row]:
        """Rows where any field contains the search term, case-insensitively."""
        term = self.state.search_term
        if not term:
            return list(self.rows)
        needle = term.lower()
        return [
            row for row in self.rows
            if any(needle in stringify_value(value).lower() for value in row.values())
        ]

    def sort_rows(self, rows: list[Row]) -> list[Row]:
        """Sort by the active column; rows without a value always go last."""
        column_key = self.state.sort_column
        if not column_key:
            return list(rows)

        present = [row for row in rows if row.get(column_key) is not None]
        missing = [row for row in rows if row.get(column_key) is None]
        reverse = self.state.sort_direction == SortDirection.DESC

        try:
            present.sort(key=lambda row: row[column_key], reverse=reverse)
        except TypeError:
            # Mixed types in one column
            present.sort(key=lambda row: stringify_value(row[column_key]), reverse=reverse)

        return present + missing

    def view_rows(self) -> list[Row]:
        """Rows as shown: filtered, then sorted."""
        return self.sort_rows(self.filtered_rows())

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _grid_column(self, column: ColumnSpec) -> GridColumn:
        sorted_direction = None
        if self.state.sort_column == column.key:
            sorted_direction = self.state.sort_direction
        return GridColumn(
            key=column.key,
            label=column.label,
            type=column.type,
            width=column.width,
            min_width=column.min_width,
            read_only=column.read_only,
            sorted=sorted_direction,
        )

    def _grid_cell(self, row: Row, column: ColumnSpec) -> GridCell:
        cell = self.state.editing_cell
        if cell is not None and cell.row_id == self.row_id(row) and cell.column_key == column.key:
            return GridCell(
                column_key=column.key,
                editor=editor_kind(column),
                editor_text=editor_text(self.state.edit_value, column),
                options=column.options,
            )
        return GridCell(column_key=column.key, display=format_cell(row.get(column.key), column))

    def render(self) -> GridView:
        """Snapshot of everything needed to draw the grid."""
        columns = self.visible_column_specs()
        shown = self.view_rows()
        selected = self.state.selected_rows

        editing = None
        if self.state.editing_cell is not None:
            cell = self.state.editing_cell
            editing = {"row_id": cell.row_id, "column_key": cell.column_key}

        footer = f"Showing {len(shown)} of {len(self.rows)} rows"
        if self.state.search_term:
            footer += " (filtered)"

        return GridView(
            table=self.schema.table_name.value,
            columns=[self._grid_column(column) for column in columns],
            all_columns=[self._grid_column(column) for column in self.schema.columns],
            rows=[
                GridRow(
                    row_id=self.row_id(row),
                    selected=self.row_id(row) in selected,
                    cells=[self._grid_cell(row, column) for column in columns],
                )
                for row in shown
            ],
            editing=editing,
            selected_count=len(selected),
            all_selected=bool(shown) and all(self.row_id(row) in selected for row in shown),
            sort_column=self.state.sort_column,
            sort_direction=self.state.sort_direction,
            search_term=self.state.search_term,
            shown_count=len(shown),
            total_count=len(self.rows),
            is_loading=self.is_loading,
            error=self.error,
            footer=footer,
        )
