# =============================================================================
# app/routers/console.py - Data Console Endpoints
# =============================================================================
# Drives the signed-in admin's DataManager and its spreadsheet grid.
# Every response carries the active table's state and a fresh grid render,
# so a client only ever draws what the server returns.
#
# Destructive actions need confirm=true. Without it the endpoint returns the
# confirmation prompt and changes nothing.
# =============================================================================

from typing import Annotated, Any, Awaitable, Callable

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel, Field

from app.dependencies import AdminDep, ConsoleDep, RegistryDep
from app.exceptions import NoActiveTableError, RowValidationError, UnknownColumnError
from core.editor.grid import DELETE_ROW_PROMPT, SpreadsheetGrid, bulk_delete_prompt
from core.models.editor import GridView, MutationResult
from core.models.manager import TableStateView, TableStats
from core.models.schema import Row
from core.services.data_manager import DataManager

router = APIRouter()

TablePath = Annotated[str, Path(description="Table name, e.g. posts")]
ConfirmQuery = Annotated[bool, Query(description="Set to true to confirm the deletion")]


# =============================================================================
# Request/Response Models
# =============================================================================

class DashboardResponse(BaseModel):
    active_table: str | None = None
    tables: list[TableStateView]
    stats: dict[str, TableStats]


class CloseResponse(BaseModel):
    closed: bool


class ConsoleView(BaseModel):
    """State of the active tab after an action."""
    state: TableStateView
    grid: GridView
    result: MutationResult | None = None
    results: list[MutationResult] | None = None
    # Set when the action did nothing and needs confirm=true
    confirm: str | None = None
    accepted: bool | None = None
    action: str | None = None


class CellRequest(BaseModel):
    row_id: Any
    column_key: str


class EditValueRequest(BaseModel):
    value: Any = None


class KeyRequest(BaseModel):
    key: str = Field(..., examples=["Enter", "Escape"])
    shift: bool = False


class SortRequest(BaseModel):
    column_key: str


class SearchRequest(BaseModel):
    term: str = ""


class SelectionRequest(BaseModel):
    row_id: Any
    selected: bool | None = None


class SelectAllRequest(BaseModel):
    checked: bool


class AddRowRequest(BaseModel):
    values: Row | None = None


# =============================================================================
# Helpers
# =============================================================================

def _grid(manager: DataManager) -> SpreadsheetGrid:
    if manager.grid is None:
        raise NoActiveTableError()
    return manager.grid


def _view(manager: DataManager, **extra) -> ConsoleView:
    grid = _grid(manager)
    return ConsoleView(state=manager.state(), grid=grid.render(), **extra)


def _check_column(grid: SpreadsheetGrid, column_key: str) -> None:
    if grid.schema.column(column_key) is None:
        raise UnknownColumnError(grid.schema.table_name.value, column_key)


async def _confirmed(grid: SpreadsheetGrid, operation: Callable[[], Awaitable[Any]]) -> Any:
    """Run a grid deletion with its confirmation prompt answered yes."""
    previous = grid.confirm
    grid.confirm = lambda message: True
    try:
        return await operation()
    finally:
        grid.confirm = previous


# =============================================================================
# Dashboard and Tabs
# =============================================================================

@router.get("", response_model=DashboardResponse)
async def get_dashboard(manager: ConsoleDep):
    """Per-table status and row counts."""
    return DashboardResponse(
        active_table=manager.active_table.value if manager.active_table else None,
        tables=manager.states(),
        stats=manager.stats(),
    )


@router.post("/load-all", response_model=DashboardResponse)
async def load_all_tables(manager: ConsoleDep):
    """Fetch every table not loaded yet, for the dashboard counts."""
    await manager.load_all()
    return await get_dashboard(manager)


@router.delete("", response_model=CloseResponse)
async def close_console(admin: AdminDep, registry: RegistryDep):
    """Discard the admin's console state (tabs, grid, pending edits)."""
    return CloseResponse(closed=registry.close(admin))


@router.post("/tabs/{table}", response_model=ConsoleView)
async def select_tab(table: TablePath, manager: ConsoleDep):
    """Switch to a table; loads it on first selection."""
    await manager.select_table(table)
    return _view(manager)


@router.get("/grid", response_model=ConsoleView)
async def get_grid(manager: ConsoleDep):
    return _view(manager)


@router.post("/tabs/{table}/refresh", response_model=DashboardResponse)
async def refresh_tab(table: TablePath, manager: ConsoleDep):
    await manager.refresh(table)
    return await get_dashboard(manager)


@router.post("/tabs/{table}/retry", response_model=DashboardResponse)
async def retry_tab(table: TablePath, manager: ConsoleDep):
    """Re-run the table's last failed operation."""
    await manager.retry(table)
    return await get_dashboard(manager)


@router.post("/tabs/{table}/dismiss", response_model=DashboardResponse)
async def dismiss_tab_error(table: TablePath, manager: ConsoleDep):
    manager.dismiss_error(table)
    return await get_dashboard(manager)


# =============================================================================
# Inline Editing
# =============================================================================

@router.post("/edit/start", response_model=ConsoleView)
async def start_edit(request: CellRequest, manager: ConsoleDep):
    """Open the editor on a cell. Read-only cells are refused (accepted=false)."""
    grid = _grid(manager)
    _check_column(grid, request.column_key)
    accepted = grid.start_edit(request.row_id, request.column_key)
    return _view(manager, accepted=accepted)


@router.post("/edit/value", response_model=ConsoleView)
async def set_edit_value(request: EditValueRequest, manager: ConsoleDep):
    grid = _grid(manager)
    if grid.state.editing_cell is None:
        return _view(manager, accepted=False)
    try:
        grid.set_edit_value(request.value)
    except ValueError as e:
        raise RowValidationError(grid.schema.table_name.value, [str(e)])
    return _view(manager, accepted=True)


@router.post("/edit/key", response_model=ConsoleView)
async def press_key(request: KeyRequest, manager: ConsoleDep):
    """Enter commits (Shift+Enter and textareas excepted), Escape cancels."""
    grid = _grid(manager)
    grid.last_result = None
    action = await grid.handle_key(request.key, shift=request.shift)
    return _view(manager, action=action.value, result=grid.last_result)


@router.post("/edit/commit", response_model=ConsoleView)
async def commit_edit(manager: ConsoleDep):
    result = await _grid(manager).commit_edit()
    return _view(manager, result=result)


@router.post("/edit/cancel", response_model=ConsoleView)
async def cancel_edit(manager: ConsoleDep):
    _grid(manager).cancel_edit()
    return _view(manager)


# =============================================================================
# Sort / Search / Columns / Selection
# =============================================================================

@router.post("/sort", response_model=ConsoleView)
async def toggle_sort(request: SortRequest, manager: ConsoleDep):
    """Header click: ascending on a new column, flips on the same column."""
    grid = _grid(manager)
    _check_column(grid, request.column_key)
    grid.toggle_sort(request.column_key)
    return _view(manager)


@router.post("/search", response_model=ConsoleView)
async def set_search(request: SearchRequest, manager: ConsoleDep):
    _grid(manager).set_search(request.term)
    return _view(manager)


@router.post("/columns/{column_key}/toggle", response_model=ConsoleView)
async def toggle_column(column_key: str, manager: ConsoleDep):
    grid = _grid(manager)
    _check_column(grid, column_key)
    visible = grid.toggle_column_visibility(column_key)
    return _view(manager, accepted=visible)


@router.post("/selection", response_model=ConsoleView)
async def toggle_selection(request: SelectionRequest, manager: ConsoleDep):
    selected = _grid(manager).toggle_row_selection(request.row_id, request.selected)
    return _view(manager, accepted=selected)


@router.post("/selection/all", response_model=ConsoleView)
async def select_all(request: SelectAllRequest, manager: ConsoleDep):
    _grid(manager).select_all(request.checked)
    return _view(manager)


# =============================================================================
# Add / Delete
# =============================================================================

@router.post("/rows", response_model=ConsoleView)
async def add_row(manager: ConsoleDep, request: AddRowRequest | None = None):
    """Add a row from schema defaults overlaid with the given values."""
    values = request.values if request else None
    result = await _grid(manager).add_row(values)
    return _view(manager, result=result)


@router.delete("/rows/{row_id}", response_model=ConsoleView)
async def delete_row(row_id: str, manager: ConsoleDep, confirm: ConfirmQuery = False):
    grid = _grid(manager)
    if not confirm:
        return _view(manager, confirm=DELETE_ROW_PROMPT)

    result = await _confirmed(grid, lambda: grid.delete_row(row_id))
    return _view(manager, result=result)


@router.post("/rows/delete-selected", response_model=ConsoleView)
async def delete_selected(manager: ConsoleDep, confirm: ConfirmQuery = False):
    """Delete all selected rows; the prompt names how many."""
    grid = _grid(manager)
    count = len(grid.selected_ids())
    if count == 0:
        return _view(manager, results=[])
    if not confirm:
        return _view(manager, confirm=bulk_delete_prompt(count))

    results = await _confirmed(grid, grid.delete_selected)
    return _view(manager, results=results)
