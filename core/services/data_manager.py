# =============================================================================
# core/services/data_manager.py - Table Tab Orchestration
# =============================================================================
# Owns the lifecycle of every priority table (unloaded/loading/loaded/error)
# and the one SpreadsheetGrid showing the active tab.
#
# - Entity calls run in a worker thread with a request timeout so a hung
#   request ends in an error instead of loading forever
# - Each load takes a request token; responses with a stale token are dropped.
#   Rows deleted while a load is in flight are filtered out of its response
# - Mutation handlers never raise: failures become the table's error string
#   and a failed MutationResult. A timed-out write is reported as unknown and
#   the table is reloaded instead of rolled back or replayed
# - Create/update re-fetch the table afterwards; delete only drops the row
#   locally
#
# Usage:
#   manager = DataManager()
#   grid = await manager.select_table(TableName.POSTS)
#   grid.start_edit(row_id, "title")
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Iterable

from app.config import settings
from app.exceptions import UnknownTableError
from core.editor.grid import ConfirmCallback, SpreadsheetGrid
from core.models.editor import MutationResult
from core.models.manager import TableLoadStatus, TableState, TableStateView, TableStats
from core.models.schema import Row, TableName
from core.schemas import get_priority_tables, get_table_schema, parse_table_name, validate_row_data
from core.services.entity_client import EntityClient, describe_error, get_entity

logger = logging.getLogger(__name__)

CREATE_IN_FLIGHT_MESSAGE = "A row is already being created"


class DataManager:
    """
    Admin data console for one user.

    Only this class mutates table state; callers read it through
    TableStateView snapshots, stats() and the active grid's render().
    """

    def __init__(
        self,
        tables: Iterable[TableName | str] | None = None,
        *,
        entity_factory: Callable[[TableName], EntityClient] = get_entity,
        confirm: ConfirmCallback | None = None,
        timeout: float | None = None,
    ):
        names = [self._parse(table) for table in tables] if tables else get_priority_tables()
        self.tables: tuple[TableName, ...] = tuple(names)
        self._states: dict[TableName, TableState] = {table: TableState(table=table) for table in self.tables}
        self._entity_factory = entity_factory
        self.confirm = confirm
        self.timeout = timeout or settings.ENTITY_REQUEST_TIMEOUT_SECONDS

        self.active_table: TableName | None = None
        self.grid: SpreadsheetGrid | None = None

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse(table: TableName | str) -> TableName:
        name = parse_table_name(table)
        if name is None:
            raise UnknownTableError(str(table))
        return name

    def _state(self, table: TableName | str | None) -> TableState:
        if table is None:
            if self.active_table is None:
                raise UnknownTableError("none selected")
            table = self.active_table
        name = self._parse(table)
        if name not in self._states:
            raise UnknownTableError(name.value)
        return self._states[name]

    def state(self, table: TableName | str | None = None) -> TableStateView:
        """Snapshot of one table's lifecycle state (active table by default)."""
        return TableStateView.from_state(self._state(table))

    def states(self) -> list[TableStateView]:
        return [TableStateView.from_state(self._states[table]) for table in self.tables]

    def stats(self) -> dict[str, TableStats]:
        """Per-table dashboard counts, derived from current state."""
        return {
            table.value: TableStats(count=len(state.rows), loaded=state.loaded)
            for table, state in self._states.items()
        }

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _call(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking entity call off the event loop, bounded by the timeout."""
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self.timeout)

    def _describe(self, error: Exception) -> str:
        if isinstance(error, asyncio.TimeoutError):
            return f"Request timed out after {self.timeout:g}s"
        return describe_error(error)

    def _sync_grid(self, state: TableState, rows: bool = True) -> None:
        """Push table state into the grid if that table is on screen."""
        if self.grid is None or self.active_table != state.table:
            return
        if rows:
            self.grid.set_rows(state.rows)
        self.grid.is_loading = state.is_loading
        self.grid.error = state.error

    def _build_grid(self, state: TableState) -> SpreadsheetGrid:
        grid = SpreadsheetGrid(
            get_table_schema(state.table),
            state.rows,
            on_update=partial(self.handle_update, state.table),
            on_create=partial(self.handle_create, state.table),
            on_delete=partial(self.handle_delete, state.table),
            confirm=self.confirm,
        )
        grid.is_loading = state.is_loading
        grid.error = state.error
        return grid

    async def _mutation_failed(
        self,
        state: TableState,
        operation: str,
        error: Exception,
        retry_action: Callable[[], Awaitable[Any]] | None,
    ) -> MutationResult:
        message = self._describe(error)
        if isinstance(error, asyncio.TimeoutError):
            return await self._mutation_timed_out(state, operation, message)

        logger.error(f"Failed to {operation} {state.table.value} row: {message}")
        state.error = message
        state.retry_action = retry_action
        self._sync_grid(state, rows=False)
        return MutationResult.failed(message)

    async def _mutation_timed_out(self, state: TableState, operation: str, message: str) -> MutationResult:
        """
        A timed-out write may still land: the worker thread keeps running.

        Nothing is rolled back or replayed. The table is reloaded to show what
        the server holds, and retry() only reloads again.
        """
        message = f"{message}; the {operation} may still have been applied"
        logger.error(f"Outcome of {operation} on {state.table.value} unknown: {message}")
        await self.load_table(state.table)
        if state.status != TableLoadStatus.ERROR:
            state.error = message
            state.retry_action = None
        self._sync_grid(state, rows=False)
        return MutationResult.unknown(message)

    # -------------------------------------------------------------------------
    # Tabs and loading
    # -------------------------------------------------------------------------

    async def select_table(self, table: TableName | str) -> SpreadsheetGrid:
        """
        Switch the active tab.

        The grid is rebuilt so no edit, selection or sort state leaks between
        tables. The table is fetched the first time it is selected.
        """
        state = self._state(table)
        self.active_table = state.table
        self.grid = self._build_grid(state)
        if state.status == TableLoadStatus.UNLOADED:
            await self.load_table(state.table)
        return self.grid

    async def load_table(self, table: TableName | str | None = None) -> TableStateView:
        """
        Fetch a table's rows.

        Rows already on screen stay there while loading and are replaced only
        when the new list arrives. A response superseded by a newer load is
        discarded.
        """
        state = self._state(table)
        state.request_token += 1
        token = state.request_token
        state.status = TableLoadStatus.LOADING
        state.error = None
        self._sync_grid(state, rows=False)

        try:
            entity = self._entity_factory(state.table)
            rows = await self._call(entity.list)
        except Exception as e:
            if token != state.request_token:
                logger.debug(f"Ignoring stale load failure for {state.table.value}")
                return TableStateView.from_state(state)
            state.deleted_during_load.clear()
            message = self._describe(e)
            logger.error(f"Failed to load {state.table.value}: {message}")
            state.status = TableLoadStatus.ERROR
            state.error = message
            state.retry_action = partial(self.load_table, state.table)
            self._sync_grid(state, rows=False)
            return TableStateView.from_state(state)

        if token != state.request_token:
            logger.debug(f"Discarding stale response for {state.table.value} (token {token})")
            return TableStateView.from_state(state)

        rows = list(rows)
        if state.deleted_during_load:
            primary_key = get_table_schema(state.table).primary_key
            rows = [row for row in rows if row.get(primary_key) not in state.deleted_during_load]
            state.deleted_during_load.clear()

        state.rows = rows
        state.status = TableLoadStatus.LOADED
        state.retry_action = None
        logger.info(f"Loaded {len(state.rows)} rows from {state.table.value}")
        self._sync_grid(state)
        return TableStateView.from_state(state)

    async def refresh(self, table: TableName | str | None = None) -> TableStateView:
        """Re-fetch a table (the active one by default)."""
        return await self.load_table(table)

    async def load_all(self) -> dict[str, TableStats]:
        """Load every table that hasn't been fetched yet, concurrently."""
        pending = [
            self.load_table(table)
            for table, state in self._states.items()
            if state.status == TableLoadStatus.UNLOADED
        ]
        if pending:
            await asyncio.gather(*pending)
        return self.stats()

    async def retry(self, table: TableName | str | None = None) -> TableStateView:
        """Re-run the operation that last failed, or reload if there is none."""
        state = self._state(table)
        action = state.retry_action
        state.error = None
        state.retry_action = None
        self._sync_grid(state, rows=False)

        if action is None:
            return await self.load_table(state.table)
        await action()
        return TableStateView.from_state(state)

    def dismiss_error(self, table: TableName | str | None = None) -> TableStateView:
        """Hide the error banner. A failed load stays in the error state."""
        state = self._state(table)
        state.error = None
        self._sync_grid(state, rows=False)
        return TableStateView.from_state(state)

    # -------------------------------------------------------------------------
    # Mutation handlers (grid callbacks)
    # -------------------------------------------------------------------------

    async def handle_update(self, table: TableName | str, row_id: Any, updates: Row) -> MutationResult:
        state = self._state(table)
        try:
            entity = self._entity_factory(state.table)
            row = await self._call(entity.update, row_id, updates)
        except Exception as e:
            return await self._mutation_failed(
                state, "update", e, partial(self.handle_update, state.table, row_id, updates)
            )

        await self.load_table(state.table)
        return MutationResult.ok(row)

    async def handle_create(self, table: TableName | str, data: Row) -> MutationResult:
        """
        Validate and insert a new row.

        Only one create per table may be in flight; a second request while
        the first is pending is rejected without a network call.
        """
        state = self._state(table)
        if state.creating:
            return MutationResult.failed(CREATE_IN_FLIGHT_MESSAGE)

        validation = validate_row_data(state.table, data)
        if not validation.valid:
            message = "; ".join(validation.errors)
            logger.warning(f"Rejected {state.table.value} row: {message}")
            state.error = message
            state.retry_action = None
            self._sync_grid(state, rows=False)
            return MutationResult.failed(message)

        state.creating = True
        try:
            entity = self._entity_factory(state.table)
            row = await self._call(entity.create, data)
        except Exception as e:
            return await self._mutation_failed(
                state, "create", e, partial(self.handle_create, state.table, data)
            )
        finally:
            state.creating = False

        await self.load_table(state.table)
        return MutationResult.ok(row)

    async def handle_delete(self, table: TableName | str, row_id: Any) -> MutationResult:
        state = self._state(table)
        try:
            entity = self._entity_factory(state.table)
            await self._call(entity.delete, row_id)
        except Exception as e:
            return await self._mutation_failed(
                state, "delete", e, partial(self.handle_delete, state.table, row_id)
            )

        if state.is_loading:
            # The in-flight list may have been read before the delete
            state.deleted_during_load.add(row_id)
        primary_key = get_table_schema(state.table).primary_key
        state.rows = [row for row in state.rows if row.get(primary_key) != row_id]
        # The grid already dropped the row itself
        self._sync_grid(state, rows=False)
        return MutationResult.ok()
