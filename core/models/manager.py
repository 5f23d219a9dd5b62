# =============================================================================
# core/models/manager.py - Data Manager Schemas
# =============================================================================
# Per-table lifecycle state owned by the DataManager and the read-only views
# it hands out. Only the DataManager mutates TableState; everything else gets
# a TableStateView.
#
# Lifecycle:
#   unloaded -> loading -> loaded
#                       -> error -> loading (retry)
#   loaded -> loading (refresh keeps the old rows until the new list arrives)
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from .schema import Row, TableName


class TableLoadStatus(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class TableState:
    """Mutable state for one table, private to the DataManager."""
    table: TableName
    status: TableLoadStatus = TableLoadStatus.UNLOADED
    rows: list[Row] = field(default_factory=list)
    error: str | None = None
    # Incremented per load; a response is applied only if its token is current
    request_token: int = 0
    creating: bool = False
    # Rows deleted while a load was in flight; filtered out of its response
    deleted_during_load: set[Any] = field(default_factory=set)
    # Replays the last failed operation for retry()
    retry_action: Callable[[], Awaitable[Any]] | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == TableLoadStatus.LOADING

    @property
    def loaded(self) -> bool:
        return self.status == TableLoadStatus.LOADED


class TableStats(BaseModel):
    """Dashboard numbers for one table."""
    count: int = 0
    loaded: bool = False


class TableStateView(BaseModel):
    """Read-only snapshot of a TableState."""
    table: TableName
    status: TableLoadStatus
    row_count: int
    error: str | None = None
    creating: bool = False
    can_retry: bool = False

    @classmethod
    def from_state(cls, state: TableState) -> "TableStateView":
        return cls(
            table=state.table,
            status=state.status,
            row_count=len(state.rows),
            error=state.error,
            creating=state.creating,
            can_retry=state.error is not None,
        )
