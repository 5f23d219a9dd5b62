# =============================================================================
# app/routers/tables.py - Table Schema and Row CRUD Endpoints
# =============================================================================
# Stateless access to the managed tables:
# - schema lookup and validation from the schema registry
# - row CRUD through the entity client
# All endpoints require the admin capability.
# =============================================================================

from typing import Annotated, Any

from fastapi import APIRouter, Body, Path, Query, status
from pydantic import BaseModel, Field

from app.dependencies import AdminDep
from app.exceptions import RowValidationError, UnknownTableError
from core.models.schema import Row, TableSchema, ValidationResult
from core.schemas import (
    PRIORITY_TABLES,
    get_available_tables,
    get_table_schema,
    validate_row_data,
)
from core.services.entity_client import DEFAULT_SORT, get_entity, get_entity_name

router = APIRouter()

TablePath = Annotated[str, Path(description="Table name, e.g. posts")]


# =============================================================================
# Response Models
# =============================================================================

class TableSummary(BaseModel):
    """One entry in the table list."""
    table_name: str
    entity_name: str
    display_name: str
    description: str
    icon: str
    priority: bool
    column_count: int


class RowListResponse(BaseModel):
    table: str
    rows: list[Row]
    count: int = Field(..., description="Number of rows in this page")
    sort: str


class RowResponse(BaseModel):
    table: str
    row: Row


class DeleteResponse(BaseModel):
    table: str
    row_id: str
    deleted: bool = True


def _schema_or_404(table: str) -> TableSchema:
    schema = get_table_schema(table)
    if schema is None:
        raise UnknownTableError(table)
    return schema


# =============================================================================
# Schema Endpoints
# =============================================================================

@router.get("/tables", response_model=list[TableSummary])
async def list_tables(admin: AdminDep):
    """List every managed table, priority tabs first."""
    tables = sorted(
        get_available_tables(),
        key=lambda name: (name not in PRIORITY_TABLES, name.value),
    )
    summaries = []
    for name in tables:
        schema = get_table_schema(name)
        summaries.append(TableSummary(
            table_name=name.value,
            entity_name=get_entity_name(name),
            display_name=schema.display_name,
            description=schema.description,
            icon=schema.icon,
            priority=name in PRIORITY_TABLES,
            column_count=len(schema.columns),
        ))
    return summaries


@router.get("/tables/{table}", response_model=TableSchema)
async def get_table(table: TablePath, admin: AdminDep):
    """Get a table's full column metadata."""
    return _schema_or_404(table)


@router.post("/tables/{table}/validate", response_model=ValidationResult)
async def validate_row(
    table: TablePath,
    admin: AdminDep,
    data: Annotated[dict[str, Any], Body()],
):
    """
    Check a row against the table's required columns.

    Unknown tables are reported in the result rather than as 404.
    """
    return validate_row_data(table, data)


# =============================================================================
# Row Endpoints
# =============================================================================

@router.get("/tables/{table}/rows", response_model=RowListResponse)
async def list_rows(
    table: TablePath,
    admin: AdminDep,
    sort: Annotated[str, Query(description="Sort field, '-' prefix for descending")] = DEFAULT_SORT,
    limit: Annotated[int | None, Query(ge=1, le=10000)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """List rows, newest first by default."""
    rows = get_entity(table).list(sort=sort, limit=limit, offset=offset)
    return RowListResponse(table=table, rows=rows, count=len(rows), sort=sort)


@router.get("/tables/{table}/count")
async def count_rows(table: TablePath, admin: AdminDep):
    """Count rows in a table."""
    return {"table": table, "count": get_entity(table).count()}


@router.get("/tables/{table}/rows/{row_id}", response_model=RowResponse)
async def get_row(table: TablePath, row_id: str, admin: AdminDep):
    return RowResponse(table=table, row=get_entity(table).get(row_id))


@router.post("/tables/{table}/rows", response_model=RowResponse, status_code=status.HTTP_201_CREATED)
async def create_row(
    table: TablePath,
    admin: AdminDep,
    data: Annotated[dict[str, Any], Body()],
):
    """
    Create a row.

    Required fields are checked before anything is sent to the database;
    every missing field is reported at once.
    """
    entity = get_entity(table)
    result = validate_row_data(entity.table, data)
    if not result.valid:
        raise RowValidationError(entity.table.value, result.errors)
    return RowResponse(table=table, row=entity.create(data))


@router.patch("/tables/{table}/rows/{row_id}", response_model=RowResponse)
async def update_row(
    table: TablePath,
    row_id: str,
    admin: AdminDep,
    updates: Annotated[dict[str, Any], Body()],
):
    """Change only the supplied fields of a row."""
    return RowResponse(table=table, row=get_entity(table).update(row_id, updates))


@router.delete("/tables/{table}/rows/{row_id}", response_model=DeleteResponse)
async def delete_row(table: TablePath, row_id: str, admin: AdminDep):
    get_entity(table).delete(row_id)
    return DeleteResponse(table=table, row_id=row_id)
