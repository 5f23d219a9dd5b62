# =============================================================================
# core/schemas/registry.py - Schema Registry
# =============================================================================
# Static lookup over the managed table definitions, keyed by TableName.
# Populated once at import time; there is no dynamic registration.
#
# Usage:
#   from core.schemas import get_table_schema, validate_row_data
#
#   schema = get_table_schema("posts")
#   result = validate_row_data("posts", {"title": "Hello"})
#   result.errors  # ["Slug is required"]
# =============================================================================

from __future__ import annotations

from typing import Any

from core.models.schema import ColumnSpec, ColumnType, Row, TableName, TableSchema, ValidationResult
from core.schemas.tables import ALL_SCHEMAS

# Registry: table name -> schema
TABLE_SCHEMAS: dict[TableName, TableSchema] = {schema.table_name: schema for schema in ALL_SCHEMAS}

# Tables surfaced as tabs in the data manager, in tab order
PRIORITY_TABLES: tuple[TableName, ...] = (
    TableName.POSTS,
    TableName.SERVICES,
    TableName.SITE_MEDIA,
    TableName.TEAM_MEMBERS,
    TableName.CASE_STUDIES,
    TableName.TESTIMONIALS,
    TableName.CONTACT_SUBMISSIONS,
)

UNKNOWN_TABLE_MESSAGE = "Unknown table"


def parse_table_name(table_name: str | TableName) -> TableName | None:
    """Coerce a string to a TableName, or None when it isn't managed."""
    if isinstance(table_name, TableName):
        return table_name
    try:
        return TableName(table_name)
    except ValueError:
        return None


def get_table_schema(table_name: str | TableName) -> TableSchema | None:
    """Get schema for a table, or None for an unknown table."""
    name = parse_table_name(table_name)
    if name is None:
        return None
    return TABLE_SCHEMAS.get(name)


def get_available_tables() -> list[TableName]:
    """Get list of all managed tables."""
    return list(TABLE_SCHEMAS)


def get_priority_tables() -> list[TableName]:
    """Get the curated tables shown as primary tabs."""
    return list(PRIORITY_TABLES)


def get_table_columns(table_name: str | TableName, visible_only: bool = False) -> list[ColumnSpec]:
    """Get columns for a table in display order, optionally without hidden ones."""
    schema = get_table_schema(table_name)
    if schema is None:
        return []

    if visible_only:
        return [column for column in schema.columns if not column.hidden]
    return list(schema.columns)


def get_required_columns(table_name: str | TableName) -> list[str]:
    """Get keys of required columns for a table."""
    return [column.key for column in get_table_columns(table_name) if column.required]


def get_server_owned_columns(table_name: str | TableName) -> set[str]:
    """
    Keys the client must never send on create: the primary key and every
    read-only column (server-set timestamps).
    """
    schema = get_table_schema(table_name)
    if schema is None:
        return set()
    owned = {column.key for column in schema.columns if column.read_only}
    owned.add(schema.primary_key)
    return owned


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def validate_row_data(table_name: str | TableName, data: Row) -> ValidationResult:
    """
    Validate row data against the table schema.

    Reports every missing required field at once, using the column label:
    a field is missing when absent, None, or a whitespace-only string.
    """
    schema = get_table_schema(table_name)
    if schema is None:
        return ValidationResult(valid=False, errors=[UNKNOWN_TABLE_MESSAGE])

    errors = []
    for column in schema.columns:
        if column.required and _is_blank(data.get(column.key)):
            errors.append(f"{column.label} is required")

    return ValidationResult(valid=not errors, errors=errors)


def default_value(column: ColumnSpec) -> Any:
    """Value a freshly added row starts with for this column."""
    if column.type == ColumnType.BOOLEAN:
        return False
    if column.type == ColumnType.ARRAY:
        return []
    # Empty strings are rejected by numeric and date columns in Postgres
    if column.type in (ColumnType.NUMBER, ColumnType.DATE):
        return None
    return ""


def build_default_row(table_name: str | TableName) -> Row:
    """Build the payload for a new row, omitting server-owned columns."""
    owned = get_server_owned_columns(table_name)
    return {
        column.key: default_value(column)
        for column in get_table_columns(table_name)
        if column.key not in owned
    }
