# =============================================================================
# core/schemas/ - Schema Registry
# =============================================================================
# Static column metadata for every managed table plus derived helpers
# (required columns, validation, default rows).
# =============================================================================

from .registry import (
    PRIORITY_TABLES,
    TABLE_SCHEMAS,
    UNKNOWN_TABLE_MESSAGE,
    build_default_row,
    default_value,
    get_available_tables,
    get_priority_tables,
    get_required_columns,
    get_server_owned_columns,
    get_table_columns,
    get_table_schema,
    parse_table_name,
    validate_row_data,
)

__all__ = [
    "PRIORITY_TABLES",
    "TABLE_SCHEMAS",
    "UNKNOWN_TABLE_MESSAGE",
    "build_default_row",
    "default_value",
    "get_available_tables",
    "get_priority_tables",
    "get_required_columns",
    "get_server_owned_columns",
    "get_table_columns",
    "get_table_schema",
    "parse_table_name",
    "validate_row_data",
]
