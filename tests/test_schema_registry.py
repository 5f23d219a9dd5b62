# =============================================================================
# tests/test_schema_registry.py - Schema Registry Tests
# =============================================================================
# Tests for table metadata lookups and row validation:
# - Every managed table has a well-formed schema
# - Validation reports each missing required field by label
# - New-row defaults never carry server-owned columns
#
# Run with: pytest tests/test_schema_registry.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models.schema import ColumnSpec, ColumnType, TableName, TableSchema
from core.schemas import (
    PRIORITY_TABLES,
    TABLE_SCHEMAS,
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


# =============================================================================
# Registry Lookups
# =============================================================================

class TestRegistry:
    """Tests for schema lookups."""

    def test_every_table_has_a_schema(self):
        assert set(get_available_tables()) == set(TableName)
        for name in TableName:
            assert get_table_schema(name).table_name == name

    def test_lookup_by_string(self):
        schema = get_table_schema("posts")
        assert schema.display_name == "Blog Posts"
        assert schema is TABLE_SCHEMAS[TableName.POSTS]

    def test_unknown_table_returns_none(self):
        assert get_table_schema("nonexistent_table") is None
        assert parse_table_name("nonexistent_table") is None
        assert get_table_columns("nonexistent_table") == []
        assert get_required_columns("nonexistent_table") == []

    def test_priority_tables_order(self):
        assert get_priority_tables() == list(PRIORITY_TABLES)
        assert get_priority_tables()[0] == TableName.POSTS
        assert TableName.LEADS not in get_priority_tables()

    def test_primary_key_is_single_and_read_only(self):
        for schema in TABLE_SCHEMAS.values():
            primary = [c for c in schema.columns if c.key == schema.primary_key]
            assert len(primary) == 1
            assert primary[0].read_only

    def test_column_keys_unique(self):
        for schema in TABLE_SCHEMAS.values():
            assert len(schema.column_keys) == len(set(schema.column_keys))

    def test_select_columns_declare_options(self):
        for schema in TABLE_SCHEMAS.values():
            for column in schema.columns:
                if column.type == ColumnType.SELECT:
                    assert column.options

    def test_required_columns(self):
        assert get_required_columns("posts") == ["title", "slug"]
        assert get_required_columns(TableName.SITE_MEDIA) == ["media_key", "media_type", "media_url"]

    def test_server_owned_columns(self):
        assert get_server_owned_columns("posts") == {"id", "created_at", "updated_at"}


# =============================================================================
# Schema Model Invariants
# =============================================================================

class TestSchemaModels:
    """Tests for ColumnSpec/TableSchema validation."""

    def test_select_without_options_rejected(self):
        with pytest.raises(ValidationError):
            ColumnSpec(key="status", label="Status", type=ColumnType.SELECT)

    def test_options_on_text_column_rejected(self):
        with pytest.raises(ValidationError):
            ColumnSpec(key="status", label="Status", options=["a"])

    def test_missing_primary_key_rejected(self):
        with pytest.raises(ValidationError):
            TableSchema(
                table_name=TableName.POSTS,
                display_name="Posts",
                columns=(ColumnSpec(key="title", label="Title"),),
            )

    def test_editable_primary_key_rejected(self):
        with pytest.raises(ValidationError):
            TableSchema(
                table_name=TableName.POSTS,
                display_name="Posts",
                columns=(ColumnSpec(key="id", label="ID"),),
            )

    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValidationError):
            TableSchema(
                table_name=TableName.POSTS,
                display_name="Posts",
                columns=(
                    ColumnSpec(key="id", label="ID", read_only=True),
                    ColumnSpec(key="title", label="Title"),
                    ColumnSpec(key="title", label="Title again"),
                ),
            )


# =============================================================================
# Validation
# =============================================================================

class TestValidateRowData:
    """Tests for validate_row_data."""

    def test_missing_slug_reported_by_label(self):
        result = validate_row_data("posts", {"title": "Hello"})

        assert result.valid is False
        assert result.errors == ["Slug is required"]

    def test_empty_row_reports_every_required_field(self):
        for name in TableName:
            result = validate_row_data(name, {})
            required = get_required_columns(name)
            assert len(result.errors) == len(required)
            assert result.valid is (len(required) == 0)

    def test_blank_and_none_count_as_missing(self):
        result = validate_row_data("posts", {"title": "   ", "slug": None})
        assert result.errors == ["Title is required", "Slug is required"]

    def test_falsy_non_string_values_are_present(self):
        result = validate_row_data("leads", {"email": "a@b.co", "score": 0})
        assert result.valid

    def test_complete_row_is_valid(self):
        result = validate_row_data("posts", {"title": "Hello", "slug": "hello"})
        assert result.valid
        assert result.errors == []

    def test_unknown_table(self):
        result = validate_row_data("nonexistent_table", {})
        assert result.valid is False
        assert result.errors == ["Unknown table"]


# =============================================================================
# Defaults
# =============================================================================

class TestDefaults:
    """Tests for new-row defaults."""

    @pytest.mark.parametrize("column_type,expected", [
        (ColumnType.BOOLEAN, False),
        (ColumnType.ARRAY, []),
        (ColumnType.NUMBER, None),
        (ColumnType.DATE, None),
        (ColumnType.TEXT, ""),
        (ColumnType.TEXTAREA, ""),
        (ColumnType.IMAGE, ""),
    ])
    def test_default_value_per_type(self, column_type, expected):
        column = ColumnSpec(key="field", label="Field", type=column_type)
        assert default_value(column) == expected

    def test_default_row_omits_server_owned(self):
        for name in TableName:
            row = build_default_row(name)
            assert not set(row) & get_server_owned_columns(name)

    def test_default_row_for_posts(self):
        row = build_default_row("posts")
        assert row["title"] == ""
        assert row["tags"] == []
        assert row["is_published"] is False
        assert row["read_time_minutes"] is None
