# =============================================================================
# core/models/schema.py - Table Schema Models
# =============================================================================
# These models describe the tables the console can manage:
# - TableName: closed set of managed tables (also the wire contract)
# - ColumnType: drives both the inline editor widget and read-mode rendering
# - ColumnSpec: one field of a table
# - TableSchema: ordered columns plus presentation metadata
# - ValidationResult: outcome of validating row data against a schema
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


# Rows are opaque mappings; their shape is defined entirely by the schema
Row = dict[str, Any]


class TableName(str, Enum):
    """
    Tables managed by the console.

    Values match the Supabase table names exactly.
    """
    POSTS = "posts"
    TEAM_MEMBERS = "team_members"
    SERVICES = "services"
    CASE_STUDIES = "case_studies"
    TESTIMONIALS = "testimonials"
    CONTACT_SUBMISSIONS = "contact_submissions"
    LEADS = "leads"
    SETTINGS = "settings"
    MEDIA = "media"
    SITE_MEDIA = "site_media"


class ColumnType(str, Enum):
    """Field types understood by the table editor."""
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    SELECT = "select"
    IMAGE = "image"


class ColumnSpec(BaseModel):
    """
    Describes one field of a table.

    Example:
        {
            "key": "content_type",
            "label": "Content Type",
            "type": "select",
            "options": ["blog", "resource", "guide", "case_study"]
        }
    """

    key: str = Field(..., min_length=1, description="Column name in the backing table")
    label: str = Field(..., min_length=1, description="Display name")
    type: ColumnType = Field(default=ColumnType.TEXT, description="Editor and render type")

    # Only meaningful for select columns
    options: list[str] | None = Field(
        default=None,
        description="Allowed values for select columns"
    )

    # Enforced at create time by validation, not by the backing store
    required: bool = Field(default=False)

    # Primary keys and server-set timestamps are never edited inline
    read_only: bool = Field(default=False)

    hidden: bool = Field(default=False, description="Excluded from visible-only column lists")

    width: int = Field(default=150, ge=1)
    min_width: int = Field(default=100, ge=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_options(self) -> "ColumnSpec":
        if self.type == ColumnType.SELECT and not self.options:
            raise ValueError(f"Select column '{self.key}' must declare options")
        if self.type != ColumnType.SELECT and self.options is not None:
            raise ValueError(f"Column '{self.key}' declares options but is not a select")
        return self


class TableSchema(BaseModel):
    """
    Static description of one manageable table.

    Column order is display order only.
    """

    table_name: TableName
    display_name: str
    description: str = ""
    icon: str = "Database"
    primary_key: str = "id"
    columns: tuple[ColumnSpec, ...]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_columns(self) -> "TableSchema":
        keys = [column.key for column in self.columns]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValueError(f"Duplicate column keys in {self.table_name.value}: {duplicates}")

        primary = [column for column in self.columns if column.key == self.primary_key]
        if len(primary) != 1:
            raise ValueError(
                f"{self.table_name.value} must have exactly one '{self.primary_key}' column"
            )
        if not primary[0].read_only:
            raise ValueError(f"Primary key of {self.table_name.value} must be read-only")
        return self

    def column(self, key: str) -> ColumnSpec | None:
        """Look up a column by key."""
        for column in self.columns:
            if column.key == key:
                return column
        return None

    @property
    def column_keys(self) -> list[str]:
        return [column.key for column in self.columns]


class ValidationResult(BaseModel):
    """Result of validating row data against a table schema."""
    valid: bool
    errors: list[str] = Field(default_factory=list)
