# =============================================================================
# core/services/entity_client.py - Generic Table CRUD
# =============================================================================
# Translates a managed table into CRUD calls against Supabase, applying the
# same defaults everywhere:
# - list() sorts newest first ("-created_at") and caps at ENTITY_LIST_LIMIT
# - create() never sends server-owned fields (primary key, timestamps)
# - zero affected rows (missing row or row-level-security denial) -> not found
#
# No caching and no retries: a failed call raises with the backend's message.
#
# Usage:
#   from core.services.entity_client import get_entity
#   posts = get_entity(TableName.POSTS)
#   rows = posts.list()
#   row = posts.update(rows[0]["id"], {"title": "New title"})
# =============================================================================

from __future__ import annotations

import logging
from uuid import UUID

from app.config import settings
from app.exceptions import (
    BackendRequestError,
    ConsoleException,
    RowNotFoundError,
    RowValidationError,
    UnknownTableError,
)
from core.models.schema import Row, TableName, TableSchema
from core.schemas import get_server_owned_columns, get_table_schema, parse_table_name
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

DEFAULT_SORT = "-created_at"

# Logical entity names used by the console
ENTITY_NAMES: dict[TableName, str] = {
    TableName.POSTS: "Post",
    TableName.TEAM_MEMBERS: "TeamMember",
    TableName.SERVICES: "Service",
    TableName.CASE_STUDIES: "CaseStudy",
    TableName.TESTIMONIALS: "Testimonial",
    TableName.CONTACT_SUBMISSIONS: "ContactSubmission",
    TableName.LEADS: "Lead",
    TableName.SETTINGS: "Setting",
    TableName.MEDIA: "Media",
    TableName.SITE_MEDIA: "SiteMedia",
}


def parse_sort(sort: str | None) -> tuple[str, bool]:
    """
    Parse a sort string into (field, descending).

    A leading "-" means descending: "-created_at" -> ("created_at", True).
    """
    order = (sort or DEFAULT_SORT).strip()
    if order.startswith("-"):
        return order[1:], True
    return order, False


class EntityClient:
    """
    CRUD facade over one Supabase table.

    Every method is a single network round trip.
    """

    def __init__(self, table: TableName | str):
        name = parse_table_name(table)
        if name is None:
            raise UnknownTableError(str(table))
        self.table = name
        self.schema: TableSchema = get_table_schema(name)
        self.entity_name = ENTITY_NAMES[name]

    def __repr__(self) -> str:
        return f"EntityClient({self.table.value!r})"

    @property
    def primary_key(self) -> str:
        return self.schema.primary_key

    def _query(self):
        return SupabaseClient.get_client().table(self.table.value)

    def _fail(self, operation: str, error: Exception) -> BackendRequestError:
        message = SupabaseClient.error_message(error)
        logger.error(f"{self.entity_name}.{operation} failed: {message}")
        return BackendRequestError(self.table.value, operation, message)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list(
        self,
        sort: str | None = DEFAULT_SORT,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]:
        """
        List rows, newest first by default.

        Args:
            sort: Field to order by, "-" prefix for descending
            limit: Max rows (defaults to settings.ENTITY_LIST_LIMIT)
            offset: Rows to skip, for explicit paging

        Raises:
            BackendRequestError: If the query fails
        """
        field, descending = parse_sort(sort)
        limit = limit or settings.ENTITY_LIST_LIMIT

        try:
            query = self._query().select("*").order(field, desc=descending)
            if offset:
                query = query.range(offset, offset + limit - 1)
            else:
                query = query.limit(limit)
            response = query.execute()
        except Exception as e:
            raise self._fail("list", e)

        rows = response.data or []
        logger.debug(f"Listed {len(rows)} rows from {self.table.value}")
        return rows

    def get(self, row_id: str | int | UUID) -> Row:
        """
        Fetch one row by primary key.

        Raises:
            RowNotFoundError: If no row matches
            BackendRequestError: If the query fails
        """
        row_id = SupabaseClient.normalize_id(row_id)
        try:
            response = (
                self._query()
                .select("*")
                .eq(self.primary_key, row_id)
                .single()
                .execute()
            )
        except Exception as e:
            if SupabaseClient.is_no_rows_error(e):
                raise RowNotFoundError(self.table.value, str(row_id))
            raise self._fail("get", e)

        if not response.data:
            raise RowNotFoundError(self.table.value, str(row_id))
        return response.data

    def count(self) -> int:
        """Count rows visible to the client."""
        try:
            response = (
                self._query()
                .select(self.primary_key, count="exact")
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise self._fail("count", e)
        return response.count or 0

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, data: Row) -> Row:
        """
        Insert a row and return the server's representation.

        Server-owned fields are stripped so the database assigns the primary
        key and timestamps.

        Raises:
            BackendRequestError: If the insert fails or returns nothing
        """
        owned = get_server_owned_columns(self.table)
        payload = {key: value for key, value in data.items() if key not in owned}
        dropped = sorted(set(data) - set(payload))
        if dropped:
            logger.debug(f"Dropped server-owned fields from {self.table.value} insert: {dropped}")

        try:
            response = self._query().insert(payload).execute()
        except Exception as e:
            raise self._fail("create", e)

        if not response.data:
            raise self._fail("create", Exception("Insert returned no data"))

        row = response.data[0]
        logger.info(f"Created {self.entity_name} {row.get(self.primary_key)}")
        return row

    def update(self, row_id: str | int | UUID, updates: Row) -> Row:
        """
        Change only the supplied fields of one row.

        Raises:
            RowValidationError: If updates are empty or touch unknown/read-only columns
            RowNotFoundError: If no row was updated
            BackendRequestError: If the update fails
        """
        self._check_updates(updates)
        row_id = SupabaseClient.normalize_id(row_id)

        try:
            response = (
                self._query()
                .update(updates)
                .eq(self.primary_key, row_id)
                .execute()
            )
        except Exception as e:
            raise self._fail("update", e)

        if not response.data:
            raise RowNotFoundError(self.table.value, str(row_id))

        logger.info(f"Updated {self.entity_name} {row_id}: {sorted(updates)}")
        return response.data[0]

    def delete(self, row_id: str | int | UUID) -> None:
        """
        Delete one row. Deleting a missing row is an error, not a no-op.

        Raises:
            RowNotFoundError: If no row was deleted
            BackendRequestError: If the delete fails
        """
        row_id = SupabaseClient.normalize_id(row_id)
        try:
            response = (
                self._query()
                .delete()
                .eq(self.primary_key, row_id)
                .execute()
            )
        except Exception as e:
            raise self._fail("delete", e)

        if not response.data:
            raise RowNotFoundError(self.table.value, str(row_id))

        logger.info(f"Deleted {self.entity_name} {row_id}")

    def _check_updates(self, updates: Row) -> None:
        if not updates:
            raise RowValidationError(self.table.value, ["No fields to update"])

        errors = []
        for key in updates:
            column = self.schema.column(key)
            if column is None:
                errors.append(f"Unknown column: {key}")
            elif column.read_only or key == self.primary_key:
                errors.append(f"{column.label} is read-only")
        if errors:
            raise RowValidationError(self.table.value, errors)


# =============================================================================
# Entity Registry
# =============================================================================

_ENTITIES: dict[TableName, EntityClient] = {}


def get_entity(table: TableName | str) -> EntityClient:
    """Get the cached entity client for a table."""
    name = parse_table_name(table)
    if name is None:
        raise UnknownTableError(str(table))
    if name not in _ENTITIES:
        _ENTITIES[name] = EntityClient(name)
    return _ENTITIES[name]


def get_entity_name(table: TableName | str) -> str:
    """Logical entity name for a table (e.g. team_members -> TeamMember)."""
    return get_entity(table).entity_name


def describe_error(error: Exception) -> str:
    """User-facing message for an entity failure."""
    if isinstance(error, ConsoleException):
        return error.message
    return str(error) or error.__class__.__name__
