# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides sample rows, recording grid callbacks and token helpers
# =============================================================================

import os
import time
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from jose import jwt

from app.exceptions import RowNotFoundError
from core.models.editor import MutationResult
from core.models.schema import TableName


JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]


# =============================================================================
# Helpers
# =============================================================================

def make_token(
    user_id: str | None = None,
    role: str | None = "admin",
    issued_at: float | None = None,
    expires_in: int = 3600,
    email: str = "admin@example.com",
) -> str:
    """Sign an HS256 access token shaped like Supabase's."""
    iat = int(issued_at if issued_at is not None else time.time())
    payload = {
        "sub": user_id or str(uuid4()),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": iat,
        "exp": iat + expires_in,
        "app_metadata": {"role": role} if role else {},
    }
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


class FakeEntity:
    """In-memory stand-in for EntityClient (blocking methods, like the real one)."""

    def __init__(self, table, rows=None):
        self.table = table
        self.rows = [dict(row) for row in rows or []]
        self.fail: Exception | None = None
        self.calls = []
        self.next_id = 100

    def _check(self, name):
        self.calls.append(name)
        if self.fail is not None:
            raise self.fail

    def list(self):
        self._check("list")
        return [dict(row) for row in self.rows]

    def create(self, data):
        self._check("create")
        self.next_id += 1
        row = {"id": f"r{self.next_id}", **data}
        self.rows.append(row)
        return row

    def update(self, row_id, updates):
        self._check("update")
        for row in self.rows:
            if row["id"] == row_id:
                row.update(updates)
                return dict(row)
        raise RowNotFoundError(self.table.value, row_id)

    def delete(self, row_id):
        self._check("delete")
        before = len(self.rows)
        self.rows = [row for row in self.rows if row["id"] != row_id]
        if len(self.rows) == before:
            raise RowNotFoundError(self.table.value, row_id)


class RecordingCallbacks:
    """
    Async grid callbacks that record every call.

    Set `fail_with` to make the next calls report a failure, or `raise_with`
    to make them raise.
    """

    def __init__(self):
        self.updates = []
        self.creates = []
        self.deletes = []
        self.fail_with: str | None = None
        self.raise_with: Exception | None = None
        self.created_id = "new-row"

    def _outcome(self, row=None) -> MutationResult:
        if self.raise_with is not None:
            raise self.raise_with
        if self.fail_with is not None:
            return MutationResult.failed(self.fail_with)
        return MutationResult.ok(row)

    async def on_update(self, row_id, updates):
        self.updates.append((row_id, updates))
        return self._outcome({"id": row_id, **updates})

    async def on_create(self, data):
        self.creates.append(data)
        return self._outcome({"id": self.created_id, **data})

    async def on_delete(self, row_id):
        self.deletes.append(row_id)
        return self._outcome()


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sample_posts():
    """Three post rows, one without a published date."""
    return [
        {
            "id": "p1",
            "title": "Banana bread",
            "slug": "banana-bread",
            "excerpt": "Baking tips",
            "content": "x" * 150,
            "content_type": "blog",
            "tags": ["food", "baking"],
            "is_published": True,
            "published_at": "2024-03-01T10:00:00Z",
            "created_at": "2024-02-01T10:00:00Z",
            "updated_at": "2024-02-02T10:00:00Z",
        },
        {
            "id": "p2",
            "title": "Apple pie",
            "slug": "apple-pie",
            "excerpt": None,
            "content": "Short",
            "content_type": "guide",
            "tags": [],
            "is_published": False,
            "published_at": None,
            "created_at": "2024-02-03T10:00:00Z",
            "updated_at": "2024-02-03T10:00:00Z",
        },
        {
            "id": "p3",
            "title": "Cherry tart",
            "slug": "cherry-tart",
            "excerpt": "Summer dessert",
            "content": "",
            "content_type": "resource",
            "tags": ["summer"],
            "is_published": True,
            "published_at": "2024-01-15T10:00:00Z",
            "created_at": "2024-02-05T10:00:00Z",
            "updated_at": "2024-02-05T10:00:00Z",
        },
    ]


@pytest.fixture
def callbacks():
    return RecordingCallbacks()


@pytest.fixture
def admin_token():
    return make_token()


@pytest.fixture
def entities(sample_posts):
    """One FakeEntity per table; posts pre-filled with sample_posts."""
    fakes = {table: FakeEntity(table) for table in TableName}
    fakes[TableName.POSTS].rows = [dict(row) for row in sample_posts]
    return fakes
