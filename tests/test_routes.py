# =============================================================================
# tests/test_routes.py - API Endpoint Tests
# =============================================================================
# Exercises the HTTP surface with TestClient:
# - admin dependency overridden with a fixed AdminCapability
# - table CRUD routes against a mocked entity client
# - console routes against a DataManager backed by FakeEntity
# =============================================================================

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.auth import AdminCapability, require_admin
from app.console import ConsoleRegistry
from app.dependencies import get_console_registry
from app.exceptions import BackendRequestError, RowNotFoundError
from app.main import app
from core.models.schema import TableName
from core.services.data_manager import DataManager


@pytest.fixture
def admin():
    now = datetime.now(timezone.utc)
    return AdminCapability(
        user_id=uuid4(),
        email="admin@example.com",
        role="admin",
        issued_at=now,
        valid_until=now + timedelta(hours=24),
    )


@pytest.fixture
def registry(entities):
    return ConsoleRegistry(
        manager_factory=lambda: DataManager(entity_factory=lambda table: entities[table], timeout=5)
    )


@pytest.fixture
def client(admin, registry):
    app.dependency_overrides[require_admin] = lambda: admin
    app.dependency_overrides[get_console_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Health
# =============================================================================

class TestHealth:

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_degraded_when_database_fails(self, client):
        with patch("lib.supabase_client.SupabaseClient.get_client", side_effect=Exception("down")):
            response = client.get("/api/v1/health/ready")

        assert response.json()["status"] == "degraded"


# =============================================================================
# Tables
# =============================================================================

class TestTableRoutes:

    def test_list_tables_priority_first(self, client):
        response = client.get("/api/v1/admin/tables")

        tables = response.json()
        assert len(tables) == len(TableName)
        assert tables[0]["priority"] is True
        assert tables[-1]["priority"] is False

    def test_get_schema(self, client):
        response = client.get("/api/v1/admin/tables/posts")

        assert response.status_code == 200
        keys = [column["key"] for column in response.json()["columns"]]
        assert keys[0] == "id"
        assert "slug" in keys

    def test_unknown_table_is_404(self, client):
        response = client.get("/api/v1/admin/tables/nonexistent_table")

        assert response.status_code == 404
        assert response.json()["code"] == "UNKNOWN_TABLE"

    def test_validate(self, client):
        response = client.post("/api/v1/admin/tables/posts/validate", json={"title": "Hello"})
        assert response.json() == {"valid": False, "errors": ["Slug is required"]}

        response = client.post("/api/v1/admin/tables/nonexistent_table/validate", json={})
        assert response.json() == {"valid": False, "errors": ["Unknown table"]}

    def test_create_rejects_missing_required(self, client):
        with patch("app.routers.tables.get_entity") as get_entity:
            get_entity.return_value.table = TableName.POSTS
            response = client.post("/api/v1/admin/tables/posts/rows", json={})

        assert response.status_code == 422
        assert response.json()["details"]["errors"] == ["Title is required", "Slug is required"]
        get_entity.return_value.create.assert_not_called()

    def test_create_row(self, client):
        with patch("app.routers.tables.get_entity") as get_entity:
            entity = get_entity.return_value
            entity.table = TableName.POSTS
            entity.create.return_value = {"id": "new", "title": "Hello", "slug": "hello"}

            response = client.post(
                "/api/v1/admin/tables/posts/rows",
                json={"title": "Hello", "slug": "hello"},
            )

        assert response.status_code == 201
        assert response.json()["row"]["id"] == "new"

    def test_list_rows(self, client):
        with patch("app.routers.tables.get_entity") as get_entity:
            get_entity.return_value.list.return_value = [{"id": "a"}]

            response = client.get("/api/v1/admin/tables/posts/rows?sort=title&limit=5")

        get_entity.return_value.list.assert_called_once_with(sort="title", limit=5, offset=0)
        assert response.json()["count"] == 1

    def test_delete_missing_row_is_404(self, client):
        with patch("app.routers.tables.get_entity") as get_entity:
            get_entity.return_value.delete.side_effect = RowNotFoundError("posts", "a")

            response = client.delete("/api/v1/admin/tables/posts/rows/a")

        assert response.status_code == 404

    def test_backend_failure_is_502(self, client):
        with patch("app.routers.tables.get_entity") as get_entity:
            get_entity.return_value.update.side_effect = BackendRequestError("posts", "update", "JWT expired")

            response = client.patch("/api/v1/admin/tables/posts/rows/a", json={"title": "x"})

        assert response.status_code == 502
        assert response.json()["detail"] == "JWT expired"


# =============================================================================
# Console
# =============================================================================

class TestConsoleRoutes:

    def test_grid_before_selection_is_409(self, client):
        response = client.get("/api/v1/admin/console/grid")
        assert response.status_code == 409

    def test_select_tab_loads_rows(self, client):
        response = client.post("/api/v1/admin/console/tabs/posts")

        body = response.json()
        assert body["state"]["status"] == "loaded"
        assert body["grid"]["total_count"] == 3
        assert body["grid"]["footer"] == "Showing 3 of 3 rows"

    def test_dashboard(self, client):
        client.post("/api/v1/admin/console/load-all")

        body = client.get("/api/v1/admin/console").json()

        assert body["stats"]["posts"] == {"count": 3, "loaded": True}
        assert len(body["tables"]) == 7

    def test_edit_and_commit(self, client, entities):
        client.post("/api/v1/admin/console/tabs/posts")

        start = client.post("/api/v1/admin/console/edit/start", json={"row_id": "p1", "column_key": "title"})
        assert start.json()["accepted"] is True

        client.post("/api/v1/admin/console/edit/value", json={"value": "Renamed"})
        response = client.post("/api/v1/admin/console/edit/key", json={"key": "Enter"})

        body = response.json()
        assert body["action"] == "commit"
        assert body["result"]["success"] is True
        assert entities[TableName.POSTS].rows[0]["title"] == "Renamed"

    def test_read_only_cell_not_accepted(self, client):
        client.post("/api/v1/admin/console/tabs/posts")

        response = client.post("/api/v1/admin/console/edit/start", json={"row_id": "p1", "column_key": "id"})

        assert response.json()["accepted"] is False
        assert response.json()["grid"]["editing"] is None

    def test_invalid_edit_value_is_422(self, client):
        client.post("/api/v1/admin/console/tabs/posts")
        client.post("/api/v1/admin/console/edit/start", json={"row_id": "p1", "column_key": "content_type"})

        response = client.post("/api/v1/admin/console/edit/value", json={"value": "podcast"})

        assert response.status_code == 422

    def test_sort_toggle(self, client):
        client.post("/api/v1/admin/console/tabs/posts")

        first = client.post("/api/v1/admin/console/sort", json={"column_key": "title"}).json()
        second = client.post("/api/v1/admin/console/sort", json={"column_key": "title"}).json()

        assert [row["row_id"] for row in first["grid"]["rows"]] == ["p2", "p1", "p3"]
        assert second["grid"]["sort_direction"] == "desc"

    def test_unknown_column_is_404(self, client):
        client.post("/api/v1/admin/console/tabs/posts")

        response = client.post("/api/v1/admin/console/sort", json={"column_key": "bogus"})

        assert response.status_code == 404

    def test_search(self, client):
        client.post("/api/v1/admin/console/tabs/posts")

        body = client.post("/api/v1/admin/console/search", json={"term": "tart"}).json()

        assert body["grid"]["shown_count"] == 1
        assert body["grid"]["footer"] == "Showing 1 of 3 rows (filtered)"

    def test_add_row_missing_required_reports_error(self, client):
        client.post("/api/v1/admin/console/tabs/posts")

        body = client.post("/api/v1/admin/console/rows", json={}).json()

        assert body["result"]["success"] is False
        assert body["state"]["error"] == "Title is required; Slug is required"

    def test_delete_needs_confirmation(self, client, entities):
        client.post("/api/v1/admin/console/tabs/posts")

        prompt = client.delete("/api/v1/admin/console/rows/p2").json()
        assert prompt["confirm"] == "Delete this row?"
        assert len(entities[TableName.POSTS].rows) == 3

        body = client.delete("/api/v1/admin/console/rows/p2?confirm=true").json()
        assert body["result"]["success"] is True
        assert body["grid"]["total_count"] == 2
        assert len(entities[TableName.POSTS].rows) == 2

    def test_bulk_delete_prompt_names_count(self, client, entities):
        client.post("/api/v1/admin/console/tabs/posts")
        client.post("/api/v1/admin/console/selection/all", json={"checked": True})

        prompt = client.post("/api/v1/admin/console/rows/delete-selected").json()

        assert "3" in prompt["confirm"]
        assert entities[TableName.POSTS].calls == ["list"]
        assert prompt["grid"]["total_count"] == 3

    def test_retry_and_dismiss(self, client, entities):
        entities[TableName.POSTS].fail = BackendRequestError("posts", "list", "offline")
        client.post("/api/v1/admin/console/tabs/posts")
        entities[TableName.POSTS].fail = None

        body = client.post("/api/v1/admin/console/tabs/posts/retry").json()

        posts = next(view for view in body["tables"] if view["table"] == "posts")
        assert posts["status"] == "loaded"
        assert body["stats"]["posts"]["count"] == 3

    def test_close_console_drops_state(self, client, registry):
        client.post("/api/v1/admin/console/tabs/posts")
        assert len(registry) == 1

        response = client.delete("/api/v1/admin/console")

        assert response.json() == {"closed": True}
        assert len(registry) == 0
        assert client.delete("/api/v1/admin/console").json() == {"closed": False}
        assert client.get("/api/v1/admin/console/grid").status_code == 409
