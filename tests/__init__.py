# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Content Console API:
# - test_schema_registry.py: Table metadata and row validation
# - test_entity_client.py: Supabase CRUD with a mocked query chain
# - test_cells.py / test_grid.py: Spreadsheet grid behaviour
# - test_data_manager.py: Tab lifecycle and mutation handling
# - test_auth.py / test_routes.py: Admin gate and HTTP endpoints
#
# Run tests with: pytest
# =============================================================================
