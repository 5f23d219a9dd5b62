# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the console's business logic:
# - models/: Pydantic schemas and state dataclasses
# - schemas/: Schema registry (column metadata for every managed table)
# - editor/: Spreadsheet grid and cell rendering
# - services/: Entity client (Supabase CRUD) and the data manager
#
# Routers stay thin and delegate here, which keeps the logic testable
# without an HTTP client.
# =============================================================================
