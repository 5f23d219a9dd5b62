# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - tables.py: Table schemas and row CRUD
# - console.py: Data console (tabs, grid editing, add/delete)
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import tables
from . import console

__all__ = [
    "health",
    "tables",
    "console",
]
