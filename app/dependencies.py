# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth import AdminCapability, require_admin
from app.console import ConsoleRegistry, console_registry
from core.services.data_manager import DataManager


def get_console_registry() -> ConsoleRegistry:
    """
    Get the console registry.

    Returns the process-wide registry; tests override this dependency.
    """
    return console_registry


def get_data_manager(
    admin: AdminCapability = Depends(require_admin),
    registry: ConsoleRegistry = Depends(get_console_registry),
) -> DataManager:
    """Get the signed-in admin's DataManager."""
    return registry.get(admin)


# Type aliases for dependency injection
AdminDep = Annotated[AdminCapability, Depends(require_admin)]
ConsoleDep = Annotated[DataManager, Depends(get_data_manager)]
RegistryDep = Annotated[ConsoleRegistry, Depends(get_console_registry)]
