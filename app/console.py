# =============================================================================
# app/console.py - Per-Admin Console Sessions
# =============================================================================
# Keeps one DataManager (and therefore one grid) per signed-in admin so
# that edit state, sort and selection survive between requests.
#
# State lives in process memory only; restarting the API drops it and the
# next request starts from unloaded tables.
# =============================================================================

import logging
from uuid import UUID

from app.auth.models import AdminCapability
from core.services.data_manager import DataManager

logger = logging.getLogger(__name__)


class ConsoleRegistry:
    """In-memory map of admin user id -> DataManager."""

    def __init__(self, manager_factory=DataManager):
        self._manager_factory = manager_factory
        self._managers: dict[UUID, DataManager] = {}

    def get(self, admin: AdminCapability) -> DataManager:
        """Get the admin's console, creating it on first use."""
        manager = self._managers.get(admin.user_id)
        if manager is None:
            manager = self._manager_factory()
            self._managers[admin.user_id] = manager
            logger.info(f"Opened data console for admin {admin.user_id}")
        return manager

    def close(self, admin: AdminCapability) -> bool:
        """Drop an admin's console. Returns whether one existed."""
        closed = self._managers.pop(admin.user_id, None) is not None
        if closed:
            logger.info(f"Closed data console for admin {admin.user_id}")
        return closed

    def clear(self) -> None:
        self._managers.clear()

    def __len__(self) -> int:
        return len(self._managers)


# Global registry used by the API
console_registry = ConsoleRegistry()
