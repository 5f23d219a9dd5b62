# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .entity_client import EntityClient, get_entity, get_entity_name
from .data_manager import DataManager

__all__ = [
    "EntityClient",
    "get_entity",
    "get_entity_name",
    "DataManager",
]
