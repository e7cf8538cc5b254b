"""Memory service: the facade applications call to remember, search and maintain memories."""
from .base import (
    MemoryService,
    MemoryServicePluginBase,
    EXT_MEMORY_SERVICE,
)

from scitrera_app_framework import Variables, get_extension


def get_memory_service(v: Variables = None) -> MemoryService:
    """Get the memory service instance."""
    return get_extension(EXT_MEMORY_SERVICE, v)


__all__ = (
    'MemoryService',
    'MemoryServicePluginBase',
    'get_memory_service',
    'EXT_MEMORY_SERVICE',
)
