"""Memory store package."""
from .base import MemoryStore, StoragePluginBase, EXT_MEMORY_STORE

from scitrera_app_framework import Variables, get_extension


def get_memory_store(v: Variables = None) -> MemoryStore:
    """Get the memory store instance."""
    return get_extension(EXT_MEMORY_STORE, v)


__all__ = (
    'MemoryStore', 'StoragePluginBase', 'get_memory_store', 'EXT_MEMORY_STORE',
)
