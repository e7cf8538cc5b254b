"""Lifecycle manager package."""
from scitrera_app_framework import Variables, get_extension

from .base import (
    LifecycleManager,
    LifecycleManagerPluginBase,
    LifecycleOperation,
    LifecycleResult,
    EXT_LIFECYCLE_MANAGER,
)


def get_lifecycle_manager(v: Variables = None) -> LifecycleManager:
    """Get the lifecycle manager instance."""
    return get_extension(EXT_LIFECYCLE_MANAGER, v)


__all__ = (
    'LifecycleManager',
    'LifecycleManagerPluginBase',
    'LifecycleOperation',
    'LifecycleResult',
    'get_lifecycle_manager',
    'EXT_LIFECYCLE_MANAGER',
)
