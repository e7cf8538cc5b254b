"""Memory type configuration registry package."""
from .base import (
    TypeRegistry,
    TypeRegistryPluginBase,
    EXT_TYPE_REGISTRY,
)
from .builtin import CONVERSATION, DOCUMENTATION, USER_PREFERENCE, BUILTIN_TYPES

from scitrera_app_framework import Variables, get_extension


def get_type_registry(v: Variables = None) -> TypeRegistry:
    """Get the type registry instance."""
    return get_extension(EXT_TYPE_REGISTRY, v)


__all__ = (
    'TypeRegistry',
    'TypeRegistryPluginBase',
    'get_type_registry',
    'EXT_TYPE_REGISTRY',
    'CONVERSATION',
    'DOCUMENTATION',
    'USER_PREFERENCE',
    'BUILTIN_TYPES',
)
