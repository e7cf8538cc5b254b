"""Query limit execution and retrieval package."""
from .base import (
    MemoryQuery,
    QueryService,
    QueryServicePluginBase,
    EXT_QUERY_SERVICE,
)
from .executor import QueryExecutor

from scitrera_app_framework import Variables, get_extension


def get_query_service(v: Variables = None) -> QueryService:
    """Get the query service instance."""
    return get_extension(EXT_QUERY_SERVICE, v)


__all__ = (
    'MemoryQuery',
    'QueryExecutor',
    'QueryService',
    'QueryServicePluginBase',
    'get_query_service',
    'EXT_QUERY_SERVICE',
)
