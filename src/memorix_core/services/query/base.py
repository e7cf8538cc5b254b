"""Query Service - Base interface, fluent query builder and plugin."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORIX_QUERY_SERVICE, DEFAULT_MEMORIX_QUERY_SERVICE
from ...exceptions import ValidationError
from ...models import Memory, QueryLimit, QueryResult
from .._constants import EXT_MEMORY_STORE, EXT_EMBEDDING_SERVICE, EXT_TYPE_REGISTRY, EXT_QUERY_SERVICE


class QueryService(ABC):
    """Similarity retrieval bounded by a QueryLimit."""

    @abstractmethod
    def search(
            self,
            owner_id: str,
            query: Optional[str] = None,
            memory_type: Optional[str] = None,
            limit: Optional[QueryLimit] = None,
            metadata_filters: Optional[dict[str, Any]] = None,
            query_embedding: Optional[list[float]] = None,
    ) -> QueryResult:
        """
        Retrieve an owner's memories ranked by similarity, bounded by a limit.

        Args:
            owner_id: Owner to search within
            query: Query text (embedded with the embedding service)
            memory_type: Restrict to one memory type; its default limit applies when limit is None
            limit: Explicit limit; overrides the type default
            metadata_filters: Exact-match metadata filters
            query_embedding: Precomputed query vector, used instead of query text

        Returns:
            QueryResult with selected memories and metadata
        """
        pass

    def query(self) -> "MemoryQuery":
        return MemoryQuery(self)


class MemoryQuery:
    """
    Fluent query description.

    Example:
        service.query().for_user("user-1").search("food preferences") \\
            .limit(QueryLimit(max_count=5)).execute()
    """

    def __init__(self, service: QueryService):
        self._service = service
        self._owner_id: Optional[str] = None
        self._memory_type: Optional[str] = None
        self._text: Optional[str] = None
        self._vector: Optional[list[float]] = None
        self._limit: Optional[QueryLimit] = None
        self._filters: dict[str, Any] = {}

    def for_user(self, owner_id: str) -> "MemoryQuery":
        self._owner_id = owner_id
        return self

    def of_type(self, memory_type: str) -> "MemoryQuery":
        self._memory_type = memory_type
        return self

    def search(self, text: str) -> "MemoryQuery":
        self._text = text
        return self

    def search_by_vector(self, embedding: list[float]) -> "MemoryQuery":
        self._vector = embedding
        return self

    def limit(self, limit: QueryLimit) -> "MemoryQuery":
        self._limit = limit
        return self

    def where(self, **metadata: Any) -> "MemoryQuery":
        self._filters.update(metadata)
        return self

    def execute(self) -> list[Memory]:
        return self.execute_with_metadata().memories

    def execute_with_metadata(self) -> QueryResult:
        if not self._owner_id or not self._owner_id.strip():
            raise ValidationError("Owner must be set; call for_user() first")
        if self._text is None and self._vector is None:
            raise ValidationError("Query must be set; call search() or search_by_vector() first")
        return self._service.search(
            owner_id=self._owner_id,
            query=self._text,
            memory_type=self._memory_type,
            limit=self._limit,
            metadata_filters=self._filters or None,
            query_embedding=self._vector,
        )


# noinspection PyAbstractClass
class QueryServicePluginBase(Plugin):
    """Base plugin for query service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_QUERY_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_QUERY_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_QUERY_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_QUERY_SERVICE, DEFAULT_MEMORIX_QUERY_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_STORE, EXT_EMBEDDING_SERVICE, EXT_TYPE_REGISTRY)
