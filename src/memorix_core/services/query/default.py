"""Default query service: embed, fetch ranked candidates, apply limits."""
from logging import Logger
from typing import Any, Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...config import MEMORIX_QUERY_CANDIDATE_LIMIT, DEFAULT_MEMORIX_QUERY_CANDIDATE_LIMIT
from ...exceptions import ValidationError
from ...models import QueryLimit, QueryResult
from ..embedding import EXT_EMBEDDING_SERVICE, EmbeddingService
from ..storage import EXT_MEMORY_STORE, MemoryStore
from ..type_registry import EXT_TYPE_REGISTRY, TypeRegistry
from .base import QueryService, QueryServicePluginBase
from .executor import QueryExecutor


class DefaultQueryService(QueryService):
    """Query service over the memory store's vector search."""

    def __init__(
            self,
            store: MemoryStore,
            embedding_service: EmbeddingService,
            type_registry: TypeRegistry,
            v: Variables = None,
            candidate_limit: int = DEFAULT_MEMORIX_QUERY_CANDIDATE_LIMIT,
    ):
        self._store = store
        self._embedding_service = embedding_service
        self._types = type_registry
        self.executor = QueryExecutor()
        self.candidate_limit = candidate_limit
        self.logger = get_logger(v, name=self.__class__.__name__)

    def resolve_limit(self, memory_type: Optional[str], limit: Optional[QueryLimit]) -> QueryLimit:
        if limit is not None:
            return limit
        if memory_type:
            return self._types.get_default_query_limit(memory_type)
        return QueryLimit.unlimited()

    def search(
            self,
            owner_id: str,
            query: Optional[str] = None,
            memory_type: Optional[str] = None,
            limit: Optional[QueryLimit] = None,
            metadata_filters: Optional[dict[str, Any]] = None,
            query_embedding: Optional[list[float]] = None,
    ) -> QueryResult:
        if not owner_id or not owner_id.strip():
            raise ValidationError("Owner id must be provided")
        if query_embedding is None:
            if not query or not query.strip():
                raise ValidationError("Query text or query embedding must be provided")
            query_embedding = self._embedding_service.embed(query)

        limit = self.resolve_limit(memory_type, limit)
        fetch = max(self.candidate_limit, limit.max_count or 0)

        candidates = self._store.search(
            owner_id,
            query_embedding,
            limit=fetch,
            memory_type=memory_type,
            metadata_filters=metadata_filters,
        )
        result = self.executor.execute(candidates, limit)

        self.logger.debug(
            "Query for owner %s type %s: %d/%d returned, %d tokens, reason=%s",
            owner_id, memory_type, result.metadata.returned, result.metadata.total_found,
            result.metadata.total_tokens, result.metadata.limit_reason.value,
        )
        return result


class DefaultQueryServicePlugin(QueryServicePluginBase):
    """Default query service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> QueryService:
        return DefaultQueryService(
            store=self.get_extension(EXT_MEMORY_STORE, v),
            embedding_service=self.get_extension(EXT_EMBEDDING_SERVICE, v),
            type_registry=self.get_extension(EXT_TYPE_REGISTRY, v),
            v=v,
            candidate_limit=v.environ(
                MEMORIX_QUERY_CANDIDATE_LIMIT, default=DEFAULT_MEMORIX_QUERY_CANDIDATE_LIMIT, type_fn=int
            ),
        )
