"""Default memory service implementation."""
from logging import Logger
from typing import Any, Iterable, Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...exceptions import ImmutableMemoryError, MemoryNotFoundError, ValidationError
from ...models import (
    DEFAULT_IMPORTANCE,
    DeduplicationStrategy,
    DuplicateMatch,
    Memory,
    MemoryStats,
    MemoryTypeDefinition,
    QueryLimit,
    QueryResult,
    SaveOutcome,
    SaveResult,
    new_memory_id,
)
from ...utils import compute_content_hash, count_tokens, utc_now
from ..decay import EXT_DECAY_ENGINE, DecayEngine
from ..deduplication import EXT_DEDUPLICATION_SERVICE, DeduplicationService
from ..embedding import EXT_EMBEDDING_SERVICE, EmbeddingService
from ..lifecycle import EXT_LIFECYCLE_MANAGER, LifecycleManager, LifecycleResult
from ..query import EXT_QUERY_SERVICE, QueryService
from ..storage import EXT_MEMORY_STORE, MemoryStore
from ..type_registry import EXT_TYPE_REGISTRY, TypeRegistry
from .base import MemoryService, MemoryServicePluginBase


def _check_importance(importance: Optional[float]) -> float:
    if importance is None:
        return DEFAULT_IMPORTANCE
    if not 0.0 <= importance <= 1.0:
        raise ValidationError(f"Importance must be between 0.0 and 1.0, got {importance}")
    return float(importance)


class DefaultMemoryService(MemoryService):
    """Memory service composed from the store, embedding, deduplication, decay and query services."""

    def __init__(
            self,
            store: MemoryStore,
            embedding_service: EmbeddingService,
            type_registry: TypeRegistry,
            deduplication_service: DeduplicationService,
            decay_engine: DecayEngine,
            lifecycle_manager: LifecycleManager,
            query_service: QueryService,
            v: Variables = None,
    ):
        self.store = store
        self.embedding = embedding_service
        self.types = type_registry
        self.deduplication = deduplication_service
        self.decay = decay_engine
        self.lifecycle = lifecycle_manager
        self.query = query_service
        self.logger = get_logger(v, name=self.__class__.__name__)

    # ========== Save ==========

    def remember(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            importance: Optional[float] = None,
            metadata: Optional[dict[str, Any]] = None,
    ) -> SaveResult:
        if not owner_id or not owner_id.strip():
            raise ValidationError("Owner id must be provided")
        if not content or not content.strip():
            raise ValidationError("Memory content cannot be empty")
        importance = _check_importance(importance)
        type_def = self.types.get(memory_type)

        self.logger.debug(
            "Saving %s memory for owner %s, content length: %s", memory_type, owner_id, len(content)
        )

        match = self.deduplication.find_duplicate(owner_id, memory_type, content, type_def.deduplication_config)
        if match is not None:
            return self._resolve_duplicate(match, type_def, content, importance, metadata)

        memory = self._new_memory(owner_id, type_def, content, importance, metadata)
        self.store.save(memory)
        self.logger.info("Created memory %s (%s) for owner %s, decay=%s", memory.id, memory_type, owner_id, memory.decay)
        return SaveResult(outcome=SaveOutcome.CREATED, memory=memory, processed_at=memory.created_at)

    def _new_memory(
            self,
            owner_id: str,
            type_def: MemoryTypeDefinition,
            content: str,
            importance: float,
            metadata: Optional[dict[str, Any]],
    ) -> Memory:
        decay_config = type_def.decay_config
        now = utc_now()
        # importance scales the starting score: 0.5x at importance 0, 1.5x at importance 1
        decay = decay_config.clamp(int(decay_config.initial_decay * (0.5 + importance)))
        return Memory(
            id=new_memory_id(),
            owner_id=owner_id,
            memory_type=type_def.memory_type,
            content=content,
            content_hash=compute_content_hash(content, type_def.deduplication_config.normalize_content),
            embedding=self.embedding.embed(content),
            token_count=count_tokens(content),
            decay=decay,
            importance=importance,
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )

    def _resolve_duplicate(
            self,
            match: DuplicateMatch,
            type_def: MemoryTypeDefinition,
            content: str,
            importance: float,
            metadata: Optional[dict[str, Any]],
    ) -> SaveResult:
        config = type_def.deduplication_config
        existing = match.existing
        now = utc_now()

        if config.strategy == DeduplicationStrategy.REJECT:
            self.logger.warning("Rejected duplicate of memory %s (%s)", existing.id, match.reason)
            return SaveResult(outcome=SaveOutcome.REJECTED, memory=existing, duplicate=match, processed_at=now)

        if config.strategy == DeduplicationStrategy.MERGE:
            existing.importance = max(existing.importance, importance)
            for key, value in (metadata or {}).items():
                existing.metadata.setdefault(key, value)
            existing.metadata['merged'] = True
            existing.metadata['merged_at'] = now.isoformat()
            existing.updated_at = now
            if config.reinforce_on_merge:
                self.decay.reinforce(existing, type_def.memory_type)
            else:
                self.store.update(existing)
            self.logger.info("Merged into memory %s (%s), decay=%s", existing.id, match.reason, existing.decay)
            return SaveResult(outcome=SaveOutcome.MERGED, memory=existing, duplicate=match, processed_at=now)

        # DeduplicationStrategy.UPDATE
        if existing.is_immutable:
            raise ImmutableMemoryError(existing.id)
        existing.content = content
        existing.content_hash = compute_content_hash(content, config.normalize_content)
        existing.embedding = self.embedding.embed(content)
        existing.token_count = count_tokens(content)
        existing.decay = type_def.decay_config.initial_decay
        existing.importance = importance
        if metadata is not None:
            existing.metadata = dict(metadata)
        existing.updated_at = now
        self.store.update(existing)
        self.logger.info("Replaced content of memory %s (%s)", existing.id, match.reason)
        return SaveResult(outcome=SaveOutcome.UPDATED, memory=existing, duplicate=match, processed_at=now)

    # ========== Read ==========

    def get(self, memory_id: str) -> Optional[Memory]:
        if not memory_id or not memory_id.strip():
            raise ValidationError("Memory id must be provided")
        return self.store.find_by_id(memory_id)

    def search(
            self,
            owner_id: str,
            query: str,
            memory_type: Optional[str] = None,
            limit: Optional[QueryLimit] = None,
            metadata_filters: Optional[dict[str, Any]] = None,
    ) -> QueryResult:
        return self.query.search(
            owner_id,
            query=query,
            memory_type=memory_type,
            limit=limit,
            metadata_filters=metadata_filters,
        )

    # ========== Update / Delete ==========

    def update(
            self,
            memory_id: str,
            content: Optional[str] = None,
            importance: Optional[float] = None,
            metadata: Optional[dict[str, Any]] = None,
    ) -> Memory:
        if not memory_id or not memory_id.strip():
            raise ValidationError("Memory id must be provided")

        memory = self.store.find_by_id(memory_id)
        if memory is None:
            raise MemoryNotFoundError(memory_id)
        if memory.is_immutable:
            raise ImmutableMemoryError(memory_id)

        if content is not None and content != memory.content:
            if not content.strip():
                raise ValidationError("Memory content cannot be empty")
            memory.content = content
            memory.content_hash = compute_content_hash(content)
            memory.token_count = count_tokens(content)
            memory.embedding = self.embedding.embed(content)
        if importance is not None:
            memory.importance = _check_importance(importance)
        if metadata:
            memory.metadata.update(metadata)
        memory.updated_at = utc_now()

        self.store.update(memory)
        self.logger.info("Updated memory %s", memory_id)
        return memory

    def delete(self, memory_id: str) -> bool:
        if not memory_id or not memory_id.strip():
            raise ValidationError("Memory id must be provided")
        deleted = self.store.delete(memory_id)
        if deleted:
            self.logger.info("Deleted memory %s", memory_id)
        return deleted

    def delete_by_owner(self, owner_id: str) -> int:
        if not owner_id or not owner_id.strip():
            raise ValidationError("Owner id must be provided")
        count = self.store.delete_by_owner(owner_id)
        self.logger.info("Deleted %d memories for owner %s", count, owner_id)
        return count

    # ========== Lifecycle ==========

    def apply_decay(
            self,
            owner_id: str,
            memory_type: str,
            used_memory_ids: Optional[Iterable[str]] = None,
    ) -> LifecycleResult:
        return (
            self.lifecycle.for_owner(owner_id)
            .with_type(memory_type)
            .mark_used(used_memory_ids or ())
            .session_active(True)
            .apply_decay()
            .cleanup_expired()
            .execute()
        )

    def get_stats(self, owner_id: str) -> MemoryStats:
        memories = self.store.find_by_owner(owner_id)
        stats = MemoryStats(owner_id=owner_id, total_memories=len(memories))
        if not memories:
            return stats

        by_type: dict[str, int] = {}
        for memory in memories:
            by_type[memory.memory_type] = by_type.get(memory.memory_type, 0) + 1

        stats.average_decay = sum(m.decay for m in memories) / len(memories)
        stats.average_importance = sum(m.importance for m in memories) / len(memories)
        stats.total_tokens = sum(m.token_count for m in memories)
        stats.memories_by_type = by_type
        stats.oldest_memory = min(m.created_at for m in memories)
        stats.newest_memory = max(m.created_at for m in memories)
        return stats


class DefaultMemoryServicePlugin(MemoryServicePluginBase):
    """Default memory service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> MemoryService:
        return DefaultMemoryService(
            store=self.get_extension(EXT_MEMORY_STORE, v),
            embedding_service=self.get_extension(EXT_EMBEDDING_SERVICE, v),
            type_registry=self.get_extension(EXT_TYPE_REGISTRY, v),
            deduplication_service=self.get_extension(EXT_DEDUPLICATION_SERVICE, v),
            decay_engine=self.get_extension(EXT_DECAY_ENGINE, v),
            lifecycle_manager=self.get_extension(EXT_LIFECYCLE_MANAGER, v),
            query_service=self.get_extension(EXT_QUERY_SERVICE, v),
            v=v,
        )
