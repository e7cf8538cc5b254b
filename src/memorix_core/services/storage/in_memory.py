"""
In-memory memory store.

Stores copies of every memory in dictionaries guarded by a re-entrant lock,
so callers never alias stored state. Data is lost on restart.
"""
import threading
from logging import Logger
from typing import Any, Optional

from scitrera_app_framework import Variables

from .base import MemoryStore, StoragePluginBase
from ...exceptions import MemoryNotFoundError, StorageError, ErrorCode
from ...models import Memory, ScoredMemory
from ...utils import cosine_similarities


class InMemoryMemoryStore(MemoryStore):
    """
    In-memory store for tests and embedded use.

    Supports vector similarity search using cosine similarity.
    """

    def __init__(self, v: Variables = None):
        super().__init__(v)
        self._lock = threading.RLock()
        self._memories: dict[str, Memory] = {}  # memory_id -> Memory
        self._by_owner: dict[str, set[str]] = {}  # owner_id -> {memory_id}
        self.logger.info("Initialized InMemoryMemoryStore")

    def connect(self) -> None:
        """Initialize storage (no-op for in-memory)."""
        self.logger.info("In-memory store connected")

    def disconnect(self) -> None:
        """Close storage (no-op for in-memory)."""
        self.logger.info("In-memory store disconnected")

    def health_check(self) -> bool:
        return True

    # ========== Memory Operations ==========

    def save(self, memory: Memory) -> Memory:
        with self._lock:
            if memory.id in self._memories:
                raise StorageError(
                    f"Memory already exists: {memory.id}", ErrorCode.SAVE_FAILED
                ).with_context('memory_id', memory.id)
            self._memories[memory.id] = memory.model_copy(deep=True)
            self._by_owner.setdefault(memory.owner_id, set()).add(memory.id)
        self.logger.debug("Saved memory %s for owner %s", memory.id, memory.owner_id)
        return memory

    def update(self, memory: Memory) -> Memory:
        with self._lock:
            if memory.id not in self._memories:
                raise MemoryNotFoundError(memory.id)
            self._memories[memory.id] = memory.model_copy(deep=True)
        self.logger.debug("Updated memory %s (decay=%s)", memory.id, memory.decay)
        return memory

    def delete(self, memory_id: str) -> bool:
        with self._lock:
            memory = self._memories.pop(memory_id, None)
            if memory is None:
                return False
            self._by_owner.get(memory.owner_id, set()).discard(memory_id)
        self.logger.debug("Deleted memory %s", memory_id)
        return True

    def delete_by_owner(self, owner_id: str) -> int:
        with self._lock:
            ids = self._by_owner.pop(owner_id, set())
            for memory_id in ids:
                self._memories.pop(memory_id, None)
        self.logger.debug("Deleted %s memories for owner %s", len(ids), owner_id)
        return len(ids)

    def find_by_id(self, memory_id: str) -> Optional[Memory]:
        with self._lock:
            memory = self._memories.get(memory_id)
            return memory.model_copy(deep=True) if memory else None

    def find_by_owner(self, owner_id: str) -> list[Memory]:
        with self._lock:
            memories = [self._memories[mid] for mid in self._by_owner.get(owner_id, ())]
            memories = [m.model_copy(deep=True) for m in memories]
        # stable order: oldest first
        memories.sort(key=lambda m: (m.created_at, m.id))
        return memories

    def find_by_owner_with_decay_above(self, owner_id: str, threshold: int) -> list[Memory]:
        return [m for m in self.find_by_owner(owner_id) if m.decay > threshold]

    def count_by_owner(self, owner_id: str) -> int:
        with self._lock:
            return len(self._by_owner.get(owner_id, ()))

    def search(
            self,
            owner_id: str,
            query_embedding: list[float],
            limit: int = 10,
            memory_type: Optional[str] = None,
            min_decay_exclusive: int = 0,
            metadata_filters: Optional[dict[str, Any]] = None,
    ) -> list[ScoredMemory]:
        candidates = [
            m for m in self.find_by_owner_with_decay_above(owner_id, min_decay_exclusive)
            if m.embedding
            and (memory_type is None or m.memory_type == memory_type)
            and _matches_filters(m, metadata_filters)
        ]
        scores = cosine_similarities(query_embedding, [m.embedding for m in candidates])
        ranked = sorted(zip(candidates, scores), key=lambda pair: pair[1], reverse=True)
        return [ScoredMemory(memory=m, similarity=s) for m, s in ranked[:limit]]


def _matches_filters(memory: Memory, filters: Optional[dict[str, Any]]) -> bool:
    if not filters:
        return True
    return all(memory.metadata.get(key) == value for key, value in filters.items())


class InMemoryStoragePlugin(StoragePluginBase):
    """Plugin for in-memory store."""

    PROVIDER_NAME = 'memory'

    def initialize(self, v: Variables, logger: Logger) -> InMemoryMemoryStore:
        store = InMemoryMemoryStore(v=v)
        store.connect()
        return store
