"""Memory Service - Base interface and plugin."""
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORIX_MEMORY_SERVICE, DEFAULT_MEMORIX_MEMORY_SERVICE
from ...exceptions import DuplicateMemoryError
from ...models import Memory, MemoryStats, QueryLimit, QueryResult, SaveResult
from .._constants import (
    EXT_MEMORY_STORE,
    EXT_EMBEDDING_SERVICE,
    EXT_TYPE_REGISTRY,
    EXT_DEDUPLICATION_SERVICE,
    EXT_DECAY_ENGINE,
    EXT_LIFECYCLE_MANAGER,
    EXT_QUERY_SERVICE,
    EXT_MEMORY_SERVICE,
)
from ..lifecycle import LifecycleResult


class MemoryService(ABC):
    """Save, retrieve, update and age memories for an owner."""

    @abstractmethod
    def remember(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            importance: Optional[float] = None,
            metadata: Optional[dict[str, Any]] = None,
    ) -> SaveResult:
        """Save content, resolving duplicates with the type's deduplication policy."""
        pass

    def save(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            importance: Optional[float] = None,
            metadata: Optional[dict[str, Any]] = None,
    ) -> Memory:
        """Like remember(), but raises DuplicateMemoryError when the policy rejects the content."""
        result = self.remember(owner_id, memory_type, content, importance=importance, metadata=metadata)
        if result.rejected:
            raise DuplicateMemoryError(result.memory)
        return result.memory

    @abstractmethod
    def get(self, memory_id: str) -> Optional[Memory]:
        pass

    @abstractmethod
    def search(
            self,
            owner_id: str,
            query: str,
            memory_type: Optional[str] = None,
            limit: Optional[QueryLimit] = None,
            metadata_filters: Optional[dict[str, Any]] = None,
    ) -> QueryResult:
        pass

    @abstractmethod
    def update(
            self,
            memory_id: str,
            content: Optional[str] = None,
            importance: Optional[float] = None,
            metadata: Optional[dict[str, Any]] = None,
    ) -> Memory:
        pass

    @abstractmethod
    def delete(self, memory_id: str) -> bool:
        pass

    @abstractmethod
    def delete_by_owner(self, owner_id: str) -> int:
        pass

    @abstractmethod
    def apply_decay(
            self,
            owner_id: str,
            memory_type: str,
            used_memory_ids: Optional[Iterable[str]] = None,
    ) -> LifecycleResult:
        """Run one active-session lifecycle pass (decay then cleanup) for an owner's memories of a type."""
        pass

    @abstractmethod
    def get_stats(self, owner_id: str) -> MemoryStats:
        pass


# noinspection PyAbstractClass
class MemoryServicePluginBase(Plugin):
    """Base plugin for memory service - extensible for custom implementations."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_MEMORY_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_MEMORY_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_MEMORY_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_MEMORY_SERVICE, DEFAULT_MEMORIX_MEMORY_SERVICE)

    def get_dependencies(self, v: Variables):
        return (
            EXT_MEMORY_STORE,
            EXT_EMBEDDING_SERVICE,
            EXT_TYPE_REGISTRY,
            EXT_DEDUPLICATION_SERVICE,
            EXT_DECAY_ENGINE,
            EXT_LIFECYCLE_MANAGER,
            EXT_QUERY_SERVICE,
        )
