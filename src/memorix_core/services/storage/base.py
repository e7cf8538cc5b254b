"""Memory store - base interface and plugin."""
from abc import ABC, abstractmethod
from logging import Logger
from typing import Any, Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORIX_STORAGE_BACKEND, DEFAULT_MEMORIX_STORAGE_BACKEND
from ...models import Memory, ScoredMemory
from .._constants import EXT_MEMORY_STORE


class MemoryStore(ABC):
    """
    Abstract base class for memory persistence.

    All calls are blocking. Failures surface as StorageError (or a
    subclass) and are not retried here.
    """

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)

    # Lifecycle
    @abstractmethod
    def connect(self) -> None:
        """Initialize store connection."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close store connection."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the store is healthy."""
        pass

    # Memory operations
    @abstractmethod
    def save(self, memory: Memory) -> Memory:
        """Persist a new memory. Returns the stored memory."""
        pass

    @abstractmethod
    def update(self, memory: Memory) -> Memory:
        """Persist changes to an existing memory. Raises MemoryNotFoundError if absent."""
        pass

    @abstractmethod
    def delete(self, memory_id: str) -> bool:
        """Delete a memory. Returns False if it did not exist."""
        pass

    @abstractmethod
    def delete_by_owner(self, owner_id: str) -> int:
        """Delete every memory of an owner. Returns the count deleted."""
        pass

    @abstractmethod
    def find_by_id(self, memory_id: str) -> Optional[Memory]:
        pass

    @abstractmethod
    def find_by_owner(self, owner_id: str) -> list[Memory]:
        pass

    @abstractmethod
    def find_by_owner_with_decay_above(self, owner_id: str, threshold: int) -> list[Memory]:
        """Memories of an owner whose decay is strictly greater than threshold."""
        pass

    @abstractmethod
    def count_by_owner(self, owner_id: str) -> int:
        pass

    @abstractmethod
    def search(
            self,
            owner_id: str,
            query_embedding: list[float],
            limit: int = 10,
            memory_type: Optional[str] = None,
            min_decay_exclusive: int = 0,
            metadata_filters: Optional[dict[str, Any]] = None,
    ) -> list[ScoredMemory]:
        """
        Vector similarity search over an owner's memories.

        Args:
            owner_id: Owner to search within
            query_embedding: Query vector
            limit: Maximum number of candidates to return
            memory_type: Restrict to one memory type
            min_decay_exclusive: Exclude memories with decay at or below this value
            metadata_filters: Exact-match filters on metadata keys (all must match)

        Returns:
            Candidates ranked by descending similarity
        """
        pass


# noinspection PyAbstractClass
class StoragePluginBase(Plugin):
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_MEMORY_STORE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_MEMORY_STORE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_STORAGE_BACKEND, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_STORAGE_BACKEND, DEFAULT_MEMORIX_STORAGE_BACKEND)

    def shutdown(self, v: Variables, logger: Logger, value: object | None) -> None:
        if isinstance(value, MemoryStore):
            value.disconnect()
            logger.info("Memory store '%s' disconnected.", self.PROVIDER_NAME)
        return
