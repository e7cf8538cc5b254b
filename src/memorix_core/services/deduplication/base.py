"""
Deduplication Service - Base classes.

Prevents duplicate memories on save. Exact repeats are found by content
hash; paraphrases by embedding similarity when the memory type enables it.
Detection only reports a match; resolving it (reject, merge, update) is the
caller's job.
"""
from abc import ABC, abstractmethod
from typing import Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORIX_DEDUPLICATION_SERVICE, DEFAULT_MEMORIX_DEDUPLICATION_SERVICE
from ...models import DeduplicationConfig, DetectorType, DuplicateMatch
from .._constants import EXT_MEMORY_STORE, EXT_EMBEDDING_SERVICE, EXT_TYPE_REGISTRY, EXT_DEDUPLICATION_SERVICE


class DuplicateDetector(ABC):
    """Finds an existing memory of the same owner and type that duplicates new content."""

    detector_type: DetectorType = None

    @abstractmethod
    def detect(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            config: DeduplicationConfig,
    ) -> Optional[DuplicateMatch]:
        pass


class DeduplicationService(ABC):
    """Interface for deduplication service."""

    @abstractmethod
    def get_detector(self, detector_type: DetectorType) -> DuplicateDetector:
        pass

    @abstractmethod
    def find_duplicate(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            config: Optional[DeduplicationConfig] = None,
    ) -> Optional[DuplicateMatch]:
        """
        Check new content against the owner's existing memories of the same type.

        Args:
            owner_id: Owner of the new content
            memory_type: Registered memory type
            content: New content
            config: Policy to apply; defaults to the type's registered policy

        Returns:
            The matching memory, or None when deduplication is disabled or nothing matches
        """
        pass


# noinspection PyAbstractClass
class DeduplicationServicePluginBase(Plugin):
    """Base plugin for deduplication service - extensible for custom implementations."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_DEDUPLICATION_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_DEDUPLICATION_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_DEDUPLICATION_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_DEDUPLICATION_SERVICE, DEFAULT_MEMORIX_DEDUPLICATION_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_STORE, EXT_EMBEDDING_SERVICE, EXT_TYPE_REGISTRY)
