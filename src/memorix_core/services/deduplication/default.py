"""Default Deduplication Service implementation."""
from typing import Optional
from logging import Logger

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...exceptions import ConfigurationError
from ...models import DeduplicationConfig, DetectorType, DuplicateMatch
from ..embedding import EXT_EMBEDDING_SERVICE, EmbeddingService
from ..storage import EXT_MEMORY_STORE, MemoryStore
from ..type_registry import EXT_TYPE_REGISTRY, TypeRegistry
from .base import DeduplicationService, DeduplicationServicePluginBase, DuplicateDetector
from .detectors import HashDuplicateDetector, HybridDuplicateDetector, SemanticDuplicateDetector


class DefaultDeduplicationService(DeduplicationService):
    """Selects a detector from the type's policy: hybrid when semantic matching is enabled, else hash."""

    def __init__(
            self,
            store: MemoryStore,
            embedding_service: EmbeddingService,
            type_registry: TypeRegistry,
            v: Variables = None,
    ):
        self._types = type_registry
        self.logger = get_logger(v, name=self.__class__.__name__)

        hash_detector = HashDuplicateDetector(store, v=v)
        semantic_detector = SemanticDuplicateDetector(store, embedding_service, v=v)
        self._detectors: dict[DetectorType, DuplicateDetector] = {
            DetectorType.HASH: hash_detector,
            DetectorType.SEMANTIC: semantic_detector,
            DetectorType.HYBRID: HybridDuplicateDetector(hash_detector, semantic_detector),
        }

    def get_detector(self, detector_type: DetectorType) -> DuplicateDetector:
        try:
            return self._detectors[DetectorType(detector_type)]
        except (KeyError, ValueError):
            raise ConfigurationError(f"Unknown duplicate detector: {detector_type}") from None

    def find_duplicate(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            config: Optional[DeduplicationConfig] = None,
    ) -> Optional[DuplicateMatch]:
        config = config or self._types.get_deduplication_config(memory_type)
        if not config.enabled:
            return None

        match = self.get_detector(config.detector_type).detect(owner_id, memory_type, content, config)
        if match is not None:
            self.logger.info(
                "Duplicate %s memory for owner %s: %s (%s)",
                memory_type, owner_id, match.existing.id, match.reason,
            )
        return match


class DefaultDeduplicationServicePlugin(DeduplicationServicePluginBase):
    """Default deduplication service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> Optional[DeduplicationService]:
        return DefaultDeduplicationService(
            store=self.get_extension(EXT_MEMORY_STORE, v),
            embedding_service=self.get_extension(EXT_EMBEDDING_SERVICE, v),
            type_registry=self.get_extension(EXT_TYPE_REGISTRY, v),
            v=v,
        )
