"""Duplicate detectors: exact hash, semantic similarity, and the two-level hybrid."""
from typing import Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...models import DeduplicationConfig, DetectorType, DuplicateMatch
from ...utils import compute_content_hash, cosine_similarities
from ..embedding import EmbeddingService
from ..storage import MemoryStore
from .base import DuplicateDetector


class HashDuplicateDetector(DuplicateDetector):
    """Exact match on content hash, honoring the type's normalization flag.

    Candidates are re-hashed with the same normalization rather than trusting
    stored hashes, which may have been computed without it.
    """

    detector_type = DetectorType.HASH

    def __init__(self, store: MemoryStore, v: Variables = None):
        self._store = store
        self.logger = get_logger(v, name=self.__class__.__name__)

    def detect(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            config: DeduplicationConfig,
    ) -> Optional[DuplicateMatch]:
        if not content or not content.strip():
            return None

        normalize = config.normalize_content
        target = compute_content_hash(content, normalize)
        for memory in self._store.find_by_owner(owner_id):
            if memory.memory_type != memory_type:
                continue
            if compute_content_hash(memory.content, normalize) == target:
                self.logger.debug("Hash duplicate for owner %s: %s", owner_id, memory.id)
                return DuplicateMatch(existing=memory, level=DetectorType.HASH, similarity=1.0)
        return None


class SemanticDuplicateDetector(DuplicateDetector):
    """Cosine similarity between the new content's embedding and existing embeddings."""

    detector_type = DetectorType.SEMANTIC

    def __init__(self, store: MemoryStore, embedding_service: EmbeddingService, v: Variables = None):
        self._store = store
        self._embedding_service = embedding_service
        self.logger = get_logger(v, name=self.__class__.__name__)

    def detect(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            config: DeduplicationConfig,
    ) -> Optional[DuplicateMatch]:
        if not content or not content.strip():
            return None

        candidates = [
            m for m in self._store.find_by_owner_with_decay_above(owner_id, 0)
            if m.memory_type == memory_type and m.embedding
        ]
        if not candidates:
            return None

        embedding = self._embedding_service.embed(content)
        scores = cosine_similarities(embedding, [m.embedding for m in candidates])
        ranked = sorted(zip(candidates, scores), key=lambda pair: pair[1], reverse=True)

        for memory, similarity in ranked:
            if similarity < config.semantic_threshold:
                break
            self.logger.debug(
                "Semantic duplicate for owner %s: %s (similarity=%.3f, threshold=%.2f)",
                owner_id, memory.id, similarity, config.semantic_threshold,
            )
            return DuplicateMatch(existing=memory, level=DetectorType.SEMANTIC, similarity=similarity)
        return None


class HybridDuplicateDetector(DuplicateDetector):
    """Hash level first (no embedding cost), semantic level only when enabled."""

    detector_type = DetectorType.HYBRID

    def __init__(self, hash_detector: HashDuplicateDetector, semantic_detector: SemanticDuplicateDetector):
        self._hash = hash_detector
        self._semantic = semantic_detector

    def detect(
            self,
            owner_id: str,
            memory_type: str,
            content: str,
            config: DeduplicationConfig,
    ) -> Optional[DuplicateMatch]:
        match = self._hash.detect(owner_id, memory_type, content, config)
        if match is not None:
            return match
        if config.semantic_enabled:
            return self._semantic.detect(owner_id, memory_type, content, config)
        return None
