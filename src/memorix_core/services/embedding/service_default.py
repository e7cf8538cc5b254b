import hashlib
import threading
from logging import Logger
from typing import Optional

from cachetools import LRUCache
from scitrera_app_framework import get_logger, Variables as Variables

from .base import EmbeddingProvider, EmbeddingServicePluginBase, EXT_EMBEDDING_PROVIDER
from ...config import MEMORIX_EMBEDDING_CACHE_SIZE, DEFAULT_MEMORIX_EMBEDDING_CACHE_SIZE
from ...exceptions import EmbeddingError, ErrorCode
from ...utils import cosine_similarity as _cosine_similarity


class EmbeddingService:
    """
    Embedding service that wraps a provider and adds validation and caching.

    Provider failures are re-raised as EmbeddingError; nothing is retried here.
    """

    def __init__(self, v: Variables = None, provider: EmbeddingProvider = None, cache_size: int = 0):
        self.provider = provider
        self.logger = get_logger(v, name=self.__class__.__name__)
        self._cache: Optional[LRUCache] = LRUCache(maxsize=cache_size) if cache_size > 0 else None
        self._cache_lock = threading.Lock()

        self.logger.info(
            "Initialized EmbeddingService with provider: %s, dimensions: %s, cache_size: %s",
            provider.__class__.__name__,
            provider.dimensions,
            cache_size,
        )

    def embed(self, text: str) -> list[float]:
        """Generate embedding with optional caching."""
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        cache_key = hashlib.md5(text.encode()).hexdigest()
        if self._cache is not None:
            with self._cache_lock:
                cached = self._cache.get(cache_key)
            if cached is not None:
                self.logger.debug("Cache hit for embedding: %s", cache_key)
                return list(cached)

        try:
            embedding = self.provider.embed(text)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Embedding provider failed: {e}") from e

        self._check_dimensions(embedding)

        if self._cache is not None:
            with self._cache_lock:
                self._cache[cache_key] = tuple(embedding)
        return embedding

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for batch (more efficient)."""
        if not texts:
            return []

        valid_texts = [t for t in texts if t and t.strip()]
        if not valid_texts:
            raise ValueError("No valid texts to embed")

        try:
            embeddings = self.provider.embed_batch(valid_texts)
        except Exception as e:
            raise EmbeddingError(f"Embedding provider failed: {e}") from e

        for embedding in embeddings:
            self._check_dimensions(embedding)
        return embeddings

    def _check_dimensions(self, embedding: list[float]) -> None:
        expected = self.provider.dimensions
        if expected and len(embedding) != expected:
            raise EmbeddingError(
                f"Expected {expected} dimensions, got {len(embedding)}",
                ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
            )

    @property
    def dimensions(self) -> int:
        return self.provider.dimensions

    @staticmethod
    def cosine_similarity(a: list[float], b: list[float]) -> float:
        """Calculate cosine similarity between two vectors."""
        return _cosine_similarity(a, b)


class EmbeddingServicePlugin(EmbeddingServicePluginBase):
    """Default plugin for embedding service."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> object | None:
        embedding_provider: EmbeddingProvider = self.get_extension(EXT_EMBEDDING_PROVIDER, v)
        return EmbeddingService(
            v=v,
            provider=embedding_provider,
            cache_size=v.environ(
                MEMORIX_EMBEDDING_CACHE_SIZE, default=DEFAULT_MEMORIX_EMBEDDING_CACHE_SIZE, type_fn=int
            ),
        )
