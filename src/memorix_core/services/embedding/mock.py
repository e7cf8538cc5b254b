import hashlib

from logging import Logger

import numpy as np

from scitrera_app_framework import Variables as Variables

from ...config import EmbeddingProviderType, MEMORIX_EMBEDDING_DIMENSIONS

from .base import EmbeddingProvider, EmbeddingProviderPluginBase

DEFAULT_EMBEDDING_DIMENSIONS = 384


class MockEmbeddingProvider(EmbeddingProvider):
    """
    Offline provider for tests and local development.

    The text's SHA-256 seeds a numpy generator, so equal text gives an equal
    unit vector with non-negative components. Vectors carry no meaning.
    """

    def __init__(self, v: Variables = None, dimensions: int = DEFAULT_EMBEDDING_DIMENSIONS):
        super().__init__(v, dimensions)
        self.logger.info("Mock embeddings enabled (%d dimensions)", dimensions)

    def embed(self, text: str) -> list[float]:
        seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
        vector = np.random.default_rng(seed).random(self._dimensions)
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm
        return vector.tolist()


class MockEmbeddingProviderPlugin(EmbeddingProviderPluginBase):
    PROVIDER_NAME = EmbeddingProviderType.MOCK

    def initialize(self, v: Variables, logger: Logger) -> MockEmbeddingProvider:
        dimensions = v.environ(MEMORIX_EMBEDDING_DIMENSIONS, default=DEFAULT_EMBEDDING_DIMENSIONS, type_fn=int)
        return MockEmbeddingProvider(v=v, dimensions=dimensions)
