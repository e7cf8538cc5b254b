from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables as Variables

from ...config import EmbeddingProviderType, MEMORIX_EMBEDDING_MODEL, MEMORIX_EMBEDDING_DIMENSIONS

from .base import EmbeddingProvider, EmbeddingProviderPluginBase

MEMORIX_EMBEDDING_OPENAI_API_KEY = 'MEMORIX_EMBEDDING_OPENAI_API_KEY'
MEMORIX_EMBEDDING_OPENAI_BASE_URL = 'MEMORIX_EMBEDDING_OPENAI_BASE_URL'
MEMORIX_EMBEDDING_OPENAI_TIMEOUT = 'MEMORIX_EMBEDDING_OPENAI_TIMEOUT'

DEFAULT_EMBEDDING_MODEL = 'text-embedding-3-small'
DEFAULT_EMBEDDING_DIMENSIONS = 1536
DEFAULT_OPENAI_API_KEY = 'x'
DEFAULT_OPENAI_BASE_URL = None
DEFAULT_OPENAI_TIMEOUT = 30.0

# request-size limit of the embeddings endpoint
MAX_INPUTS_PER_REQUEST = 2048


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    Embeddings from the OpenAI API or any server speaking its protocol
    (point base_url at it). Requests are blocking; the openai client owns
    timeouts and retries.
    """

    def __init__(
            self,
            v: Variables = None,
            api_key: Optional[str] = None,
            model: str = DEFAULT_EMBEDDING_MODEL,
            base_url: Optional[str] = None,
            dimensions: int = DEFAULT_EMBEDDING_DIMENSIONS,
            timeout: float = DEFAULT_OPENAI_TIMEOUT,
    ):
        super().__init__(v, output_dimensions=dimensions)
        import openai
        self.client = openai.OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model

    def embed(self, text: str) -> list[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        embeddings: list[list[float]] = []
        for start in range(0, len(texts), MAX_INPUTS_PER_REQUEST):
            chunk = texts[start:start + MAX_INPUTS_PER_REQUEST]
            self.logger.debug("Requesting %d OpenAI embedding(s) from %s", len(chunk), self.model)
            response = self.client.embeddings.create(input=chunk, model=self.model)
            # restore input order
            embeddings.extend(item.embedding for item in sorted(response.data, key=lambda item: item.index))
        return embeddings


class OpenAIEmbeddingProviderPlugin(EmbeddingProviderPluginBase):
    PROVIDER_NAME = EmbeddingProviderType.OPENAI

    def initialize(self, v: Variables, logger: Logger) -> object | None:
        return OpenAIEmbeddingProvider(
            v=v,
            api_key=v.environ(MEMORIX_EMBEDDING_OPENAI_API_KEY, default=DEFAULT_OPENAI_API_KEY),
            model=v.environ(MEMORIX_EMBEDDING_MODEL, default=DEFAULT_EMBEDDING_MODEL),
            base_url=v.environ(MEMORIX_EMBEDDING_OPENAI_BASE_URL, default=DEFAULT_OPENAI_BASE_URL),
            dimensions=v.environ(MEMORIX_EMBEDDING_DIMENSIONS, default=DEFAULT_EMBEDDING_DIMENSIONS, type_fn=int),
            timeout=v.environ(MEMORIX_EMBEDDING_OPENAI_TIMEOUT, default=DEFAULT_OPENAI_TIMEOUT, type_fn=float),
        )
