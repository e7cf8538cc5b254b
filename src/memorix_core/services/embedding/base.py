from abc import ABC, abstractmethod
from typing import Optional

from scitrera_app_framework.api import Variables, Plugin, enabled_option_pattern
from scitrera_app_framework import get_logger

from ...config import (
    MEMORIX_EMBEDDING_PROVIDER, DEFAULT_MEMORIX_EMBEDDING_PROVIDER,
    MEMORIX_EMBEDDING_SERVICE, DEFAULT_MEMORIX_EMBEDDING_SERVICE,
)
from .._constants import EXT_EMBEDDING_PROVIDER, EXT_EMBEDDING_SERVICE


class EmbeddingProvider(ABC):
    """Turns text into fixed-length float vectors.

    Subclasses must implement `embed`. `embed_batch` falls back to one call per
    text; providers with a native batch endpoint should override it.
    """

    def __init__(self, v: Variables = None, output_dimensions: Optional[int] = None):
        self._dimensions = output_dimensions
        self.logger = get_logger(v, name=self.__class__.__name__)

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        raise NotImplementedError

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]

    @property
    def dimensions(self) -> Optional[int]:
        """Vector length, or None when the provider has not declared one."""
        return self._dimensions


# noinspection PyAbstractClass
class EmbeddingProviderPluginBase(Plugin):
    """Plugin base for providers; the active one is picked by MEMORIX_EMBEDDING_PROVIDER."""
    PROVIDER_NAME: str = ''

    def name(self) -> str:
        return f"{EXT_EMBEDDING_PROVIDER}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_EMBEDDING_PROVIDER

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_EMBEDDING_PROVIDER, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_EMBEDDING_PROVIDER, DEFAULT_MEMORIX_EMBEDDING_PROVIDER)


# noinspection PyAbstractClass
class EmbeddingServicePluginBase(Plugin):
    """Plugin base for the embedding service wrapped around the active provider."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_EMBEDDING_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_EMBEDDING_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_EMBEDDING_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_EMBEDDING_SERVICE, DEFAULT_MEMORIX_EMBEDDING_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_EMBEDDING_PROVIDER,)
