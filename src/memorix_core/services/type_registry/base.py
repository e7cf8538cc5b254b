"""Type Registry - Base interface and plugin."""
from abc import ABC, abstractmethod
from typing import Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORIX_TYPE_REGISTRY, DEFAULT_MEMORIX_TYPE_REGISTRY
from ...models import DecayConfig, DeduplicationConfig, MemoryTypeDefinition, QueryLimit
from .._constants import EXT_TYPE_REGISTRY


class TypeRegistry(ABC):
    """
    Lookup table from memory type identifier to its configuration.

    Read-mostly: lookups happen on every save, search and sweep, while
    registration happens at startup.
    """

    @abstractmethod
    def register(self, definition: MemoryTypeDefinition) -> None:
        """Register a type. Raises ConfigurationError on blank or duplicate type."""
        pass

    @abstractmethod
    def unregister(self, memory_type: str) -> bool:
        pass

    @abstractmethod
    def find(self, memory_type: str) -> Optional[MemoryTypeDefinition]:
        pass

    @abstractmethod
    def get(self, memory_type: str) -> MemoryTypeDefinition:
        """Raises MemoryTypeNotFoundError when the type is not registered."""
        pass

    @abstractmethod
    def registered_types(self) -> list[str]:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def is_registered(self, memory_type: str) -> bool:
        return self.find(memory_type) is not None

    def count(self) -> int:
        return len(self.registered_types())

    def get_decay_config(self, memory_type: str) -> DecayConfig:
        return self.get(memory_type).decay_config

    def get_deduplication_config(self, memory_type: str) -> DeduplicationConfig:
        return self.get(memory_type).deduplication_config

    def get_default_query_limit(self, memory_type: str) -> QueryLimit:
        return self.get(memory_type).default_query_limit


# noinspection PyAbstractClass
class TypeRegistryPluginBase(Plugin):
    """Base plugin for the type registry."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_TYPE_REGISTRY}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_TYPE_REGISTRY

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_TYPE_REGISTRY, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_TYPE_REGISTRY, DEFAULT_MEMORIX_TYPE_REGISTRY)
