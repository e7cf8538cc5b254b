"""Default type registry: copy-on-write snapshot with serialized writers."""
import threading
from logging import Logger
from types import MappingProxyType
from typing import Optional

from scitrera_app_framework import Variables, get_logger, ext_parse_bool

from .base import TypeRegistry, TypeRegistryPluginBase
from .builtin import BUILTIN_TYPES
from ...config import MEMORIX_TYPE_REGISTRY_BUILTINS, DEFAULT_MEMORIX_TYPE_REGISTRY_BUILTINS
from ...exceptions import ConfigurationError, MemoryTypeNotFoundError
from ...models import MemoryTypeDefinition


class DefaultTypeRegistry(TypeRegistry):
    """
    Readers see an immutable mapping snapshot and never take the lock;
    writers build a new mapping under the lock and swap the reference.
    """

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)
        self._write_lock = threading.Lock()
        self._types = MappingProxyType({})

    def register(self, definition: MemoryTypeDefinition) -> None:
        if definition is None:
            raise ConfigurationError("Type definition cannot be None")
        memory_type = definition.memory_type
        if not memory_type or not memory_type.strip():
            raise ConfigurationError("Memory type identifier cannot be blank")

        with self._write_lock:
            if memory_type in self._types:
                raise ConfigurationError(
                    f"Memory type already registered: {memory_type}"
                ).with_context('memory_type', memory_type)
            updated = dict(self._types)
            updated[memory_type] = definition
            self._types = MappingProxyType(updated)

        self.logger.info(
            "Registered memory type %s (decay=%s, dedup=%s)",
            memory_type,
            definition.decay_config.strategy.value,
            definition.deduplication_config.strategy.value if definition.deduplication_config.enabled else 'off',
        )

    def unregister(self, memory_type: str) -> bool:
        with self._write_lock:
            if memory_type not in self._types:
                return False
            updated = dict(self._types)
            del updated[memory_type]
            self._types = MappingProxyType(updated)
        self.logger.info("Unregistered memory type %s", memory_type)
        return True

    def find(self, memory_type: str) -> Optional[MemoryTypeDefinition]:
        return self._types.get(memory_type)

    def get(self, memory_type: str) -> MemoryTypeDefinition:
        types = self._types
        definition = types.get(memory_type)
        if definition is None:
            raise MemoryTypeNotFoundError(memory_type, list(types.keys()))
        return definition

    def registered_types(self) -> list[str]:
        return sorted(self._types.keys())

    def clear(self) -> None:
        with self._write_lock:
            self._types = MappingProxyType({})
        self.logger.info("Cleared all memory types")


class DefaultTypeRegistryPlugin(TypeRegistryPluginBase):
    """Default type registry plugin; optionally preloads the built-in types."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> TypeRegistry:
        registry = DefaultTypeRegistry(v=v)
        if v.environ(MEMORIX_TYPE_REGISTRY_BUILTINS, default=DEFAULT_MEMORIX_TYPE_REGISTRY_BUILTINS,
                     type_fn=ext_parse_bool):
            for definition in BUILTIN_TYPES:
                registry.register(definition)
        return registry
