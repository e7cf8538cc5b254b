"""Decay Engine - Base interface and plugin."""
from abc import ABC, abstractmethod

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORIX_DECAY_ENGINE, DEFAULT_MEMORIX_DECAY_ENGINE
from ...models import DecayContext, Memory
from .._constants import EXT_MEMORY_STORE, EXT_TYPE_REGISTRY, EXT_DECAY_ENGINE


class DecayEngine(ABC):
    """Applies a memory type's decay strategy and removes expired memories."""

    @abstractmethod
    def apply_decay(self, memory: Memory, memory_type: str, context: DecayContext) -> Memory:
        """Compute the new decay score with the type's strategy, persist it and return the memory."""
        pass

    @abstractmethod
    def reinforce(self, memory: Memory, memory_type: str) -> Memory:
        """Add the type's reinforcement (capped at max_decay) regardless of strategy, and persist."""
        pass

    @abstractmethod
    def should_delete(self, memory: Memory, memory_type: str, context: DecayContext) -> bool:
        pass

    @abstractmethod
    def delete_expired(self, owner_id: str, memory_type: str) -> int:
        """Delete an owner's memories of this type at or below min_decay. Returns count deleted."""
        pass


# noinspection PyAbstractClass
class DecayEnginePluginBase(Plugin):
    """Base plugin for decay engine."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_DECAY_ENGINE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_DECAY_ENGINE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_DECAY_ENGINE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_DECAY_ENGINE, DEFAULT_MEMORIX_DECAY_ENGINE)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_STORE, EXT_TYPE_REGISTRY)
