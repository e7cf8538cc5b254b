"""Default decay engine implementation."""
from logging import Logger

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...models import DecayContext, Memory
from ...utils import utc_now
from ..storage import EXT_MEMORY_STORE, MemoryStore
from ..type_registry import EXT_TYPE_REGISTRY, TypeRegistry
from .base import DecayEngine, DecayEnginePluginBase
from .strategies import get_decay_strategy


class DefaultDecayEngine(DecayEngine):
    """Decay engine backed by the memory store and the type registry."""

    def __init__(self, store: MemoryStore, type_registry: TypeRegistry, v: Variables = None):
        self._store = store
        self._types = type_registry
        self.logger = get_logger(v, name=self.__class__.__name__)

    def _context_with_config(self, memory_type: str, context: DecayContext) -> DecayContext:
        config = self._types.get_decay_config(memory_type)
        if context.decay_config is config:
            return context
        return context.model_copy(update={'decay_config': config})

    def apply_decay(self, memory: Memory, memory_type: str, context: DecayContext) -> Memory:
        context = self._context_with_config(memory_type, context)
        strategy = get_decay_strategy(context.decay_config.strategy)

        old_decay = memory.decay
        memory.decay = strategy.calculate_decay(memory, context)
        if context.was_used_in_session:
            memory.last_accessed_at = context.now

        self._store.update(memory)
        self.logger.debug(
            "Applied %s decay to %s: %s -> %s (used=%s, active=%s)",
            strategy.strategy_type.value, memory.id, old_decay, memory.decay,
            context.was_used_in_session, context.is_active_session,
        )
        return memory

    def reinforce(self, memory: Memory, memory_type: str) -> Memory:
        config = self._types.get_decay_config(memory_type)
        old_decay = memory.decay
        memory.decay = min(memory.decay + config.decay_reinforcement, config.max_decay)
        memory.updated_at = utc_now()

        self._store.update(memory)
        self.logger.debug("Reinforced %s: %s -> %s", memory.id, old_decay, memory.decay)
        return memory

    def should_delete(self, memory: Memory, memory_type: str, context: DecayContext) -> bool:
        context = self._context_with_config(memory_type, context)
        return get_decay_strategy(context.decay_config.strategy).should_auto_delete(memory, context)

    def delete_expired(self, owner_id: str, memory_type: str) -> int:
        config = self._types.get_decay_config(memory_type)
        if not config.auto_delete:
            self.logger.debug("Auto-delete disabled for type %s; nothing to clean up", memory_type)
            return 0

        context = DecayContext(decay_config=config)
        strategy = get_decay_strategy(config.strategy)
        expired = [
            m for m in self._store.find_by_owner(owner_id)
            if m.memory_type == memory_type and strategy.should_auto_delete(m, context)
        ]

        deleted = 0
        for memory in expired:
            if self._store.delete(memory.id):
                deleted += 1

        if deleted:
            self.logger.info(
                "Deleted %d expired %s memories for owner %s (decay <= %d)",
                deleted, memory_type, owner_id, config.min_decay,
            )
        return deleted


class DefaultDecayEnginePlugin(DecayEnginePluginBase):
    """Plugin that creates the default decay engine."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DecayEngine:
        store: MemoryStore = self.get_extension(EXT_MEMORY_STORE, v)
        type_registry: TypeRegistry = self.get_extension(EXT_TYPE_REGISTRY, v)
        return DefaultDecayEngine(store=store, type_registry=type_registry, v=v)
