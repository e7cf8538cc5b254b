"""Default lifecycle manager implementation."""
import threading
from contextlib import contextmanager
from logging import Logger

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...exceptions import MemoryNotFoundError, ValidationError
from ...models import DecayContext
from ..decay import EXT_DECAY_ENGINE, DecayEngine
from ..storage import EXT_MEMORY_STORE, MemoryStore
from .base import LifecycleManager, LifecycleManagerPluginBase, LifecycleOperation, LifecycleResult


class _KeyLock:
    __slots__ = ('lock', 'holders')

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


class DefaultLifecycleManager(LifecycleManager):
    """
    Runs lifecycle operations against the store through the decay engine.

    Operations for the same (owner, memory type) are serialized so that two
    concurrent sweeps cannot lose each other's decay updates; different
    owners or types proceed in parallel. A key's lock only lives while some
    sweep holds or waits for it.
    """

    def __init__(self, store: MemoryStore, decay_engine: DecayEngine, v: Variables = None):
        self._store = store
        self._decay_engine = decay_engine
        self.logger = get_logger(v, name=self.__class__.__name__)
        self._locks: dict[tuple[str, str], _KeyLock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _locked(self, owner_id: str, memory_type: str):
        key = (owner_id, memory_type)
        with self._locks_guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[key]

    def execute(self, operation: LifecycleOperation) -> LifecycleResult:
        if not operation.owner_id or not operation.owner_id.strip():
            raise ValidationError("Owner id must be provided")
        if not operation.memory_type or not operation.memory_type.strip():
            raise ValidationError("Memory type must be specified; call with_type() first")

        result = LifecycleResult()
        with self._locked(operation.owner_id, operation.memory_type):
            if operation.apply_decay_requested:
                result.decay_applied = self._apply_decay(operation)
            if operation.cleanup_requested:
                result.memories_deleted = self._decay_engine.delete_expired(operation.owner_id, operation.memory_type)

        self.logger.info(
            "Lifecycle for owner %s type %s: %d decayed, %d deleted (used=%d, active=%s)",
            operation.owner_id, operation.memory_type, result.decay_applied, result.memories_deleted,
            len(operation.used_memory_ids), operation.active_session,
        )
        return result

    def _apply_decay(self, operation: LifecycleOperation) -> int:
        # one clock and session state for the whole sweep
        base_context = DecayContext(is_active_session=operation.active_session)

        count = 0
        for memory in self._store.find_by_owner(operation.owner_id):
            if memory.memory_type != operation.memory_type:
                continue
            context = base_context.with_memory(memory, memory.id in operation.used_memory_ids)
            try:
                self._decay_engine.apply_decay(memory, operation.memory_type, context)
            except MemoryNotFoundError:
                # deleted by another caller since the fetch
                self.logger.debug("Skipping decay for %s: no longer stored", memory.id)
                continue
            count += 1
        return count


class DefaultLifecycleManagerPlugin(LifecycleManagerPluginBase):
    """Plugin that creates the default lifecycle manager."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> LifecycleManager:
        store: MemoryStore = self.get_extension(EXT_MEMORY_STORE, v)
        decay_engine: DecayEngine = self.get_extension(EXT_DECAY_ENGINE, v)
        return DefaultLifecycleManager(store=store, decay_engine=decay_engine, v=v)
