"""Lifecycle Manager - Base interface and plugin."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORIX_LIFECYCLE_MANAGER, DEFAULT_MEMORIX_LIFECYCLE_MANAGER
from .._constants import EXT_MEMORY_STORE, EXT_DECAY_ENGINE, EXT_LIFECYCLE_MANAGER


@dataclass
class LifecycleResult:
    """Result of one lifecycle invocation."""
    decay_applied: int = 0
    memories_deleted: int = 0


class LifecycleOperation:
    """
    Fluent description of one lifecycle invocation for one owner and one memory type.

    Example:
        manager.for_owner("user-1").with_type("CONVERSATION") \\
            .mark_used(["mem_a", "mem_b"]).apply_decay().cleanup_expired().execute()
    """

    def __init__(self, manager: "LifecycleManager", owner_id: str):
        self._manager = manager
        self.owner_id = owner_id
        self.memory_type: Optional[str] = None
        self.used_memory_ids: set[str] = set()
        self.active_session: bool = True
        self.apply_decay_requested = False
        self.cleanup_requested = False

    def with_type(self, memory_type: str) -> "LifecycleOperation":
        self.memory_type = memory_type
        return self

    def mark_used(self, memory_ids: Iterable[str]) -> "LifecycleOperation":
        self.used_memory_ids.update(memory_ids or ())
        return self

    def session_active(self, active: bool = True) -> "LifecycleOperation":
        self.active_session = active
        return self

    def apply_decay(self) -> "LifecycleOperation":
        self.apply_decay_requested = True
        return self

    def cleanup_expired(self) -> "LifecycleOperation":
        self.cleanup_requested = True
        return self

    def execute(self) -> LifecycleResult:
        return self._manager.execute(self)


class LifecycleManager(ABC):
    """Session-scoped orchestration of mark-used, apply-decay and cleanup."""

    def for_owner(self, owner_id: str) -> LifecycleOperation:
        return LifecycleOperation(self, owner_id)

    @abstractmethod
    def execute(self, operation: LifecycleOperation) -> LifecycleResult:
        """Run an operation. Raises ValidationError when owner or memory type is missing."""
        pass


# noinspection PyAbstractClass
class LifecycleManagerPluginBase(Plugin):
    """Base plugin for lifecycle manager."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_LIFECYCLE_MANAGER}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_LIFECYCLE_MANAGER

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORIX_LIFECYCLE_MANAGER, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORIX_LIFECYCLE_MANAGER, DEFAULT_MEMORIX_LIFECYCLE_MANAGER)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_STORE, EXT_DECAY_ENGINE)
