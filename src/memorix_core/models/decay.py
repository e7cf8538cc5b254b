"""
Decay configuration and per-application context models.

DecayConfig is an immutable, validated value object (one per memory type).
DecayContext is built per decay application and never persisted.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .memory import Memory
from ..utils.datetime import utc_now, ensure_utc

# Fallbacks used when a context carries no DecayConfig
DEFAULT_INITIAL_DECAY = 100
DEFAULT_MIN_DECAY = 0
DEFAULT_MAX_DECAY = 128
DEFAULT_DECAY_REDUCTION = 4
DEFAULT_DECAY_REINFORCEMENT = 6
DEFAULT_DECAY_INTERVAL = timedelta(days=7)


class DecayStrategyType(str, Enum):
    """Closed set of decay strategies."""

    USAGE_BASED = "usage_based"  # Reinforce on use, decay when unused, freeze when inactive
    TIME_BASED = "time_based"  # Wall-clock intervals since creation
    HYBRID = "hybrid"  # Usage first, plus inactivity penalty and importance bonus
    PERMANENT = "permanent"  # Never changes, never deleted


class DecayConfig(BaseModel):
    """Retention policy for one memory type."""

    model_config = ConfigDict(frozen=True)

    strategy: DecayStrategyType = DecayStrategyType.USAGE_BASED
    initial_decay: int = Field(DEFAULT_INITIAL_DECAY, ge=0)
    min_decay: int = Field(DEFAULT_MIN_DECAY, ge=0)
    max_decay: int = Field(DEFAULT_MAX_DECAY, ge=0)
    decay_reduction: int = Field(DEFAULT_DECAY_REDUCTION, ge=0)
    decay_reinforcement: int = Field(DEFAULT_DECAY_REINFORCEMENT, ge=0)
    auto_delete: bool = True
    affects_search_ranking: bool = True
    decay_interval: timedelta = DEFAULT_DECAY_INTERVAL
    strategy_params: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_bounds(self) -> "DecayConfig":
        if self.min_decay > self.max_decay:
            raise ValueError(f"min_decay ({self.min_decay}) must be <= max_decay ({self.max_decay})")
        if not self.min_decay <= self.initial_decay <= self.max_decay:
            raise ValueError(
                f"initial_decay ({self.initial_decay}) must be within "
                f"[{self.min_decay}, {self.max_decay}]"
            )
        if self.decay_interval <= timedelta(0):
            raise ValueError("decay_interval must be positive")
        return self

    def get_strategy_param(self, key: str, default: Any = None) -> Any:
        return self.strategy_params.get(key, default)

    def clamp(self, decay: int) -> int:
        """Clamp a decay value into [min_decay, max_decay]."""
        return max(self.min_decay, min(decay, self.max_decay))


class DecayContext(BaseModel):
    """Inputs to a single decay calculation."""

    model_config = ConfigDict(frozen=True)

    now: datetime = Field(default_factory=utc_now)
    was_used_in_session: bool = False
    is_active_session: bool = True
    time_since_created: timedelta = timedelta(0)
    time_since_last_use: timedelta = timedelta(0)
    sessions_since_last_use: int = 0
    total_usage_count: int = 0
    decay_config: Optional[DecayConfig] = None
    custom_params: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def for_memory(
            cls,
            memory: Memory,
            config: Optional[DecayConfig] = None,
            now: Optional[datetime] = None,
            was_used_in_session: bool = False,
            is_active_session: bool = True,
    ) -> "DecayContext":
        """Build a context whose time fields are derived from the memory's timestamps."""
        base = cls(
            now=now or utc_now(),
            was_used_in_session=was_used_in_session,
            is_active_session=is_active_session,
            decay_config=config,
        )
        return base.with_memory(memory, was_used_in_session)

    def with_memory(self, memory: Memory, was_used_in_session: Optional[bool] = None) -> "DecayContext":
        """Copy of this context re-targeted at another memory (same clock, same session)."""
        now = ensure_utc(self.now)
        created = ensure_utc(memory.created_at)
        last_use = ensure_utc(memory.last_accessed_at) if memory.last_accessed_at else created
        update = {
            'time_since_created': max(now - created, timedelta(0)),
            'time_since_last_use': max(now - last_use, timedelta(0)),
        }
        if was_used_in_session is not None:
            update['was_used_in_session'] = was_used_in_session
        return self.model_copy(update=update)

    def with_usage(self, was_used_in_session: bool) -> "DecayContext":
        return self.model_copy(update={'was_used_in_session': was_used_in_session})

    # Convenience accessors (fall back to defaults when no config is attached)

    @property
    def initial_decay(self) -> int:
        return self.decay_config.initial_decay if self.decay_config else DEFAULT_INITIAL_DECAY

    @property
    def min_decay(self) -> int:
        return self.decay_config.min_decay if self.decay_config else DEFAULT_MIN_DECAY

    @property
    def max_decay(self) -> int:
        return self.decay_config.max_decay if self.decay_config else DEFAULT_MAX_DECAY

    @property
    def decay_reduction(self) -> int:
        return self.decay_config.decay_reduction if self.decay_config else DEFAULT_DECAY_REDUCTION

    @property
    def decay_reinforcement(self) -> int:
        return self.decay_config.decay_reinforcement if self.decay_config else DEFAULT_DECAY_REINFORCEMENT

    @property
    def decay_interval(self) -> timedelta:
        return self.decay_config.decay_interval if self.decay_config else DEFAULT_DECAY_INTERVAL

    def get_strategy_param(self, key: str, default: Any = None) -> Any:
        if self.decay_config is None:
            return default
        return self.decay_config.get_strategy_param(key, default)

    def clamp(self, decay: int) -> int:
        return max(self.min_decay, min(decay, self.max_decay))
