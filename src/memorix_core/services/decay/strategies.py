"""
Decay strategies.

Each strategy is a pure function of (memory, context) returning a new decay
score clamped into the context's [min_decay, max_decay]. Strategies hold no
state, so single shared instances are dispatched by DecayStrategyType.
"""
from abc import ABC, abstractmethod

from ...exceptions import ConfigurationError
from ...models import DecayContext, DecayStrategyType, Memory

# Hybrid strategy parameters (DecayConfig.strategy_params keys) and defaults
PARAM_INACTIVITY_THRESHOLD = 'inactivityThreshold'  # days without use before the time penalty applies
PARAM_TIME_DECAY = 'timeDecay'  # penalty subtracted once inactive
DEFAULT_INACTIVITY_THRESHOLD_DAYS = 90
DEFAULT_TIME_DECAY = 2
HIGH_IMPORTANCE = 0.8


class DecayStrategy(ABC):
    """Computes a memory's next decay score."""

    strategy_type: DecayStrategyType = None

    @abstractmethod
    def calculate_decay(self, memory: Memory, context: DecayContext) -> int:
        pass

    def should_auto_delete(self, memory: Memory, context: DecayContext) -> bool:
        config = context.decay_config
        return config is not None and config.auto_delete and memory.decay <= config.min_decay


class UsageBasedDecayStrategy(DecayStrategy):
    """Reinforce when used, decay when the session is active but the memory went unused,
    freeze when the session is inactive."""

    strategy_type = DecayStrategyType.USAGE_BASED

    def calculate_decay(self, memory: Memory, context: DecayContext) -> int:
        current = memory.decay
        if context.was_used_in_session:
            return context.clamp(current + context.decay_reinforcement)
        if context.is_active_session:
            return context.clamp(current - context.decay_reduction)
        # inactive session: retention is frozen
        return current


class TimeBasedDecayStrategy(DecayStrategy):
    """Decay by whole decay intervals elapsed since creation; usage is ignored."""

    strategy_type = DecayStrategyType.TIME_BASED

    def calculate_decay(self, memory: Memory, context: DecayContext) -> int:
        intervals = context.time_since_created // context.decay_interval
        return context.clamp(context.initial_decay - intervals * context.decay_reduction)


class HybridDecayStrategy(DecayStrategy):
    """Usage-driven decay plus an inactivity penalty and a high-importance bonus.

    Order: usage term, time term, importance bonus, clamp.
    """

    strategy_type = DecayStrategyType.HYBRID

    def calculate_decay(self, memory: Memory, context: DecayContext) -> int:
        decay = memory.decay

        if context.was_used_in_session:
            decay += context.decay_reinforcement
        elif context.is_active_session:
            decay -= context.decay_reduction // 2

        threshold_days = int(context.get_strategy_param(PARAM_INACTIVITY_THRESHOLD, DEFAULT_INACTIVITY_THRESHOLD_DAYS))
        if context.time_since_last_use.days > threshold_days:
            decay -= int(context.get_strategy_param(PARAM_TIME_DECAY, DEFAULT_TIME_DECAY))

        if memory.importance > HIGH_IMPORTANCE:
            decay += 1

        return context.clamp(decay)


class PermanentDecayStrategy(DecayStrategy):
    """Never changes and is never auto-deleted."""

    strategy_type = DecayStrategyType.PERMANENT

    def calculate_decay(self, memory: Memory, context: DecayContext) -> int:
        return memory.decay

    def should_auto_delete(self, memory: Memory, context: DecayContext) -> bool:
        return False


_STRATEGIES: dict[DecayStrategyType, DecayStrategy] = {
    s.strategy_type: s for s in (
        UsageBasedDecayStrategy(),
        TimeBasedDecayStrategy(),
        HybridDecayStrategy(),
        PermanentDecayStrategy(),
    )
}


def get_decay_strategy(strategy_type: DecayStrategyType) -> DecayStrategy:
    """Resolve a strategy; an unknown selector is a fatal configuration error."""
    try:
        return _STRATEGIES[DecayStrategyType(strategy_type)]
    except (KeyError, ValueError):
        raise ConfigurationError(f"Unknown decay strategy: {strategy_type}") from None
