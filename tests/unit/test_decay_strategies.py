"""
Unit tests for decay strategies and decay configuration.

Strategies are pure functions of (memory, context), so these tests need no framework.
"""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from conftest import make_memory
from memorix_core.exceptions import ConfigurationError
from memorix_core.models import DecayConfig, DecayContext, DecayStrategyType
from memorix_core.services.decay import (
    HybridDecayStrategy,
    PermanentDecayStrategy,
    TimeBasedDecayStrategy,
    UsageBasedDecayStrategy,
    get_decay_strategy,
)
from memorix_core.services.type_registry import CONVERSATION, DOCUMENTATION

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class TestDecayConfig:

    def test_defaults(self):
        c = DecayConfig()
        assert c.strategy == DecayStrategyType.USAGE_BASED
        assert c.initial_decay == 100
        assert c.min_decay == 0
        assert c.max_decay == 128
        assert c.decay_reduction == 4
        assert c.decay_reinforcement == 6
        assert c.auto_delete is True
        assert c.decay_interval == timedelta(days=7)

    def test_min_above_max_rejected(self):
        with pytest.raises(PydanticValidationError):
            DecayConfig(min_decay=50, max_decay=10, initial_decay=10)

    def test_initial_outside_bounds_rejected(self):
        with pytest.raises(PydanticValidationError):
            DecayConfig(initial_decay=200, max_decay=128)

    def test_non_positive_interval_rejected(self):
        with pytest.raises(PydanticValidationError):
            DecayConfig(decay_interval=timedelta(0))

    def test_clamp(self):
        c = DecayConfig(min_decay=10, max_decay=50, initial_decay=20)
        assert c.clamp(5) == 10
        assert c.clamp(60) == 50
        assert c.clamp(30) == 30


class TestDecayContext:

    def test_time_fields_from_memory(self):
        memory = make_memory(
            created_at=NOW - timedelta(days=10),
            last_accessed_at=NOW - timedelta(days=2),
        )
        context = DecayContext.for_memory(memory, now=NOW)
        assert context.time_since_created == timedelta(days=10)
        assert context.time_since_last_use == timedelta(days=2)

    def test_last_use_falls_back_to_creation(self):
        memory = make_memory(created_at=NOW - timedelta(days=4))
        context = DecayContext.for_memory(memory, now=NOW)
        assert context.time_since_last_use == timedelta(days=4)

    def test_fallbacks_without_config(self):
        context = DecayContext()
        assert context.initial_decay == 100
        assert context.max_decay == 128
        assert context.get_strategy_param("anything", 7) == 7


class TestUsageBasedDecay:

    strategy = UsageBasedDecayStrategy()

    def test_used_memory_is_reinforced_and_capped(self):
        config = DecayConfig(max_decay=128, decay_reinforcement=10)
        memory = make_memory(decay=125)
        context = DecayContext.for_memory(memory, config, was_used_in_session=True)
        assert self.strategy.calculate_decay(memory, context) == 128

    def test_unused_in_active_session_decays(self):
        memory = make_memory(decay=100)
        context = DecayContext.for_memory(memory, DecayConfig(), is_active_session=True)
        assert self.strategy.calculate_decay(memory, context) == 96

    def test_decay_floors_at_min(self):
        memory = make_memory(decay=2)
        context = DecayContext.for_memory(memory, DecayConfig())
        assert self.strategy.calculate_decay(memory, context) == 0

    def test_inactive_session_freezes(self):
        memory = make_memory(decay=77)
        context = DecayContext.for_memory(memory, DecayConfig(), is_active_session=False)
        assert self.strategy.calculate_decay(memory, context) == 77


class TestTimeBasedDecay:

    strategy = TimeBasedDecayStrategy()

    def test_whole_intervals_since_creation(self):
        config = DecayConfig(strategy=DecayStrategyType.TIME_BASED)
        memory = make_memory(created_at=NOW - timedelta(days=15))
        context = DecayContext.for_memory(memory, config, now=NOW)
        # two full 7-day intervals at 4 per interval
        assert self.strategy.calculate_decay(memory, context) == 92

    def test_usage_is_ignored(self):
        config = DecayConfig(strategy=DecayStrategyType.TIME_BASED)
        memory = make_memory(decay=10, created_at=NOW - timedelta(days=3))
        context = DecayContext.for_memory(memory, config, now=NOW, was_used_in_session=True)
        assert self.strategy.calculate_decay(memory, context) == 100

    def test_very_old_memory_floors_at_min(self):
        config = DecayConfig(strategy=DecayStrategyType.TIME_BASED)
        memory = make_memory(created_at=NOW - timedelta(days=3650))
        context = DecayContext.for_memory(memory, config, now=NOW)
        assert self.strategy.calculate_decay(memory, context) == 0


class TestHybridDecay:

    strategy = HybridDecayStrategy()
    config = CONVERSATION.decay_config

    def test_used_memory_reinforced(self):
        memory = make_memory(decay=100, memory_type="CONVERSATION")
        context = DecayContext.for_memory(memory, self.config, now=NOW, was_used_in_session=True)
        assert self.strategy.calculate_decay(memory, context) == 106

    def test_unused_memory_loses_half_reduction(self):
        memory = make_memory(decay=100, memory_type="CONVERSATION", created_at=NOW - timedelta(days=1))
        context = DecayContext.for_memory(memory, self.config, now=NOW)
        assert self.strategy.calculate_decay(memory, context) == 98

    def test_inactivity_penalty_then_importance_bonus(self):
        memory = make_memory(
            decay=100,
            memory_type="CONVERSATION",
            importance=0.9,
            created_at=NOW - timedelta(days=60),
            last_accessed_at=NOW - timedelta(days=40),
        )
        context = DecayContext.for_memory(memory, self.config, now=NOW)
        # 100 - 2 (usage) - 2 (inactive > 30 days) + 1 (importance > 0.8)
        assert self.strategy.calculate_decay(memory, context) == 97

    def test_clamped_after_bonus(self):
        memory = make_memory(decay=149, memory_type="CONVERSATION", importance=0.95)
        context = DecayContext.for_memory(memory, self.config, now=NOW, was_used_in_session=True)
        assert self.strategy.calculate_decay(memory, context) == 150


class TestPermanentDecay:

    strategy = PermanentDecayStrategy()

    def test_never_changes(self):
        memory = make_memory(decay=100, memory_type="DOCUMENTATION", created_at=NOW - timedelta(days=900))
        context = DecayContext.for_memory(memory, DOCUMENTATION.decay_config, now=NOW)
        assert self.strategy.calculate_decay(memory, context) == 100

    def test_never_auto_deleted(self):
        config = DecayConfig(strategy=DecayStrategyType.PERMANENT, auto_delete=True)
        memory = make_memory(decay=0)
        context = DecayContext.for_memory(memory, config)
        assert self.strategy.should_auto_delete(memory, context) is False


class TestAutoDelete:

    def test_deleted_at_min_when_enabled(self):
        strategy = UsageBasedDecayStrategy()
        context = DecayContext(decay_config=DecayConfig())
        assert strategy.should_auto_delete(make_memory(decay=0), context) is True
        assert strategy.should_auto_delete(make_memory(decay=1), context) is False

    def test_kept_when_auto_delete_disabled(self):
        strategy = UsageBasedDecayStrategy()
        context = DecayContext(decay_config=DecayConfig(auto_delete=False))
        assert strategy.should_auto_delete(make_memory(decay=0), context) is False

    def test_kept_without_config(self):
        assert UsageBasedDecayStrategy().should_auto_delete(make_memory(decay=0), DecayContext()) is False


class TestStrategyLookup:

    @pytest.mark.parametrize("strategy_type, expected", [
        (DecayStrategyType.USAGE_BASED, UsageBasedDecayStrategy),
        (DecayStrategyType.TIME_BASED, TimeBasedDecayStrategy),
        (DecayStrategyType.HYBRID, HybridDecayStrategy),
        (DecayStrategyType.PERMANENT, PermanentDecayStrategy),
        ("hybrid", HybridDecayStrategy),
    ])
    def test_resolves(self, strategy_type, expected):
        assert isinstance(get_decay_strategy(strategy_type), expected)

    def test_unknown_strategy_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            get_decay_strategy("exponential")
