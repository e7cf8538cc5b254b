"""Tests for the memory type registry and the built-in types."""
import threading

import pytest
from pydantic import ValidationError as PydanticValidationError

from memorix_core.exceptions import ConfigurationError, MemoryTypeNotFoundError
from memorix_core.models import (
    DecayConfig,
    DecayStrategyType,
    DeduplicationStrategy,
    MemoryTypeDefinition,
    QueryLimit,
)
from memorix_core.services.decay.strategies import PARAM_INACTIVITY_THRESHOLD, PARAM_TIME_DECAY
from memorix_core.services.type_registry import BUILTIN_TYPES, CONVERSATION, DOCUMENTATION, USER_PREFERENCE
from memorix_core.services.type_registry.default import DefaultTypeRegistry


@pytest.fixture
def registry() -> DefaultTypeRegistry:
    return DefaultTypeRegistry()


def definition(memory_type: str = "PROJECT_NOTE") -> MemoryTypeDefinition:
    return MemoryTypeDefinition(
        memory_type=memory_type,
        description="Notes about the current project",
        decay_config=DecayConfig(strategy=DecayStrategyType.TIME_BASED),
        default_query_limit=QueryLimit(max_count=5),
    )


class TestRegistration:

    def test_register_and_get(self, registry):
        registry.register(definition())
        assert registry.is_registered("PROJECT_NOTE")
        assert registry.get("PROJECT_NOTE").decay_config.strategy == DecayStrategyType.TIME_BASED
        assert registry.get_default_query_limit("PROJECT_NOTE").max_count == 5
        assert registry.count() == 1

    def test_duplicate_registration_fails(self, registry):
        registry.register(definition())
        with pytest.raises(ConfigurationError):
            registry.register(definition())

    def test_unknown_type_lists_registered_types(self, registry):
        registry.register(definition("ALPHA"))
        registry.register(definition("BETA"))
        with pytest.raises(MemoryTypeNotFoundError) as exc_info:
            registry.get("GAMMA")
        assert exc_info.value.available == ["ALPHA", "BETA"]
        assert "ALPHA" in str(exc_info.value)
        assert "BETA" in str(exc_info.value)

    def test_unknown_type_is_configuration_error(self, registry):
        with pytest.raises(ConfigurationError):
            registry.get_decay_config("MISSING")

    def test_find_returns_none_for_unknown(self, registry):
        assert registry.find("MISSING") is None
        assert registry.is_registered("MISSING") is False

    def test_blank_type_rejected_by_model(self):
        with pytest.raises(PydanticValidationError):
            MemoryTypeDefinition(memory_type="   ")

    def test_unregister_and_clear(self, registry):
        registry.register(definition("ALPHA"))
        registry.register(definition("BETA"))
        assert registry.unregister("ALPHA") is True
        assert registry.unregister("ALPHA") is False
        assert registry.registered_types() == ["BETA"]
        registry.clear()
        assert registry.count() == 0

    def test_concurrent_registration(self, registry):
        names = [f"TYPE_{i}" for i in range(50)]
        threads = [threading.Thread(target=registry.register, args=(definition(n),)) for n in names]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert registry.registered_types() == sorted(names)

    def test_defaults_when_unspecified(self):
        d = MemoryTypeDefinition(memory_type="BARE")
        assert d.deduplication_config.enabled is False
        assert d.default_query_limit.max_count == 20
        assert d.default_query_limit.max_tokens == 500


class TestBuiltinTypes:

    def test_builtins_register_cleanly(self, registry):
        for d in BUILTIN_TYPES:
            registry.register(d)
        assert registry.registered_types() == ["CONVERSATION", "DOCUMENTATION", "USER_PREFERENCE"]

    def test_user_preference(self):
        decay = USER_PREFERENCE.decay_config
        assert decay.strategy == DecayStrategyType.USAGE_BASED
        assert (decay.initial_decay, decay.max_decay) == (100, 200)
        assert (decay.decay_reduction, decay.decay_reinforcement) == (3, 8)
        dedup = USER_PREFERENCE.deduplication_config
        assert dedup.enabled and dedup.strategy == DeduplicationStrategy.MERGE
        assert dedup.semantic_threshold == 0.88

    def test_conversation(self):
        decay = CONVERSATION.decay_config
        assert decay.strategy == DecayStrategyType.HYBRID
        assert decay.get_strategy_param("inactivityThreshold") == 30
        assert set(decay.strategy_params) <= {PARAM_INACTIVITY_THRESHOLD, PARAM_TIME_DECAY}
        assert CONVERSATION.deduplication_config.enabled is False

    def test_documentation(self):
        decay = DOCUMENTATION.decay_config
        assert decay.strategy == DecayStrategyType.PERMANENT
        assert decay.min_decay == decay.max_decay == 100
        assert decay.auto_delete is False
        assert DOCUMENTATION.deduplication_config.strategy == DeduplicationStrategy.REJECT


def test_framework_registry_has_builtins(type_registry):
    for d in BUILTIN_TYPES:
        assert type_registry.is_registered(d.memory_type)
