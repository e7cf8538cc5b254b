"""Built-in memory types covering the common cases."""
from datetime import timedelta

from ...models import (
    DecayConfig,
    DecayStrategyType,
    DeduplicationConfig,
    DeduplicationStrategy,
    LimitStrategy,
    MemoryTypeDefinition,
    QueryLimit,
)

# Durable user facts: reinforced on use, merged on repeat
USER_PREFERENCE = MemoryTypeDefinition(
    memory_type="USER_PREFERENCE",
    description="Long-lived user preferences and facts (likes, allergies, settings)",
    decay_config=DecayConfig(
        strategy=DecayStrategyType.USAGE_BASED,
        initial_decay=100,
        min_decay=0,
        max_decay=200,
        decay_reduction=3,
        decay_reinforcement=8,
        auto_delete=True,
        affects_search_ranking=True,
    ),
    deduplication_config=DeduplicationConfig(
        enabled=True,
        strategy=DeduplicationStrategy.MERGE,
        normalize_content=True,
        semantic_enabled=True,
        semantic_threshold=0.88,
        reinforce_on_merge=True,
    ),
    default_query_limit=QueryLimit(
        max_count=20,
        max_tokens=400,
        min_similarity=0.5,
        strategy=LimitStrategy.GREEDY,
    ),
)

# Chat turns: short-lived, forgotten quickly when not referenced
CONVERSATION = MemoryTypeDefinition(
    memory_type="CONVERSATION",
    description="Conversation history; fades unless referenced again",
    decay_config=DecayConfig(
        strategy=DecayStrategyType.HYBRID,
        initial_decay=100,
        min_decay=0,
        max_decay=150,
        decay_reduction=4,
        decay_reinforcement=6,
        auto_delete=True,
        affects_search_ranking=True,
        decay_interval=timedelta(days=7),
        strategy_params={
            'inactivityThreshold': 30,
        },
    ),
    deduplication_config=DeduplicationConfig.disabled(),
    default_query_limit=QueryLimit(
        max_count=30,
        max_tokens=800,
        min_similarity=0.4,
        strategy=LimitStrategy.GREEDY,
    ),
)

# Reference material: never decays, exact repeats rejected
DOCUMENTATION = MemoryTypeDefinition(
    memory_type="DOCUMENTATION",
    description="Reference documentation; permanent, never auto-deleted",
    decay_config=DecayConfig(
        strategy=DecayStrategyType.PERMANENT,
        initial_decay=100,
        min_decay=100,
        max_decay=100,
        decay_reduction=0,
        decay_reinforcement=0,
        auto_delete=False,
        affects_search_ranking=False,
    ),
    deduplication_config=DeduplicationConfig(
        enabled=True,
        strategy=DeduplicationStrategy.REJECT,
        normalize_content=True,
        semantic_enabled=True,
        semantic_threshold=0.92,
        reinforce_on_merge=False,
    ),
    default_query_limit=QueryLimit(
        max_count=10,
        max_tokens=1000,
        min_similarity=0.6,
        strategy=LimitStrategy.GREEDY,
    ),
)

BUILTIN_TYPES = (USER_PREFERENCE, CONVERSATION, DOCUMENTATION)
