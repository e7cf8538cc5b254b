"""
Core domain models for Memorix.

Exports all Pydantic models for memories, decay, deduplication and queries.
"""
from .memory import (
    DEFAULT_IMPORTANCE,
    Memory,
    new_memory_id,
    MemoryStats,
    ScoredMemory,
)
from .decay import (
    DecayConfig,
    DecayContext,
    DecayStrategyType,
)
from .deduplication import (
    DeduplicationConfig,
    DeduplicationStrategy,
    DetectorType,
    DuplicateMatch,
    SaveOutcome,
    SaveResult,
)
from .query import (
    LimitReason,
    LimitStrategy,
    QueryLimit,
    QueryMetadata,
    QueryResult,
)
from .type_definition import MemoryTypeDefinition

__all__ = [
    "DEFAULT_IMPORTANCE",
    "Memory",
    "new_memory_id",
    "MemoryStats",
    "ScoredMemory",
    "DecayConfig",
    "DecayContext",
    "DecayStrategyType",
    "DeduplicationConfig",
    "DeduplicationStrategy",
    "DetectorType",
    "DuplicateMatch",
    "SaveOutcome",
    "SaveResult",
    "LimitReason",
    "LimitStrategy",
    "QueryLimit",
    "QueryMetadata",
    "QueryResult",
    "MemoryTypeDefinition",
]
