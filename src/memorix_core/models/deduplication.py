"""
Deduplication configuration and save outcome models.

A save never signals a duplicate through control flow alone: SaveResult
carries either the persisted memory or the structured duplicate outcome.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .memory import Memory


class DeduplicationStrategy(str, Enum):
    """How a detected duplicate is resolved."""

    REJECT = "reject"  # Refuse the save, surface the existing memory
    MERGE = "merge"  # Keep existing memory, reinforce and fold in new importance/metadata
    UPDATE = "update"  # Replace existing memory's content in place


class DetectorType(str, Enum):
    """Closed set of duplicate detectors."""

    HASH = "hash"  # Exact match on (optionally normalized) content hash
    SEMANTIC = "semantic"  # Embedding cosine similarity over a threshold
    HYBRID = "hybrid"  # Hash first, semantic second


class DeduplicationConfig(BaseModel):
    """Duplicate handling policy for one memory type."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    strategy: DeduplicationStrategy = DeduplicationStrategy.MERGE
    normalize_content: bool = True
    semantic_enabled: bool = False
    semantic_threshold: float = Field(0.85, ge=0.0, le=1.0)
    reinforce_on_merge: bool = True

    @classmethod
    def disabled(cls) -> "DeduplicationConfig":
        return cls(enabled=False)

    @property
    def detector_type(self) -> DetectorType:
        return DetectorType.HYBRID if self.semantic_enabled else DetectorType.HASH


class DuplicateMatch(BaseModel):
    """An existing memory judged to duplicate new content."""

    model_config = ConfigDict(frozen=True)

    existing: Memory
    level: DetectorType = Field(..., description="Detector level that matched (hash or semantic)")
    similarity: float = Field(1.0, description="1.0 for exact hash matches")

    @property
    def reason(self) -> str:
        if self.level == DetectorType.HASH:
            return "exact content match"
        return f"semantic similarity {self.similarity:.3f}"


class SaveOutcome(str, Enum):
    """What a save actually did."""

    CREATED = "created"
    MERGED = "merged"
    UPDATED = "updated"
    REJECTED = "rejected"


class SaveResult(BaseModel):
    """Result of saving content: the resulting memory plus how it got there."""

    model_config = ConfigDict(frozen=True)

    outcome: SaveOutcome
    memory: Memory = Field(..., description="Persisted memory, or the existing memory when rejected")
    duplicate: Optional[DuplicateMatch] = None
    processed_at: Optional[datetime] = None

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate is not None

    @property
    def rejected(self) -> bool:
        return self.outcome == SaveOutcome.REJECTED
