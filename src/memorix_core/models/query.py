"""
Query limit and result models.

QueryLimit bounds a ranked candidate list along three dimensions (count,
tokens, similarity); the strategy decides how the bounds combine.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .memory import Memory


class LimitStrategy(str, Enum):
    """How count/token/similarity bounds combine while selecting candidates."""

    ALL = "all"  # Every bound must hold for the next candidate; first violation stops
    ANY = "any"  # Stop as soon as any bound has been reached
    GREEDY = "greedy"  # Skip candidates that do not fit, keep scanning
    FIRST_MET = "first_met"  # Stop right after the candidate that meets a bound


class LimitReason(str, Enum):
    """Which bound truncated a result."""

    MAX_COUNT = "maxCount"
    MAX_TOKENS = "maxTokens"
    MIN_SIMILARITY = "minSimilarity"
    NONE = "none"


class QueryLimit(BaseModel):
    """Immutable bounds for one query; unset fields are unconstrained."""

    model_config = ConfigDict(frozen=True)

    max_count: Optional[int] = Field(None, gt=0)
    max_tokens: Optional[int] = Field(None, gt=0)
    min_similarity: Optional[float] = Field(None, ge=0.0, le=1.0)
    strategy: LimitStrategy = LimitStrategy.GREEDY

    @classmethod
    def unlimited(cls) -> "QueryLimit":
        return cls()

    @property
    def is_unlimited(self) -> bool:
        return self.max_count is None and self.max_tokens is None and self.min_similarity is None


class QueryMetadata(BaseModel):
    """Bookkeeping about how a query result was selected."""

    model_config = ConfigDict(frozen=True)

    total_found: int = 0
    returned: int = 0
    total_tokens: int = 0
    avg_similarity: float = 0.0
    limit_reason: LimitReason = LimitReason.NONE
    execution_time_ms: float = 0.0


class QueryResult(BaseModel):
    """Ordered selected memories with their similarities and query metadata."""

    model_config = ConfigDict(frozen=True)

    memories: list[Memory] = Field(default_factory=list)
    similarities: list[float] = Field(default_factory=list)
    metadata: QueryMetadata = Field(default_factory=QueryMetadata)

    def __len__(self) -> int:
        return len(self.memories)

    def __iter__(self):
        return iter(self.memories)
