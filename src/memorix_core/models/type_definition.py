"""Memory type definitions: per-type decay, deduplication and query defaults."""
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .decay import DecayConfig
from .deduplication import DeduplicationConfig
from .query import QueryLimit


class MemoryTypeDefinition(BaseModel):
    """Everything the core needs to know about one category of memory."""

    model_config = ConfigDict(frozen=True)

    memory_type: str = Field(..., description="Unique type identifier, e.g. 'USER_PREFERENCE'")
    description: str = ""
    decay_config: DecayConfig = Field(default_factory=DecayConfig)
    deduplication_config: DeduplicationConfig = Field(default_factory=DeduplicationConfig.disabled)
    default_query_limit: QueryLimit = Field(default_factory=lambda: QueryLimit(max_count=20, max_tokens=500))

    @field_validator("memory_type")
    @classmethod
    def type_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("memory_type cannot be blank")
        return v
