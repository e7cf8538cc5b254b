"""
Memory domain models for Memorix.

Defines the stored memory record, similarity-scored candidates and
per-owner statistics.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_IMPORTANCE = 0.5
MEMORY_ID_PREFIX = "mem"


def new_memory_id() -> str:
    """Opaque memory id, e.g. mem_a1b2c3d4e5f6a7b8."""
    return f"{MEMORY_ID_PREFIX}_{uuid.uuid4().hex[:16]}"


class Memory(BaseModel):
    """Core memory entity with content, retention score, and lifecycle tracking."""

    model_config = ConfigDict(from_attributes=True)

    # Identity
    id: str = Field(..., description="Unique memory identifier")
    owner_id: str = Field(..., description="Owner (user) this memory belongs to")
    memory_type: str = Field(..., description="Registered memory type identifier")

    # Content
    content: str = Field(..., description="The memory content")
    content_hash: str = Field(..., description="SHA-256 hash for deduplication")
    embedding: Optional[list[float]] = Field(None, description="Vector embedding for similarity search")
    token_count: int = Field(0, ge=0, description="Approximate LLM token count of content")

    # Retention
    decay: int = Field(..., ge=0, description="Retention score; higher is more strongly remembered")
    importance: float = Field(
        DEFAULT_IMPORTANCE,
        ge=0.0,
        le=1.0,
        description="Caller-assigned weight (0.0-1.0, affects decay bonuses and merge precedence)"
    )
    metadata: dict[str, Any] = Field(default_factory=dict, description="Arbitrary metadata")

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Creation timestamp")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Last update timestamp")
    last_accessed_at: Optional[datetime] = Field(None, description="Last time the memory was used")

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        """Validate that content is not empty."""
        if not v or not v.strip():
            raise ValueError("Memory content cannot be empty")
        return v

    @field_validator("owner_id", "memory_type")
    @classmethod
    def identifier_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("owner_id and memory_type cannot be blank")
        return v

    @property
    def is_immutable(self) -> bool:
        return self.metadata.get("immutable") is True


class ScoredMemory(BaseModel):
    """A retrieval candidate paired with its similarity to the query."""

    model_config = ConfigDict(frozen=True)

    memory: Memory
    similarity: float


class MemoryStats(BaseModel):
    """Aggregate statistics over one owner's memories."""

    owner_id: str
    total_memories: int = 0
    average_decay: float = 0.0
    total_tokens: int = 0
    average_importance: float = 0.0
    memories_by_type: dict[str, int] = Field(default_factory=dict)
    oldest_memory: Optional[datetime] = None
    newest_memory: Optional[datetime] = None
