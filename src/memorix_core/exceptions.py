"""Custom exceptions for Memorix."""
from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Numeric error codes grouped by subsystem (1xxx storage, 2xxx types, 3xxx embedding,
    4xxx query, 5xxx lifecycle, 9xxx general)."""

    # Storage
    CONNECTION_FAILED = (1001, "Failed to connect to store")
    QUERY_FAILED = (1002, "Store query failed")
    SAVE_FAILED = (1005, "Failed to save memory")
    DELETE_FAILED = (1006, "Failed to delete memory")
    UPDATE_FAILED = (1007, "Failed to update memory")
    DUPLICATE_MEMORY = (1008, "Duplicate memory detected")
    MEMORY_NOT_FOUND = (1009, "Memory not found")
    IMMUTABLE_MEMORY = (1010, "Memory is immutable")

    # Memory types
    TYPE_NOT_FOUND = (2001, "Memory type not found")
    TYPE_INVALID = (2002, "Memory type configuration is invalid")

    # Embedding
    EMBEDDING_GENERATION_FAILED = (3001, "Failed to generate embedding")
    EMBEDDING_DIMENSION_MISMATCH = (3003, "Embedding dimension mismatch")

    # Query
    QUERY_INVALID = (4001, "Query is invalid")
    LIMIT_INVALID = (4002, "Query limit is invalid")

    # Lifecycle
    DECAY_CALCULATION_FAILED = (5001, "Failed to calculate decay")
    CLEANUP_FAILED = (5002, "Failed to cleanup expired memories")

    # General
    INVALID_ARGUMENT = (9001, "Invalid argument")
    CONFIGURATION_ERROR = (9003, "Configuration error")
    INTERNAL_ERROR = (9999, "Internal error")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def description(self) -> str:
        return self.value[1]

    def __str__(self) -> str:
        return f"MEMORIX-{self.code}"


class MemorixError(Exception):
    """Base exception for all Memorix errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: Optional[str] = None, error_code: Optional[ErrorCode] = None) -> None:
        if error_code is not None:
            self.error_code = error_code
        self.message = message or self.error_code.description
        self.context: dict[str, Any] = {}
        super().__init__(self.message)

    def with_context(self, key: str, value: Any) -> "MemorixError":
        """Attach diagnostic context and return self (for raise chaining)."""
        self.context[key] = value
        return self

    def __str__(self) -> str:
        text = f"[{self.error_code}] {self.message}"
        if self.context:
            text += f" {self.context}"
        return text


class ValidationError(MemorixError):
    """Raised when an argument fails validation."""
    error_code = ErrorCode.INVALID_ARGUMENT


class ConfigurationError(MemorixError):
    """Raised for fatal setup problems (bad type registration, unknown strategy)."""
    error_code = ErrorCode.CONFIGURATION_ERROR


class MemoryTypeNotFoundError(ConfigurationError):
    """Raised when a memory type is not registered."""
    error_code = ErrorCode.TYPE_NOT_FOUND

    def __init__(self, memory_type: str, available: Optional[list[str]] = None) -> None:
        available = sorted(available or [])
        super().__init__(f"Memory type not registered: {memory_type}. Available types: {available}")
        self.memory_type = memory_type
        self.available = available


class StorageError(MemorixError):
    """Raised when the memory store fails."""
    error_code = ErrorCode.QUERY_FAILED


class MemoryNotFoundError(StorageError):
    """Raised when a memory id does not exist."""
    error_code = ErrorCode.MEMORY_NOT_FOUND

    def __init__(self, memory_id: str) -> None:
        super().__init__(f"Memory not found: {memory_id}")
        self.memory_id = memory_id


class DuplicateMemoryError(StorageError):
    """Raised when a reject-configured type receives duplicate content.

    Carries the existing memory so the caller can inspect it.
    """
    error_code = ErrorCode.DUPLICATE_MEMORY

    def __init__(self, existing_memory: Any, message: Optional[str] = None) -> None:
        super().__init__(message or f"Duplicate of existing memory {existing_memory.id}")
        self.existing_memory = existing_memory


class ImmutableMemoryError(StorageError):
    """Raised when updating a memory flagged immutable in its metadata."""
    error_code = ErrorCode.IMMUTABLE_MEMORY

    def __init__(self, memory_id: str) -> None:
        super().__init__(f"Memory {memory_id} is immutable and cannot be updated")
        self.memory_id = memory_id


class EmbeddingError(MemorixError):
    """Raised when the embedding provider fails."""
    error_code = ErrorCode.EMBEDDING_GENERATION_FAILED


class QueryError(MemorixError):
    """Raised when a query cannot be executed."""
    error_code = ErrorCode.QUERY_INVALID
