"""
Pytest configuration and fixtures for Memorix tests.

Uses scitrera-app-framework dependency injection for service configuration.
Each test session gets an isolated Variables instance that does NOT pull from
environment variables - all configuration is set explicitly for test isolation.

Usage in tests:
    def test_something(memory_service, owner_id):
        result = memory_service.remember(owner_id, "USER_PREFERENCE", "...")
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest

from scitrera_app_framework import Variables, get_extension
from memorix_core.config import (
    MEMORIX_EMBEDDING_PROVIDER,
    MEMORIX_STORAGE_BACKEND,
    MEMORIX_TYPE_REGISTRY_BUILTINS,
)
from memorix_core.models import Memory
from memorix_core.services.embedding import EmbeddingProvider
from memorix_core.utils import compute_content_hash, count_tokens


# -----------------------------------------------------------------------------
# Logging Configuration (initialized by test harness, not framework)
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def test_logger() -> logging.Logger:
    """
    Create a root logger for tests.

    The test harness owns logging configuration, not the framework.
    This prevents conflicts and ensures predictable test output.
    """
    logger = logging.getLogger("memorix-test")
    logger.setLevel(logging.DEBUG)

    # Add console handler if not already present
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s %(funcName)s() > %(message)s',
            datefmt='%Y/%m/%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


# -----------------------------------------------------------------------------
# Framework Initialization with Test Isolation
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def test_configuration():
    """
    Create an isolated Variables instance to provide custom configuration
    of key environment variables for tests. The test's local framework will
    be built on top of this configuration.
    """
    v = Variables()
    v.set(MEMORIX_EMBEDDING_PROVIDER, "mock")
    v.set(MEMORIX_STORAGE_BACKEND, "memory")
    v.set(MEMORIX_TYPE_REGISTRY_BUILTINS, "true")
    return v


@pytest.fixture(scope="session")
def test_framework(test_configuration, test_logger):
    """
    Initialize an isolated framework instance for the test session.

    Yields:
        tuple: (v: Variables, services: module) for use in tests
    """
    from memorix_core.dependencies import preconfigure, initialize_services, shutdown_services

    v, services = preconfigure(v=test_configuration, test_mode=True, test_logger=test_logger)
    v = initialize_services(v)

    yield v, services

    shutdown_services(v)


@pytest.fixture(scope="session")
def v(test_framework):
    """Isolated Variables instance for tests."""
    v, _ = test_framework
    return v


# -----------------------------------------------------------------------------
# Convenience Service Fixtures
# These just call the DI system with the isolated Variables instance.
# -----------------------------------------------------------------------------

@pytest.fixture
def memory_service(v):
    """Get the memory service."""
    from memorix_core.services.memory import EXT_MEMORY_SERVICE
    return get_extension(EXT_MEMORY_SERVICE, v)


@pytest.fixture
def memory_store(v):
    """Get the memory store."""
    from memorix_core.services.storage import EXT_MEMORY_STORE
    return get_extension(EXT_MEMORY_STORE, v)


@pytest.fixture
def type_registry(v):
    """Get the type registry."""
    from memorix_core.services.type_registry import EXT_TYPE_REGISTRY
    return get_extension(EXT_TYPE_REGISTRY, v)


@pytest.fixture
def query_service(v):
    """Get the query service."""
    from memorix_core.services.query import EXT_QUERY_SERVICE
    return get_extension(EXT_QUERY_SERVICE, v)


@pytest.fixture
def lifecycle_manager(v):
    """Get the lifecycle manager."""
    from memorix_core.services.lifecycle import EXT_LIFECYCLE_MANAGER
    return get_extension(EXT_LIFECYCLE_MANAGER, v)


# -----------------------------------------------------------------------------
# Test Isolation Helpers
# -----------------------------------------------------------------------------

@pytest.fixture
def owner_id() -> str:
    """Generate a unique owner ID for test isolation (function-scoped)."""
    return f"user_{uuid.uuid4().hex[:8]}"


# -----------------------------------------------------------------------------
# Test Data Factories
# -----------------------------------------------------------------------------

def make_memory(
        content: str = "User prefers dark mode",
        memory_type: str = "USER_PREFERENCE",
        owner_id: str = "user-1",
        decay: int = 100,
        importance: float = 0.5,
        embedding: Optional[list[float]] = None,
        created_at: Optional[datetime] = None,
        last_accessed_at: Optional[datetime] = None,
        metadata: Optional[dict] = None,
) -> Memory:
    """Build a memory directly, bypassing the memory service."""
    created_at = created_at or datetime.now(timezone.utc)
    return Memory(
        id=f"mem_{uuid.uuid4().hex[:16]}",
        owner_id=owner_id,
        memory_type=memory_type,
        content=content,
        content_hash=compute_content_hash(content),
        embedding=embedding,
        token_count=count_tokens(content),
        decay=decay,
        importance=importance,
        metadata=metadata or {},
        created_at=created_at,
        updated_at=created_at,
        last_accessed_at=last_accessed_at,
    )


class StubEmbeddingProvider(EmbeddingProvider):
    """Embedding provider with hand-picked vectors per text; counts calls."""

    def __init__(self, vectors: Optional[dict[str, list[float]]] = None, dimensions: int = 3):
        super().__init__(None, output_dimensions=dimensions)
        self.vectors = dict(vectors or {})
        self.calls = 0

    def embed(self, text: str) -> list[float]:
        self.calls += 1
        return list(self.vectors.get(text, [0.0] * (self._dimensions - 1) + [1.0]))
