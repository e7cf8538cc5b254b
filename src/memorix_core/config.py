"""Configuration keys and defaults for Memorix (resolved through scitrera-app-framework Variables)."""

from enum import Enum


# ============================================
# Storage Backend
# ============================================
class StorageBackendType(str, Enum):
    """Available memory store implementations."""

    MEMORY = "memory"  # In-process dict store (tests, embedding in other apps)


MEMORIX_STORAGE_BACKEND = 'MEMORIX_STORAGE_BACKEND'
DEFAULT_MEMORIX_STORAGE_BACKEND = StorageBackendType.MEMORY


# ============================================
# Embedding Providers
# ============================================
class EmbeddingProviderType(str, Enum):
    """Available embedding provider types."""

    OPENAI = "openai"  # OpenAI API (also works with any OpenAI-compatible endpoint)
    MOCK = "mock"  # Deterministic hash-based vectors, for testing only


MEMORIX_EMBEDDING_PROVIDER = 'MEMORIX_EMBEDDING_PROVIDER'
DEFAULT_MEMORIX_EMBEDDING_PROVIDER = EmbeddingProviderType.MOCK
MEMORIX_EMBEDDING_MODEL = 'MEMORIX_EMBEDDING_MODEL'
MEMORIX_EMBEDDING_DIMENSIONS = 'MEMORIX_EMBEDDING_DIMENSIONS'

# ============================================
# Embedding Service
# ============================================
MEMORIX_EMBEDDING_SERVICE = 'MEMORIX_EMBEDDING_SERVICE'
DEFAULT_MEMORIX_EMBEDDING_SERVICE = 'default'
MEMORIX_EMBEDDING_CACHE_SIZE = 'MEMORIX_EMBEDDING_CACHE_SIZE'
DEFAULT_MEMORIX_EMBEDDING_CACHE_SIZE = 4096  # 0 disables the cache

# ============================================
# Type Registry
# ============================================
MEMORIX_TYPE_REGISTRY = 'MEMORIX_TYPE_REGISTRY'
DEFAULT_MEMORIX_TYPE_REGISTRY = 'default'
MEMORIX_TYPE_REGISTRY_BUILTINS = 'MEMORIX_TYPE_REGISTRY_BUILTINS'
DEFAULT_MEMORIX_TYPE_REGISTRY_BUILTINS = True

# ============================================
# Decay Engine
# ============================================
MEMORIX_DECAY_ENGINE = 'MEMORIX_DECAY_ENGINE'
DEFAULT_MEMORIX_DECAY_ENGINE = 'default'

# ============================================
# Lifecycle Manager
# ============================================
MEMORIX_LIFECYCLE_MANAGER = 'MEMORIX_LIFECYCLE_MANAGER'
DEFAULT_MEMORIX_LIFECYCLE_MANAGER = 'default'

# ============================================
# Deduplication Service
# ============================================
MEMORIX_DEDUPLICATION_SERVICE = 'MEMORIX_DEDUPLICATION_SERVICE'
DEFAULT_MEMORIX_DEDUPLICATION_SERVICE = 'default'

# ============================================
# Query Service
# ============================================
MEMORIX_QUERY_SERVICE = 'MEMORIX_QUERY_SERVICE'
DEFAULT_MEMORIX_QUERY_SERVICE = 'default'
MEMORIX_QUERY_CANDIDATE_LIMIT = 'MEMORIX_QUERY_CANDIDATE_LIMIT'
DEFAULT_MEMORIX_QUERY_CANDIDATE_LIMIT = 100  # candidates fetched from the store before limits apply

# ============================================
# Memory Service
# ============================================
MEMORIX_MEMORY_SERVICE = 'MEMORIX_MEMORY_SERVICE'
DEFAULT_MEMORIX_MEMORY_SERVICE = 'default'
