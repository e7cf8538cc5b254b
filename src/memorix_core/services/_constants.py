"""
Centralized extension point constants for all Memorix services.

All EXT_* constants are defined here to avoid circular import issues.
Individual service base modules re-export the relevant constants.
"""

# ============================================
# Storage
# ============================================
EXT_MEMORY_STORE = 'memorix-memory-store'

# ============================================
# Embedding
# ============================================
EXT_EMBEDDING_PROVIDER = 'memorix-embedding-provider'
EXT_EMBEDDING_SERVICE = 'memorix-embedding-service'

# ============================================
# Type configuration
# ============================================
EXT_TYPE_REGISTRY = 'memorix-type-registry'

# ============================================
# Lifecycle
# ============================================
EXT_DECAY_ENGINE = 'memorix-decay-engine'
EXT_LIFECYCLE_MANAGER = 'memorix-lifecycle-manager'

# ============================================
# Deduplication
# ============================================
EXT_DEDUPLICATION_SERVICE = 'memorix-deduplication-service'

# ============================================
# Query
# ============================================
EXT_QUERY_SERVICE = 'memorix-query-service'

# ============================================
# Memory
# ============================================
EXT_MEMORY_SERVICE = 'memorix-memory-service'
