"""
Chunked file storage for size-limited key-value caches.

ChunkStore.from_config() reads CHUNKSTORE_* settings and configures the
"chunkstore" logger through common.logging_config.setup_logging(); callers
building a ChunkStore directly call setup_logging() themselves if they want
its output.
"""

from chunkstore.cache_client import (
    CacheClient,
    InMemoryCacheClient,
    MemcachedCacheClient,
    RedisCacheClient,
    build_cache_client,
)
from chunkstore.chunk_store import ChunkStore
from chunkstore.exceptions import (
    AlreadyStoredError,
    ChunkStoreError,
    CorruptPayloadError,
    RetrievalError,
    StorageError,
    ValueTooLargeError,
)
from chunkstore.models import RetrievedObjectMetadata, StoredObjectMetadata

__all__ = [
    "CacheClient",
    "InMemoryCacheClient",
    "MemcachedCacheClient",
    "RedisCacheClient",
    "build_cache_client",
    "ChunkStore",
    "AlreadyStoredError",
    "ChunkStoreError",
    "CorruptPayloadError",
    "RetrievalError",
    "StorageError",
    "ValueTooLargeError",
    "RetrievedObjectMetadata",
    "StoredObjectMetadata",
]
