"""Project-wide constants (sizes, key limits, default endpoints)."""

KIB: int = 1024
MIB: int = 1024 * KIB

MAX_ITEM_SIZE_BYTES: int = 1 * MIB  # memcached default item ceiling
CHUNK_SAFETY_MARGIN_BYTES: int = 4 * KIB  # room for client-side flags/headers
DEFAULT_CHUNK_SIZE_BYTES: int = MAX_ITEM_SIZE_BYTES - CHUNK_SAFETY_MARGIN_BYTES

MEMCACHED_MAX_KEY_LENGTH: int = 250
MEMCACHED_TRUNCATED_KEY_LENGTH: int = 212

NAMESPACE_SEPARATOR: str = ":"

DIGEST_PIECE_SIZE_BYTES: int = 64 * KIB

DEFAULT_MEMCACHED_SERVERS: str = "localhost:11211"
DEFAULT_REDIS_URL: str = "redis://localhost:6379/0"
