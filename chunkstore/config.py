"""Configuration settings for chunked cache storage."""

import os

from common.constants import (
    CHUNK_SAFETY_MARGIN_BYTES,
    DEFAULT_MEMCACHED_SERVERS,
    DEFAULT_REDIS_URL,
    MAX_ITEM_SIZE_BYTES,
)


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


CACHE_BACKEND = os.environ.get("CHUNKSTORE_BACKEND", "memcached")

MEMCACHED_SERVERS = [
    server.strip()
    for server in os.environ.get("CHUNKSTORE_SERVERS", DEFAULT_MEMCACHED_SERVERS).split(",")
    if server.strip()
]

REDIS_URL = os.environ.get("CHUNKSTORE_REDIS_URL", DEFAULT_REDIS_URL)

MAX_ITEM_SIZE = int(os.environ.get("CHUNKSTORE_MAX_ITEM_SIZE", str(MAX_ITEM_SIZE_BYTES)))
SAFETY_MARGIN = int(os.environ.get("CHUNKSTORE_SAFETY_MARGIN", str(CHUNK_SAFETY_MARGIN_BYTES)))

COMPRESS_VALUES = _env_bool("CHUNKSTORE_COMPRESS_VALUES", True)

CONNECT_TIMEOUT = float(os.environ.get("CHUNKSTORE_CONNECT_TIMEOUT", "5"))
TIMEOUT = float(os.environ.get("CHUNKSTORE_TIMEOUT", "10"))
