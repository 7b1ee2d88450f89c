"""
Key-value cache clients used as chunk storage backends.

Every operation takes the namespace explicitly, so one client instance can
serve any number of stored objects without per-object state. Keys inside a
namespace are chunk indexes; the flat key sent to the cache is built by
chunkstore.namespace.namespaced_key().

Backends:
- MemcachedCacheClient: pymemcache HashClient across one or more servers
- RedisCacheClient: redis-py, SET NX for create-if-absent
- InMemoryCacheClient: process-local dict honouring an entry size ceiling
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

import redis
from pymemcache.client.hash import HashClient
from pymemcache.exceptions import MemcacheError, MemcacheIllegalInputError
from pymemcache.serde import CompressedSerde

from chunkstore.exceptions import ValueTooLargeError
from chunkstore.namespace import is_valid_key, namespaced_key
from common.constants import MAX_ITEM_SIZE_BYTES

logger = logging.getLogger(__name__)


class CacheClient(ABC):
    """Contract the chunk store relies on."""

    @abstractmethod
    def get(self, namespace: str, key) -> Optional[bytes]:
        """Return the value for key, or None when absent."""

    @abstractmethod
    def set(self, namespace: str, key, value: bytes) -> None:
        """Store value under key, overwriting any existing value."""

    @abstractmethod
    def add(self, namespace: str, key, value: bytes) -> bool:
        """Store value only if key is absent. Returns False if it existed."""

    @abstractmethod
    def get_many(self, namespace: str, keys: Iterable) -> Dict:
        """Return {key: value} for the keys that are present."""


def parse_server(server: str) -> Tuple[str, int]:
    """
    Parse a "host:port" server spec.

    Args:
        server: Server address, port defaults to 11211 when omitted

    Returns:
        (host, port) tuple
    """
    host, _, port = server.rpartition(":")
    if not host:
        return server, 11211
    return host, int(port)


class MemcachedCacheClient(CacheClient):
    """
    memcached backend built on pymemcache.

    Values are optionally zlib-compressed by the client before they reach the
    server, which is what the chunk safety margin leaves room for.
    """

    def __init__(
        self,
        servers: List[str],
        compress_values: bool = True,
        connect_timeout: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the memcached client.

        Args:
            servers: List of "host:port" addresses
            compress_values: Compress values client-side before sending
            connect_timeout: Socket connect timeout in seconds
            timeout: Socket operation timeout in seconds
        """
        self.servers = [parse_server(server) for server in servers]
        self.compress_values = compress_values
        self._client = HashClient(
            self.servers,
            connect_timeout=connect_timeout,
            timeout=timeout,
            serde=CompressedSerde() if compress_values else None,
            allow_unicode_keys=True,
            ignore_exc=False,
        )
        logger.info(
            f"memcached client ready [servers={servers}, compress_values={compress_values}]"
        )

    def get(self, namespace: str, key) -> Optional[bytes]:
        return self._client.get(namespaced_key(namespace, key))

    def set(self, namespace: str, key, value: bytes) -> None:
        flat_key = namespaced_key(namespace, key)
        if not self._client.set(flat_key, value, noreply=False):
            raise MemcacheError(f"memcached refused to store {flat_key}")

    def add(self, namespace: str, key, value: bytes) -> bool:
        flat_key = namespaced_key(namespace, key)
        if self._client.add(flat_key, value, noreply=False):
            return True

        # HashClient returns False instead of raising while a server sits in
        # its retry window, so a refused add only counts if the key is there.
        if self._client.get(flat_key) is None:
            raise MemcacheError(f"memcached unavailable: add of {flat_key} refused but key is absent")
        return False

    def get_many(self, namespace: str, keys: Iterable) -> Dict:
        flat_keys = {namespaced_key(namespace, key): key for key in keys}
        if not flat_keys:
            return {}
        found = self._client.get_many(list(flat_keys))
        return {flat_keys[flat_key]: value for flat_key, value in found.items()}

    def close(self) -> None:
        self._client.close()


class RedisCacheClient(CacheClient):
    """
    Redis backend built on redis-py.

    Redis itself allows large values; max_item_size enforces a memcached-like
    ceiling when the same chunk size must work against both.
    """

    def __init__(self, url: str, max_item_size: Optional[int] = None, timeout: Optional[float] = None):
        """
        Initialize the Redis client.

        Args:
            url: Redis URL (e.g., "redis://localhost:6379/0")
            max_item_size: Optional per-value size ceiling in bytes
            timeout: Socket timeout in seconds
        """
        self.max_item_size = max_item_size
        self._client = redis.Redis.from_url(url, socket_timeout=timeout)
        logger.info(f"Redis client ready [url={url}]")

    def _check_size(self, flat_key: str, value: bytes) -> None:
        if self.max_item_size is not None and len(value) > self.max_item_size:
            raise ValueTooLargeError(
                f"Value for {flat_key} is {len(value)} bytes, limit is {self.max_item_size}"
            )

    def get(self, namespace: str, key) -> Optional[bytes]:
        return self._client.get(namespaced_key(namespace, key))

    def set(self, namespace: str, key, value: bytes) -> None:
        flat_key = namespaced_key(namespace, key)
        self._check_size(flat_key, value)
        self._client.set(flat_key, value)

    def add(self, namespace: str, key, value: bytes) -> bool:
        flat_key = namespaced_key(namespace, key)
        self._check_size(flat_key, value)
        return bool(self._client.set(flat_key, value, nx=True))

    def get_many(self, namespace: str, keys: Iterable) -> Dict:
        keys = list(keys)
        if not keys:
            return {}
        values = self._client.mget([namespaced_key(namespace, key) for key in keys])
        return {key: value for key, value in zip(keys, values) if value is not None}

    def close(self) -> None:
        self._client.close()


class InMemoryCacheClient(CacheClient):
    """
    Process-local cache with memcached key rules and entry size ceiling.

    Records the flat keys of every read and successful write so callers can
    inspect exactly what a store or retrieve touched.
    """

    def __init__(self, max_item_size: int = MAX_ITEM_SIZE_BYTES):
        self.max_item_size = max_item_size
        self._data: Dict[str, bytes] = {}
        self._lock = threading.Lock()
        self.reads: List[str] = []
        self.writes: List[str] = []

    @staticmethod
    def _flat_key(namespace: str, key) -> str:
        flat_key = namespaced_key(namespace, key)
        if not is_valid_key(flat_key):
            raise MemcacheIllegalInputError(f"Key is not valid for memcached: {flat_key!r}")
        return flat_key

    def _check_size(self, flat_key: str, value: bytes) -> None:
        if len(value) > self.max_item_size:
            raise ValueTooLargeError(
                f"Value for {flat_key} is {len(value)} bytes, limit is {self.max_item_size}"
            )

    def get(self, namespace: str, key) -> Optional[bytes]:
        flat_key = self._flat_key(namespace, key)
        with self._lock:
            self.reads.append(flat_key)
            return self._data.get(flat_key)

    def set(self, namespace: str, key, value: bytes) -> None:
        flat_key = self._flat_key(namespace, key)
        self._check_size(flat_key, value)
        with self._lock:
            self._data[flat_key] = bytes(value)
            self.writes.append(flat_key)

    def add(self, namespace: str, key, value: bytes) -> bool:
        flat_key = self._flat_key(namespace, key)
        self._check_size(flat_key, value)
        with self._lock:
            if flat_key in self._data:
                return False
            self._data[flat_key] = bytes(value)
            self.writes.append(flat_key)
            return True

    def get_many(self, namespace: str, keys: Iterable) -> Dict:
        result = {}
        with self._lock:
            for key in keys:
                flat_key = self._flat_key(namespace, key)
                self.reads.append(flat_key)
                if flat_key in self._data:
                    result[key] = self._data[flat_key]
        return result

    def delete(self, namespace: str, key) -> None:
        """Drop a key; used to simulate eviction."""
        with self._lock:
            self._data.pop(self._flat_key(namespace, key), None)

    def flush(self) -> None:
        with self._lock:
            self._data.clear()
            self.reads.clear()
            self.writes.clear()

    def __len__(self) -> int:
        return len(self._data)


def build_cache_client(
    backend: str,
    servers: Optional[List[str]] = None,
    redis_url: Optional[str] = None,
    compress_values: bool = True,
    max_item_size: int = MAX_ITEM_SIZE_BYTES,
    connect_timeout: Optional[float] = None,
    timeout: Optional[float] = None,
) -> CacheClient:
    """
    Create a cache client for the named backend.

    Args:
        backend: "memcached", "redis" or "memory"
        servers: memcached "host:port" list
        redis_url: Redis URL
        compress_values: memcached client-side value compression
        max_item_size: Entry size ceiling for redis and memory backends
        connect_timeout: Socket connect timeout in seconds
        timeout: Socket operation timeout in seconds

    Returns:
        CacheClient instance

    Raises:
        ValueError: If backend is unknown or its address is missing
    """
    backend = backend.strip().lower()

    if backend == "memcached":
        if not servers:
            raise ValueError("memcached backend requires at least one server")
        return MemcachedCacheClient(
            servers,
            compress_values=compress_values,
            connect_timeout=connect_timeout,
            timeout=timeout,
        )
    if backend == "redis":
        if not redis_url:
            raise ValueError("redis backend requires a URL")
        return RedisCacheClient(redis_url, max_item_size=max_item_size, timeout=timeout)
    if backend == "memory":
        return InMemoryCacheClient(max_item_size=max_item_size)

    raise ValueError(f"Unknown cache backend: {backend}")
