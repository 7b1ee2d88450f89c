"""
Stores files in a size-limited key-value cache as families of chunk entries.

A file is compressed, split into chunks below the cache's entry ceiling and
written under "{file name}:{md5 of raw bytes}". Chunk 0 is written with an
atomic add so an existing object is never overwritten; chunks 1..n-1 follow
in index order. Retrieval reads exactly keys 0..n-1 in one multi-key read.

The cache has no listing of namespaces. Callers keep the StoredObjectMetadata
returned by put() to retrieve the file later.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from chunkstore import config
from chunkstore.cache_client import CacheClient, build_cache_client
from chunkstore.chunker import chunk_size_for, chunkify, reassemble
from chunkstore.compressor import compress, decompress
from chunkstore.digest import compute_digest, compute_file_digest, verify_digest
from chunkstore.exceptions import AlreadyStoredError, RetrievalError, StorageError
from chunkstore.models import RetrievedObjectMetadata, StoredObjectMetadata
from chunkstore.namespace import build_namespace, file_name_from_namespace
from common.constants import DEFAULT_CHUNK_SIZE_BYTES
from common.logging_config import setup_logging

logger = logging.getLogger(__name__)


class ChunkStore:
    """Chunked file storage on top of a CacheClient."""

    def __init__(self, cache_client: CacheClient, chunk_size: int = DEFAULT_CHUNK_SIZE_BYTES):
        """
        Initialize the chunk store.

        Args:
            cache_client: Backend used for every read and write
            chunk_size: Capacity of each chunk, below the cache's entry ceiling
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.cache_client = cache_client
        self.chunk_size = chunk_size

    @classmethod
    def from_config(cls) -> 'ChunkStore':
        """Build a chunk store from CHUNKSTORE_* environment settings."""
        setup_logging("chunkstore")
        client = build_cache_client(
            config.CACHE_BACKEND,
            servers=config.MEMCACHED_SERVERS,
            redis_url=config.REDIS_URL,
            compress_values=config.COMPRESS_VALUES,
            max_item_size=config.MAX_ITEM_SIZE,
            connect_timeout=config.CONNECT_TIMEOUT,
            timeout=config.TIMEOUT,
        )
        return cls(client, chunk_size=chunk_size_for(config.MAX_ITEM_SIZE, config.SAFETY_MARGIN))

    def put(self, file_path: Union[str, Path]) -> StoredObjectMetadata:
        """
        Store a file as chunk entries under its own namespace.

        Args:
            file_path: File to store

        Returns:
            StoredObjectMetadata needed to retrieve the file

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: If the file cannot be read
            AlreadyStoredError: If chunk 0 of the namespace already exists
            StorageError: If the cache rejects a write
        """
        file_path = Path(file_path)
        raw = file_path.read_bytes()

        file_digest = compute_digest(raw)
        chunks = chunkify(compress(raw), self.chunk_size)
        namespace = build_namespace(file_path.name, file_digest)

        logger.info(
            f"Storing {file_path} [namespace={namespace}, size={len(raw)}, chunks={len(chunks)}]"
        )

        try:
            created = self.cache_client.add(namespace, 0, chunks[0])
        except Exception as e:
            raise StorageError(f"Failed to write chunk 0 of {namespace}: {e}", namespace) from e

        if not created:
            logger.warning(f"Refusing to overwrite existing object [namespace={namespace}]")
            raise AlreadyStoredError(f"File is already stored under {namespace}", namespace)

        for index in range(1, len(chunks)):
            try:
                self.cache_client.set(namespace, index, chunks[index])
            except Exception as e:
                logger.error(
                    f"Chunk write failed, object left partial "
                    f"[namespace={namespace}, chunk={index}/{len(chunks)}]: {e}"
                )
                raise StorageError(
                    f"Failed to write chunk {index} of {namespace}: {e}",
                    namespace,
                ) from e
            logger.debug(f"Wrote chunk {index} ({len(chunks[index])} bytes) to {namespace}")

        return StoredObjectMetadata(
            local_path=str(file_path),
            number_of_chunks=len(chunks),
            file_digest=file_digest,
            memcached_namespace=namespace,
        )

    def get(
        self,
        namespace: str,
        number_of_chunks: int,
        destination_path: Union[str, Path],
        file_name: Optional[str] = None,
    ) -> RetrievedObjectMetadata:
        """
        Reassemble a stored file into destination_path.

        Args:
            namespace: Namespace returned by put()
            number_of_chunks: Chunk count returned by put()
            destination_path: Existing directory to write into
            file_name: Output name; defaults to the name embedded in the namespace

        Returns:
            RetrievedObjectMetadata with a digest of the written file. The
            caller compares it with the digest recorded at store time.

        Raises:
            ValueError: If number_of_chunks is less than 1
            RetrievalError: If any chunk is missing or the cache read fails
            CorruptPayloadError: If the reassembled bytes do not decompress
            OSError: If the output file cannot be written
        """
        if number_of_chunks < 1:
            raise ValueError(f"number_of_chunks must be at least 1, got {number_of_chunks}")

        keys = list(range(number_of_chunks))

        try:
            found = self.cache_client.get_many(namespace, keys)
        except Exception as e:
            raise RetrievalError(f"Failed to read chunks of {namespace}: {e}", namespace) from e

        missing = [key for key in keys if found.get(key) is None]
        if missing:
            raise RetrievalError(
                f"{len(missing)} of {number_of_chunks} chunks missing from {namespace}: {missing}",
                namespace,
                missing,
            )

        content = decompress(reassemble(found[key] for key in keys))

        file_name = file_name or file_name_from_namespace(namespace)
        full_path = Path(destination_path) / file_name
        self._write_atomically(full_path, content)

        logger.info(f"Retrieved {namespace} into {full_path} [chunks={number_of_chunks}]")

        return RetrievedObjectMetadata(
            path=str(full_path),
            file_digest=compute_file_digest(full_path),
        )

    def get_object(
        self,
        metadata: StoredObjectMetadata,
        destination_path: Union[str, Path],
        file_name: Optional[str] = None,
    ) -> RetrievedObjectMetadata:
        """Retrieve the object described by a put() result."""
        return self.get(
            metadata.memcached_namespace,
            metadata.number_of_chunks,
            destination_path,
            file_name=file_name,
        )

    def exists(self, namespace: str) -> bool:
        """Check whether chunk 0 of a namespace is present."""
        return self.cache_client.get(namespace, 0) is not None

    @staticmethod
    def verify(stored: StoredObjectMetadata, retrieved: RetrievedObjectMetadata) -> bool:
        """Check that a retrieved file matches the digest recorded at store time."""
        return verify_digest(stored.file_digest, retrieved.file_digest)

    @staticmethod
    def _write_atomically(full_path: Path, content: bytes) -> None:
        fd, temp_path = tempfile.mkstemp(dir=full_path.parent, prefix=".chunkstore-", suffix=".part")
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(content)
            os.replace(temp_path, full_path)
        except BaseException:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
