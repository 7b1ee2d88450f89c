"""Custom exception classes for chunked cache storage."""

from typing import List, Optional


class ChunkStoreError(Exception):
    """
    Base exception class for all chunk store errors.
    """
    pass


class StorageError(ChunkStoreError):
    """
    Raised when a file could not be written into the cache.
    """

    def __init__(self, message: str, namespace: Optional[str] = None):
        super().__init__(message)
        self.namespace = namespace


class AlreadyStoredError(StorageError):
    """
    Raised when chunk 0 of the target namespace already exists.

    Nothing has been written when this is raised.
    """
    pass


class RetrievalError(ChunkStoreError):
    """
    Raised when expected chunk keys are absent or the cache read fails.
    """

    def __init__(
        self,
        message: str,
        namespace: Optional[str] = None,
        missing_keys: Optional[List[int]] = None,
    ):
        super().__init__(message)
        self.namespace = namespace
        self.missing_keys = missing_keys or []


class CorruptPayloadError(ChunkStoreError):
    """
    Raised when reassembled bytes fail to decompress.
    """
    pass


class ValueTooLargeError(ChunkStoreError):
    """
    Raised when a value exceeds the cache's per-entry size ceiling.
    """
    pass
