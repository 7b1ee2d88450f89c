"""Pydantic models for store and retrieve results."""

from pydantic import BaseModel, ConfigDict


class StoredObjectMetadata(BaseModel):
    """Result of storing a file; callers persist it to retrieve later."""
    model_config = ConfigDict(frozen=True)

    local_path: str
    number_of_chunks: int
    file_digest: str
    memcached_namespace: str


class RetrievedObjectMetadata(BaseModel):
    """Result of retrieving a file."""
    model_config = ConfigDict(frozen=True)

    path: str
    file_digest: str
