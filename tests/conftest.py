"""Shared pytest fixtures for all tests."""

import random

import pytest

from chunkstore.cache_client import InMemoryCacheClient
from chunkstore.chunk_store import ChunkStore
from common.constants import MIB

FILLER = b'abcdefghijklmnopqrstuvwxyz123456'


@pytest.fixture
def memory_client():
    """
    Create an empty in-memory cache with the memcached 1 MiB ceiling.

    Returns:
        InMemoryCacheClient instance
    """
    return InMemoryCacheClient()


@pytest.fixture
def store(memory_client):
    """
    Create a chunk store with the default chunk size.

    Args:
        memory_client: In-memory cache fixture

    Returns:
        ChunkStore backed by memory_client
    """
    return ChunkStore(memory_client)


@pytest.fixture
def filler_file(tmp_path):
    """
    Create a 10 MiB file of repeating filler bytes.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to the filler file
    """
    file_path = tmp_path / 'foobar.txt'
    file_path.write_bytes(FILLER * (10 * MIB // len(FILLER)))
    return file_path


@pytest.fixture
def random_file(tmp_path):
    """
    Create a file of incompressible bytes.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to a 5000 byte file of seeded random data
    """
    file_path = tmp_path / 'random.bin'
    rng = random.Random(1234)
    file_path.write_bytes(bytes(rng.getrandbits(8) for _ in range(5000)))
    return file_path


@pytest.fixture
def destination(tmp_path):
    """
    Create an output directory for retrieved files.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to an empty directory
    """
    out_dir = tmp_path / 'out'
    out_dir.mkdir()
    return out_dir
