"""Tests for environment-driven configuration."""

import importlib
import logging

import pytest

from chunkstore import config
from chunkstore.cache_client import InMemoryCacheClient
from chunkstore.chunk_store import ChunkStore
from common.constants import KIB, MIB


@pytest.fixture
def reload_config(monkeypatch):
    """
    Reload chunkstore.config under patched environment variables.

    Yields:
        Callable taking environment overrides and returning the reloaded module
    """
    def _reload(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return importlib.reload(config)

    yield _reload

    monkeypatch.undo()
    importlib.reload(config)

    logger = logging.getLogger('chunkstore')
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def test_defaults(reload_config, monkeypatch):
    for name in (
        'CHUNKSTORE_BACKEND',
        'CHUNKSTORE_SERVERS',
        'CHUNKSTORE_MAX_ITEM_SIZE',
        'CHUNKSTORE_SAFETY_MARGIN',
        'CHUNKSTORE_COMPRESS_VALUES',
    ):
        monkeypatch.delenv(name, raising=False)
    cfg = reload_config()

    assert cfg.CACHE_BACKEND == 'memcached'
    assert cfg.MEMCACHED_SERVERS == ['localhost:11211']
    assert cfg.MAX_ITEM_SIZE == MIB
    assert cfg.SAFETY_MARGIN == 4 * KIB
    assert cfg.COMPRESS_VALUES is True


def test_servers_are_split_on_commas(reload_config):
    cfg = reload_config(CHUNKSTORE_SERVERS='a:11211, b:11212,')
    assert cfg.MEMCACHED_SERVERS == ['a:11211', 'b:11212']


@pytest.mark.parametrize('value, expected', [
    ('false', False),
    ('0', False),
    ('yes', True),
    ('TRUE', True),
])
def test_compress_values_flag(reload_config, value, expected):
    cfg = reload_config(CHUNKSTORE_COMPRESS_VALUES=value)
    assert cfg.COMPRESS_VALUES is expected


def test_from_config_builds_store(reload_config):
    reload_config(
        CHUNKSTORE_BACKEND='memory',
        CHUNKSTORE_MAX_ITEM_SIZE='65536',
        CHUNKSTORE_SAFETY_MARGIN='1024',
    )

    store = ChunkStore.from_config()

    assert isinstance(store.cache_client, InMemoryCacheClient)
    assert store.cache_client.max_item_size == 65536
    assert store.chunk_size == 65536 - 1024


def test_from_config_rejects_unusable_margin(reload_config):
    reload_config(
        CHUNKSTORE_BACKEND='memory',
        CHUNKSTORE_MAX_ITEM_SIZE='1024',
        CHUNKSTORE_SAFETY_MARGIN='1024',
    )

    with pytest.raises(ValueError):
        ChunkStore.from_config()


def test_from_config_sets_up_package_logging(reload_config):
    logger = logging.getLogger('chunkstore')
    reload_config(CHUNKSTORE_BACKEND='memory', LOG_LEVEL='DEBUG')

    ChunkStore.from_config()

    assert logger.handlers
    assert logger.level == logging.DEBUG
