"""Namespace and key derivation for chunk families."""

import hashlib

from common.constants import (
    MEMCACHED_MAX_KEY_LENGTH,
    MEMCACHED_TRUNCATED_KEY_LENGTH,
    NAMESPACE_SEPARATOR,
)


def build_namespace(file_name: str, digest: str) -> str:
    """
    Derive the namespace for one stored object version.

    Args:
        file_name: Base name of the stored file
        digest: Hex digest of the raw file bytes

    Returns:
        "{file_name}:{digest}"
    """
    return f"{file_name}{NAMESPACE_SEPARATOR}{digest}"


def file_name_from_namespace(namespace: str) -> str:
    """Return the part of the namespace before the first separator."""
    return namespace.split(NAMESPACE_SEPARATOR, 1)[0]


def _is_illegal_char(char: str) -> bool:
    return ord(char) <= 0x20 or ord(char) == 0x7f


def is_valid_key(flat_key: str) -> bool:
    """
    Check a flat key against memcached text protocol rules.

    Keys must fit in 250 bytes and contain no whitespace or control characters.
    """
    if len(flat_key.encode('utf-8')) > MEMCACHED_MAX_KEY_LENGTH:
        return False
    return not any(_is_illegal_char(char) for char in flat_key)


def namespaced_key(namespace: str, key) -> str:
    """
    Build the flat cache key for a chunk index inside a namespace.

    Keys that are too long or contain whitespace or control characters are
    rewritten: illegal characters become "_", the result is cut to fit, and
    the MD5 of the original key is appended so it stays unique and
    deterministic. The namespace string itself is never changed.
    """
    full_key = f"{namespace}{NAMESPACE_SEPARATOR}{key}"
    if is_valid_key(full_key):
        return full_key

    digest = hashlib.md5(full_key.encode('utf-8')).hexdigest()
    cleaned = ''.join('_' if _is_illegal_char(char) else char for char in full_key)
    prefix = cleaned.encode('utf-8')[:MEMCACHED_TRUNCATED_KEY_LENGTH].decode('utf-8', 'ignore')
    return f"{prefix}:md5:{digest}"
