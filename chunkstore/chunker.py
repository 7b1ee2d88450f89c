"""Splits compressed payloads into cache-sized segments and joins them back."""

from typing import Iterable, List

from common.constants import CHUNK_SAFETY_MARGIN_BYTES, MAX_ITEM_SIZE_BYTES


def chunk_size_for(
    max_item_size: int = MAX_ITEM_SIZE_BYTES,
    safety_margin: int = CHUNK_SAFETY_MARGIN_BYTES,
) -> int:
    """
    Compute the chunk capacity for a cache with the given entry ceiling.

    Args:
        max_item_size: Largest value the cache accepts, in bytes
        safety_margin: Bytes reserved for client-side bookkeeping

    Returns:
        Chunk size strictly below max_item_size

    Raises:
        ValueError: If the margin leaves no usable capacity
    """
    if safety_margin <= 0:
        raise ValueError(f"safety_margin must be positive, got {safety_margin}")
    size = max_item_size - safety_margin
    if size <= 0:
        raise ValueError(
            f"safety_margin {safety_margin} leaves no room in a {max_item_size} byte entry"
        )
    return size


def chunkify(content: bytes, chunk_size: int) -> List[bytes]:
    """
    Split content into ordered segments of chunk_size bytes.

    Content shorter than chunk_size comes back whole as a single segment.
    Otherwise every segment is exactly chunk_size bytes except the last,
    which holds the remainder when the length is not an exact multiple.

    Args:
        content: Bytes to split
        chunk_size: Segment capacity in bytes

    Returns:
        List of segments in index order

    Raises:
        ValueError: If chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    if len(content) < chunk_size:
        return [content]

    return [content[offset:offset + chunk_size] for offset in range(0, len(content), chunk_size)]


def reassemble(chunks: Iterable[bytes]) -> bytes:
    """Concatenate segments in index order."""
    return b"".join(chunks)
