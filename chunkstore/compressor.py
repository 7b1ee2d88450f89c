"""zlib compression of whole payloads before chunking."""

import zlib
from pathlib import Path
from typing import Union

from chunkstore.exceptions import CorruptPayloadError


def compress(data: bytes) -> bytes:
    """
    Deflate a byte blob.

    Args:
        data: Raw bytes

    Returns:
        zlib-compressed bytes
    """
    return zlib.compress(data)


def decompress(data: bytes) -> bytes:
    """
    Inflate bytes produced by compress().

    Args:
        data: Compressed bytes

    Returns:
        Original raw bytes

    Raises:
        CorruptPayloadError: If the input is not a complete zlib stream
    """
    decompressor = zlib.decompressobj()
    try:
        result = decompressor.decompress(data) + decompressor.flush()
    except zlib.error as e:
        raise CorruptPayloadError(f"Payload failed to decompress: {e}") from e

    if not decompressor.eof:
        raise CorruptPayloadError("Payload is truncated: zlib stream did not end")
    if decompressor.unused_data:
        raise CorruptPayloadError(
            f"Payload has {len(decompressor.unused_data)} trailing bytes after zlib stream"
        )
    return result


def compress_file(file_path: Union[str, Path]) -> bytes:
    """Read a whole file and compress it."""
    return compress(Path(file_path).read_bytes())
