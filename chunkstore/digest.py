"""MD5 content digests over raw file bytes."""

import hashlib
from pathlib import Path
from typing import Union

from common.constants import DIGEST_PIECE_SIZE_BYTES


def compute_digest(data: bytes) -> str:
    """
    Compute the MD5 digest of data.

    Args:
        data: Bytes to fingerprint

    Returns:
        32-character lowercase hex string
    """
    return hashlib.md5(data).hexdigest()


def compute_file_digest(
    file_path: Union[str, Path],
    piece_size: int = DIGEST_PIECE_SIZE_BYTES,
) -> str:
    """
    Compute the MD5 digest of a file without loading it whole.

    Args:
        file_path: File to fingerprint
        piece_size: Read size per iteration

    Returns:
        Same value compute_digest() gives for the file's bytes

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the file cannot be read
    """
    calculator = IncrementalDigest()
    with open(file_path, 'rb') as f:
        while True:
            piece = f.read(piece_size)
            if not piece:
                break
            calculator.update(piece)
    return calculator.finalize()


def verify_digest(expected: str, actual: str) -> bool:
    """Compare two hex digests."""
    return expected.lower() == actual.lower()


class IncrementalDigest:
    """
    Calculate an MD5 digest incrementally for data that arrives in pieces.

    Usage:
        calculator = IncrementalDigest()
        calculator.update(piece1)
        calculator.update(piece2)
        digest = calculator.finalize()
    """

    def __init__(self):
        self._hasher = hashlib.md5()
        self._finalized = False

    def update(self, data: bytes) -> None:
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)

    def finalize(self) -> str:
        self._finalized = True
        return self._hasher.hexdigest()

    def reset(self) -> None:
        self._hasher = hashlib.md5()
        self._finalized = False
