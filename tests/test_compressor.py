"""Tests for payload compression."""

import pytest

from chunkstore.compressor import compress, compress_file, decompress
from chunkstore.exceptions import CorruptPayloadError


def test_compress_round_trip():
    data = b'The quick brown fox jumps over the lazy dog. ' * 100
    assert decompress(compress(data)) == data


def test_compress_is_deterministic():
    data = bytes(range(256)) * 10
    assert compress(data) == compress(data)


def test_compress_shrinks_repetitive_data():
    data = b'abcdefghijklmnopqrstuvwxyz123456' * 1000
    assert len(compress(data)) < len(data) // 10


def test_compress_empty_input():
    assert decompress(compress(b'')) == b''


def test_compress_file_matches_compress(tmp_path):
    file_path = tmp_path / 'data.txt'
    file_path.write_bytes(b'file contents ' * 50)

    assert compress_file(file_path) == compress(file_path.read_bytes())


def test_decompress_foreign_bytes_raises():
    with pytest.raises(CorruptPayloadError):
        decompress(b'this is not a zlib stream')


def test_decompress_truncated_stream_raises():
    payload = compress(bytes(range(256)) * 50)

    with pytest.raises(CorruptPayloadError):
        decompress(payload[:len(payload) // 2])


def test_decompress_trailing_bytes_raises():
    payload = compress(b'payload')

    with pytest.raises(CorruptPayloadError):
        decompress(payload + b'extra')
