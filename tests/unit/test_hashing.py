"""Unit tests for digests and item encoding."""

import hashlib
from datetime import datetime

import pytest
from pydantic import BaseModel

from merkle_proof import InvalidInputError, hash_bytes, hash_item, hex_digest, to_bytes
from merkle_proof.core.hashing import digest_size


class Record(BaseModel):
    name: str
    size: int


class Blob:
    def __bytes__(self) -> bytes:
        return b"blob"


def test_sha256_is_default() -> None:
    """Test that the default digest is SHA-256."""
    assert hash_bytes(b"a") == hashlib.sha256(b"a").digest()
    assert hex_digest(b"a") == "ca978112ca1bbdcafac231b39a23dc4da786eff8147c4e72b9807785afee48bb"


def test_digest_length_is_fixed() -> None:
    """Test that output length does not depend on input length."""
    assert len(hash_bytes(b"")) == len(hash_bytes(b"x" * 10_000)) == digest_size() == 32
    assert len(hash_bytes(b"a", "sha512")) == digest_size("sha512") == 64


def test_unknown_algorithm() -> None:
    """Test that unsupported algorithms are rejected."""
    with pytest.raises(InvalidInputError):
        hash_bytes(b"a", "md5")


def test_to_bytes_conversions() -> None:
    """Test the supported item conversions."""
    assert to_bytes(b"raw") == b"raw"
    assert to_bytes(bytearray(b"raw")) == b"raw"
    assert to_bytes(memoryview(b"raw")) == b"raw"
    assert to_bytes("héllo") == "héllo".encode("utf-8")
    assert to_bytes(Blob()) == b"blob"
    assert to_bytes(7) == b"\xffint\x007"
    assert to_bytes(None) == b"\xffNoneType\x00null"
    assert to_bytes({"b": 2, "a": [1, True]}) == b'\xffdict\x00{"a":[1,true],"b":2}'
    assert to_bytes(Record(name="x", size=3)) == b'\xffRecord\x00{"name":"x","size":3}'


def test_to_bytes_rejects_unknown_types() -> None:
    """Test that items without a byte form raise InvalidInputError."""
    with pytest.raises(InvalidInputError):
        to_bytes(object())
    with pytest.raises(InvalidInputError):
        to_bytes({"value": float("nan")})
    with pytest.raises(InvalidInputError):
        to_bytes({1: "non-string key"})


def test_hash_item_matches_text_hash() -> None:
    """Test that text items hash their UTF-8 bytes."""
    assert hash_item("c") == hashlib.sha256(b"c").digest()
    assert hash_item(datetime(2024, 1, 2)) != hash_item("2024-01-02T00:00:00")


class Broken:
    def __bytes__(self) -> bytes:
        raise ValueError("no byte form")


def test_failing_bytes_conversion_is_invalid_input() -> None:
    """Test that errors raised by __bytes__ surface as InvalidInputError."""
    with pytest.raises(InvalidInputError):
        to_bytes(Broken())


@pytest.mark.parametrize("left, right", [
    (1, "1"),
    (1, 1.0),
    (1, True),
    (None, "null"),
    (True, "true"),
    ({"a": 1}, '{"a":1}'),
    ([1, 2], (1, 2)),
])
def test_values_of_different_types_hash_apart(left, right) -> None:
    """Test that values of different types never share a leaf digest."""
    assert hash_item(left) != hash_item(right)
