"""
Digest primitives for leaves and internal nodes.

Every item placed in a tree goes through :func:`to_bytes` first, so anything
that can be expressed as bytes (raw bytes, text, objects defining
``__bytes__``, JSON-like structures) can be a leaf.
"""

import hashlib
from datetime import date, time
from typing import Any, get_args

from pydantic import BaseModel

from merkle_proof.core.canonicalization import CanonicalizationError, canonicalize
from merkle_proof.core.errors import InvalidInputError
from merkle_proof.core.models import HashAlgorithm

DEFAULT_ALGORITHM = "sha256"
SUPPORTED_ALGORITHMS = get_args(HashAlgorithm)

# Lead byte of structured items, invalid in UTF-8 so no text item shares it
STRUCTURED_ITEM_PREFIX = b"\xff"

# Values hashed through their canonical JSON form
_STRUCTURED_TYPES = (dict, list, tuple, int, float, type(None), date, time)


def _check_algorithm(algorithm: str) -> None:
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise InvalidInputError(
            f"Unsupported hash algorithm: {algorithm!r} "
            f"(expected one of {', '.join(SUPPORTED_ALGORITHMS)})"
        )


def hash_bytes(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """Return the raw digest of ``data``."""
    _check_algorithm(algorithm)
    return hashlib.new(algorithm, data).digest()


def hex_digest(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return the lowercase hex digest of ``data``."""
    return hash_bytes(data, algorithm).hex()


def digest_size(algorithm: str = DEFAULT_ALGORITHM) -> int:
    """Number of bytes produced by ``algorithm``."""
    _check_algorithm(algorithm)
    return hashlib.new(algorithm).digest_size


def to_bytes(item: Any) -> bytes:
    """
    Convert a leaf item to the bytes that get hashed.

    Bytes-like values hash as themselves, text as its UTF-8 encoding and
    objects defining ``__bytes__`` as ``bytes(item)``. Every other supported
    value (numbers, booleans, None, dicts, lists, tuples, dates, pydantic
    models) hashes as ``0xff || type name || 0x00 || canonical JSON``. The
    0xff lead byte never occurs in UTF-8 text and the type name keeps
    ``1``, ``1.0``, ``True`` and ``"1"`` apart.

    Args:
        item: bytes-like, str, an object defining ``__bytes__``, a pydantic
            model, or a JSON-compatible value.

    Returns:
        The byte content of the item.

    Raises:
        InvalidInputError: If the item has no byte representation.
    """
    if isinstance(item, bytes):
        return item
    if isinstance(item, (bytearray, memoryview)):
        return bytes(item)
    if isinstance(item, str):
        return item.encode("utf-8")
    if isinstance(item, (BaseModel,) + _STRUCTURED_TYPES):
        try:
            encoded = canonicalize(item)
        except CanonicalizationError as e:
            raise InvalidInputError(f"Cannot encode item {item!r}: {e}") from e
        tag = type(item).__name__.encode("utf-8")
        return STRUCTURED_ITEM_PREFIX + tag + b"\x00" + encoded
    if hasattr(item, "__bytes__"):
        try:
            return bytes(item)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Cannot convert {type(item).__name__} item to bytes: {e}") from e

    raise InvalidInputError(f"Cannot convert {type(item).__name__} item to bytes: {item!r}")


def hash_item(item: Any, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """Leaf digest of an item."""
    return hash_bytes(to_bytes(item), algorithm)
