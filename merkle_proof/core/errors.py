"""Exceptions raised by the Merkle tree core."""


class MerkleTreeError(Exception):
    """Base class for Merkle tree errors."""

    pass


class InvalidInputError(MerkleTreeError, ValueError):
    """Raised when a tree cannot be built from, or queried with, the given items."""

    pass


class ProofFormatError(MerkleTreeError, ValueError):
    """Raised when a serialized proof document cannot be decoded."""

    pass
