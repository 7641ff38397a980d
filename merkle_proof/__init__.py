"""
merkle-proof - Binary Merkle trees with inclusion proofs.

This package builds a Merkle tree over an ordered sequence of items, produces
inclusion proofs for individual items, and verifies those proofs against a
root digest.
"""

from importlib.metadata import PackageNotFoundError, version

__version__ = "0.1.0"

try:
    __version__ = version("merkle-proof")
except PackageNotFoundError:
    pass

# Core components
from merkle_proof.core.canonicalization import canonicalize, canonical_json_dumps
from merkle_proof.core.errors import InvalidInputError, MerkleTreeError, ProofFormatError
from merkle_proof.core.hashing import hash_bytes, hash_item, hex_digest, to_bytes
from merkle_proof.core.merkle import (
    MerkleTree,
    MerkleTreeProof,
    Node,
    ProofStep,
    Side,
    build,
    verify_proof,
    verify_proof_document,
)
from merkle_proof.core.models import TreeSettings

__all__ = [
    # Core functionality
    "build",
    "verify_proof",
    "verify_proof_document",
    "MerkleTree",
    "MerkleTreeProof",
    "Node",
    "ProofStep",
    "Side",
    "TreeSettings",
    # Digests
    "hash_bytes",
    "hash_item",
    "hex_digest",
    "to_bytes",
    "canonicalize",
    "canonical_json_dumps",
    # Errors
    "MerkleTreeError",
    "InvalidInputError",
    "ProofFormatError",
]
