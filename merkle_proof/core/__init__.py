"""
Core functionality for merkle-proof.

This package contains the digest function, the Merkle tree builder and the
inclusion proof generation and verification logic.
"""

from .errors import InvalidInputError, MerkleTreeError, ProofFormatError
from .merkle import (
    MerkleTree,
    MerkleTreeProof,
    Node,
    ProofStep,
    ProofStepModel,
    Side,
    build,
    verify_proof,
    verify_proof_document,
)

__all__ = [
    'MerkleTree',
    'MerkleTreeProof',
    'Node',
    'ProofStep',
    'ProofStepModel',
    'Side',
    'build',
    'verify_proof',
    'verify_proof_document',
    'MerkleTreeError',
    'InvalidInputError',
    'ProofFormatError',
]
