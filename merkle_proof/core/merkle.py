"""
Merkle Tree implementation with oriented inclusion proofs.

Leaf digests are ``H(item_bytes)`` and internal digests are
``H(left.hash || right.hash)``. Any level with an odd number of entries has
its last entry repeated before pairing, the leaf level included, so a single
item produces a root of ``H(H(item) || H(item))``.
"""

import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from merkle_proof.core.errors import InvalidInputError, ProofFormatError
from merkle_proof.core.hashing import DEFAULT_ALGORITHM, hash_bytes, hash_item
from merkle_proof.core.models import HashAlgorithm, TreeSettings

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """A node in the Merkle tree."""
    hash: bytes
    left: Optional['Node'] = None
    right: Optional['Node'] = None

    def is_leaf(self) -> bool:
        """A leaf has no children; internal nodes always have both."""
        return self.left is None and self.right is None

    @property
    def hex_hash(self) -> str:
        return self.hash.hex()


class Side(str, Enum):
    """Position of a proof sibling relative to the digest being rebuilt."""
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    """One sibling digest on an authentication path."""
    digest: bytes
    side: Side


def _pad_to_even(entries: list) -> list:
    """Repeat the last entry of an odd-length level in place."""
    if len(entries) % 2 != 0:
        entries.append(entries[-1])
    return entries


class MerkleTree:
    """
    An immutable binary Merkle tree over an ordered sequence of items.

    Trees are created with :meth:`build`. The leaf set cannot change after
    construction; a different item sequence needs a new tree.
    """

    def __init__(self, root: Node, leaf_count: int, algorithm: HashAlgorithm = DEFAULT_ALGORITHM):
        self.root = root
        self.leaf_count = leaf_count
        self.algorithm = algorithm

    @classmethod
    def build(cls, items: Iterable[Any], settings: Optional[TreeSettings] = None) -> 'MerkleTree':
        """
        Build a tree from an ordered sequence of items.

        Args:
            items: The leaf items, in order. Each must be convertible to bytes.
            settings: Tree settings; defaults to SHA-256.

        Returns:
            The built tree.

        Raises:
            InvalidInputError: If ``items`` is not iterable, is empty, or an
                item has no byte form.
        """
        if isinstance(items, (str, bytes, bytearray)):
            raise InvalidInputError("Expected a sequence of items, got a single string or bytes value")
        try:
            items = iter(items)
        except TypeError as e:
            raise InvalidInputError(f"Expected a sequence of items, got {type(items).__name__}") from e

        algorithm = (settings or TreeSettings()).hash_algorithm
        nodes = [Node(hash=hash_item(item, algorithm)) for item in items]
        if not nodes:
            raise InvalidInputError("Cannot build a Merkle tree from an empty item sequence")

        leaf_count = len(nodes)
        _pad_to_even(nodes)

        # Build the tree from the leaves up
        while len(nodes) > 1:
            _pad_to_even(nodes)
            nodes = [
                Node(hash=hash_bytes(left.hash + right.hash, algorithm), left=left, right=right)
                for left, right in zip(nodes[0::2], nodes[1::2])
            ]

        tree = cls(nodes[0], leaf_count, algorithm)
        logger.debug(
            "Built %s Merkle tree: %d items, depth %d, root %s",
            algorithm, leaf_count, tree.depth, tree.root_hex,
        )
        return tree

    @property
    def root_hash(self) -> bytes:
        """Raw root digest."""
        return self.root.hash

    @property
    def root_hex(self) -> str:
        return self.root.hash.hex()

    @property
    def depth(self) -> int:
        """Number of edges between the root and any leaf."""
        depth = 0
        node = self.root
        while not node.is_leaf():
            node = node.left
            depth += 1
        return depth

    def leaves(self) -> Iterator[Node]:
        """Yield leaf nodes left to right, padding duplicates included."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.is_leaf():
                yield node
            else:
                stack.append(node.right)
                stack.append(node.left)

    def get_proof(self, item: Any) -> Optional[List[ProofStep]]:
        """
        Generate an inclusion proof for an item.

        The search is left-first, so for an item that occurs more than once
        the proof points at its leftmost leaf.

        Args:
            item: The item to prove.

        Returns:
            Sibling steps from the leaf's sibling up to the level below the
            root, or None if no leaf matches the item.

        Raises:
            InvalidInputError: If the item has no byte form.
        """
        target = hash_item(item, self.algorithm)
        proof: List[ProofStep] = []
        if self._collect_path(self.root, target, proof):
            return proof

        logger.debug("No leaf with digest %s in tree %s", target.hex(), self.root_hex)
        return None

    @classmethod
    def _collect_path(cls, node: Node, target: bytes, proof: List[ProofStep]) -> bool:
        """Append sibling steps while unwinding from the matching leaf."""
        if node.is_leaf():
            return node.hash == target

        if cls._collect_path(node.left, target, proof):
            proof.append(ProofStep(digest=node.right.hash, side=Side.RIGHT))
            return True

        # A padded pair holds the same node twice, nothing new on the right
        if node.right is not node.left and cls._collect_path(node.right, target, proof):
            proof.append(ProofStep(digest=node.left.hash, side=Side.LEFT))
            return True

        return False

    def verify(self, item: Any, proof: Sequence[ProofStep]) -> bool:
        """Check that ``proof`` links ``item`` to this tree's root."""
        return verify_proof(self.root.hash, item, proof, algorithm=self.algorithm)

    def proof_document(self, item: Any) -> Optional['MerkleTreeProof']:
        """Inclusion proof for ``item`` in hex form, or None if it is absent."""
        steps = self.get_proof(item)
        if steps is None:
            return None
        return MerkleTreeProof(
            algorithm=self.algorithm,
            root_hash=self.root_hex,
            leaf_hash=hash_item(item, self.algorithm).hex(),
            steps=[ProofStepModel(hash=step.digest.hex(), side=step.side) for step in steps],
        )


def build(items: Iterable[Any], settings: Optional[TreeSettings] = None) -> MerkleTree:
    """Build a Merkle tree from ``items``."""
    return MerkleTree.build(items, settings=settings)


def verify_proof(
    root_hash: bytes,
    item: Any,
    proof: Sequence[ProofStep],
    algorithm: str = DEFAULT_ALGORITHM
) -> bool:
    """
    Verify an inclusion proof against a root digest.

    Only the root digest is needed, not the tree. Each step is folded as
    ``H(sibling || current)`` for a left sibling and ``H(current || sibling)``
    for a right sibling.

    Args:
        root_hash: The expected root digest.
        item: The item claimed to be in the tree.
        proof: Sibling steps from the leaf upwards.
        algorithm: Hash algorithm the tree was built with.

    Returns:
        True if the proof reproduces the root, False otherwise. Malformed
        input never raises.
    """
    if not isinstance(root_hash, (bytes, bytearray)) or proof is None:
        return False

    try:
        current = hash_item(item, algorithm)
        steps = list(proof)
    except (InvalidInputError, TypeError) as e:
        logger.debug("Cannot verify proof: %s", e)
        return False

    for step in steps:
        digest = getattr(step, "digest", None)
        if not isinstance(digest, bytes) or len(digest) != len(current):
            logger.debug("Malformed proof step: %r", step)
            return False

        side = getattr(step, "side", None)
        if side == Side.LEFT:
            current = hash_bytes(digest + current, algorithm)
        elif side == Side.RIGHT:
            current = hash_bytes(current + digest, algorithm)
        else:
            logger.debug("Proof step has no valid side: %r", step)
            return False

    return hmac.compare_digest(current, bytes(root_hash))


class ProofStepModel(BaseModel):
    """A proof step with its digest hex-encoded."""
    hash: str
    side: Side


class MerkleTreeProof(BaseModel):
    """An inclusion proof as exchanged between parties (digests in hex)."""
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM
    root_hash: str
    leaf_hash: str
    steps: List[ProofStepModel] = Field(default_factory=list)

    @classmethod
    def from_json(cls, data: str) -> 'MerkleTreeProof':
        """Parse a proof document, raising ProofFormatError if it is invalid."""
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise ProofFormatError(f"Invalid proof document: {e}") from e

    def to_steps(self) -> List[ProofStep]:
        """Decode the hex steps into :class:`ProofStep` values."""
        try:
            return [ProofStep(digest=bytes.fromhex(step.hash), side=step.side) for step in self.steps]
        except ValueError as e:
            raise ProofFormatError(f"Proof step is not valid hex: {e}") from e

    def root_bytes(self) -> bytes:
        try:
            return bytes.fromhex(self.root_hash)
        except ValueError as e:
            raise ProofFormatError(f"Root hash is not valid hex: {e}") from e


def verify_proof_document(item: Any, document: MerkleTreeProof) -> bool:
    """
    Verify a proof document without access to the tree.

    The document's leaf hash must match the item and its steps must rebuild
    the document's root hash.
    """
    try:
        root = document.root_bytes()
        steps = document.to_steps()
        leaf = hash_item(item, document.algorithm)
    except (ProofFormatError, InvalidInputError) as e:
        logger.debug("Rejecting proof document: %s", e)
        return False

    if leaf.hex() != document.leaf_hash.lower():
        logger.debug("Proof document leaf hash does not match item")
        return False

    return verify_proof(root, item, steps, algorithm=document.algorithm)
