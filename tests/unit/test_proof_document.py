"""Unit tests for hex-encoded proof documents."""

import pytest

from merkle_proof import MerkleTreeProof, ProofFormatError, Side, build, verify_proof_document

LETTERS = ["a", "b", "c", "d", "e", "f", "g", "h"]


def test_document_round_trip() -> None:
    """Test that a proof survives JSON exchange and verifies without the tree."""
    tree = build(LETTERS)
    document = tree.proof_document("f")

    assert document.root_hash == tree.root_hex
    assert document.algorithm == "sha256"
    assert [step.side for step in document.steps] == [Side.LEFT, Side.RIGHT, Side.LEFT]

    parsed = MerkleTreeProof.from_json(document.model_dump_json())
    assert parsed == document
    assert parsed.to_steps() == tree.get_proof("f")
    assert verify_proof_document("f", parsed)


def test_document_for_missing_item() -> None:
    """Test that absent items have no document."""
    assert build(LETTERS).proof_document("x") is None


def test_document_rejects_other_item() -> None:
    """Test that a document only proves the item it was made for."""
    document = build(LETTERS).proof_document("c")
    assert not verify_proof_document("d", document)


def test_document_with_wrong_root() -> None:
    """Test that a document checked against another tree's root fails."""
    document = build(LETTERS).proof_document("c")
    other = build(LETTERS[:4])
    forged = document.model_copy(update={"root_hash": other.root_hex})
    assert not verify_proof_document("c", forged)


def test_bad_hex_is_reported() -> None:
    """Test that undecodable hex raises ProofFormatError but never fails verification loudly."""
    document = build(LETTERS).proof_document("c")
    broken = document.model_copy(update={"steps": [document.steps[0].model_copy(update={"hash": "zz"})]})

    with pytest.raises(ProofFormatError):
        broken.to_steps()
    assert not verify_proof_document("c", broken)


def test_invalid_json_raises_proof_format_error() -> None:
    """Test that malformed documents raise ProofFormatError."""
    with pytest.raises(ProofFormatError):
        MerkleTreeProof.from_json('{"root_hash": "00"}')
    with pytest.raises(ProofFormatError):
        MerkleTreeProof.from_json("not json")
