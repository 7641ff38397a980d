"""
merkle-proof Command Line Interface

Provides commands for building trees, printing them, and producing and
checking inclusion proofs. Items given on the command line are hashed as
UTF-8 text.
"""

import logging
import sys
from typing import List, Optional, Tuple

import click
from pydantic import ValidationError

from merkle_proof.core.errors import MerkleTreeError, ProofFormatError
from merkle_proof.core.hashing import SUPPORTED_ALGORITHMS
from merkle_proof.core.merkle import MerkleTree, MerkleTreeProof, verify_proof_document
from merkle_proof.core.models import TreeSettings
from merkle_proof.visualize import render_tree, short_hash, strip_colors

logger = logging.getLogger(__name__)

# Configure click
CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])

DEMO_ITEMS = ["a", "b", "c", "d", "e", "f", "g", "h"]


# Helper functions
def build_tree(settings: TreeSettings, items: Tuple[str, ...]) -> MerkleTree:
    """Build a tree, exiting with an error message on bad input."""
    try:
        return MerkleTree.build(list(items), settings=settings)
    except MerkleTreeError as e:
        click.echo(f"Error building tree: {e}", err=True)
        sys.exit(1)


def load_proof(file_path: str) -> MerkleTreeProof:
    """Load a proof document from a JSON file."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return MerkleTreeProof.from_json(f.read())
    except (OSError, ProofFormatError) as e:
        click.echo(f"Error loading proof: {e}", err=True)
        sys.exit(1)


def save_proof(proof: MerkleTreeProof, file_path: str) -> None:
    """Save a proof document to a JSON file."""
    try:
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(proof.model_dump_json(indent=2))
        click.echo(f"Proof saved to {file_path}")
    except OSError as e:
        click.echo(f"Error saving proof: {e}", err=True)
        sys.exit(1)


# Command group
@click.group(context_settings=CONTEXT_SETTINGS)
@click.option('--algorithm', '-a', type=click.Choice(SUPPORTED_ALGORITHMS),
              help='Hash algorithm (default: $MERKLE_HASH_ALGORITHM or sha256)')
@click.option('--hash-length', type=int,
              help='Hex characters shown per abbreviated digest (default: 8)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx: click.Context, algorithm: Optional[str], hash_length: Optional[int], verbose: bool):
    """merkle-proof - Merkle trees and inclusion proofs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        settings = TreeSettings.from_env()
        overrides = {}
        if algorithm:
            overrides['hash_algorithm'] = algorithm
        if hash_length is not None:
            overrides['display_hash_length'] = hash_length
        if overrides:
            settings = TreeSettings(**{**settings.model_dump(), **overrides})
    except ValidationError as e:
        click.echo(f"Invalid settings: {e}", err=True)
        sys.exit(1)

    logger.debug("Using settings %s", settings)
    ctx.obj = settings


@cli.command()
@click.argument('items', nargs=-1, required=True)
@click.pass_obj
def root(settings: TreeSettings, items: Tuple[str, ...]):
    """Print the root digest of a tree built from ITEMS."""
    tree = build_tree(settings, items)
    click.echo(tree.root_hex)


@cli.command()
@click.argument('items', nargs=-1, required=True)
@click.option('--color/--no-color', default=False, help='Highlight leaves with ANSI colors')
@click.option('--output', '-o', help='Output file (default: print to console)')
@click.pass_obj
def show(settings: TreeSettings, items: Tuple[str, ...], color: bool, output: Optional[str]):
    """Print the tree built from ITEMS."""
    tree = build_tree(settings, items)
    rendered = render_tree(tree, hash_length=settings.display_hash_length, color=color)

    if output:
        try:
            with open(output, 'w', encoding='utf-8') as f:
                # No ANSI codes in files
                f.write(strip_colors(rendered) + '\n')
        except OSError as e:
            click.echo(f"Error writing tree: {e}", err=True)
            sys.exit(1)
        click.echo(f"Tree saved to {output}")
    else:
        click.echo(rendered)


@cli.command()
@click.argument('item')
@click.option('--item', '-i', 'items', multiple=True, required=True, help='Tree item (repeat for each leaf)')
@click.option('--output', '-o', help='Output file for the proof (default: print to console)')
@click.pass_obj
def prove(settings: TreeSettings, item: str, items: List[str], output: Optional[str]):
    """Produce an inclusion proof for ITEM."""
    tree = build_tree(settings, tuple(items))
    proof = tree.proof_document(item)
    if proof is None:
        click.echo(f"Item {item!r} is not in the tree", err=True)
        sys.exit(1)

    if output:
        save_proof(proof, output)
    else:
        click.echo(proof.model_dump_json(indent=2))


@cli.command()
@click.argument('item')
@click.argument('proof_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--root', 'expected_root', help='Expected root digest (hex)')
def verify(item: str, proof_file: str, expected_root: Optional[str]):
    """Verify that PROOF_FILE proves ITEM is in the tree."""
    proof = load_proof(proof_file)

    if expected_root and proof.root_hash.lower() != expected_root.lower():
        click.echo(f"Root mismatch: expected {expected_root}, proof has {proof.root_hash}", err=True)
        sys.exit(1)

    if verify_proof_document(item, proof):
        click.echo("✅ Proof is valid")
        sys.exit(0)
    else:
        click.echo("❌ Invalid proof", err=True)
        sys.exit(1)


@cli.command()
@click.option('--color/--no-color', default=False, help='Highlight leaves with ANSI colors')
@click.pass_obj
def demo(settings: TreeSettings, color: bool):
    """Build a tree over a..h, prove 'c' and look up 'x'."""
    tree = build_tree(settings, tuple(DEMO_ITEMS))
    click.echo(render_tree(tree, hash_length=settings.display_hash_length, color=color))
    click.echo("")

    proof = tree.get_proof("c")
    if proof is not None:
        path = [f"{step.side.value}:{short_hash(step.digest.hex(), settings.display_hash_length)}" for step in proof]
        click.echo(f"Inclusion proof for 'c': {path}")
        click.echo(f"Is the proof valid? {tree.verify('c', proof)}")
    else:
        click.echo("Data 'c' not found in the tree")

    if tree.get_proof("x") is None:
        click.echo("Data 'x' is not in the tree (as expected)")
    else:
        click.echo("Data 'x' unexpectedly found in the tree")


# Main entry point
if __name__ == '__main__':
    cli()
