"""
merkle-proof Command Line Interface.

This package provides command-line tools for building Merkle trees, printing
them, and creating and verifying inclusion proofs.
"""

# Import the main CLI entry point
from .main import cli

__all__ = [
    'cli',
]
