"""
Text rendering of a Merkle tree.

The renderer only reads each node's digest and its two children, so it works
on any object shaped like :class:`merkle_proof.core.merkle.Node`.
"""

import re
from typing import List

from merkle_proof.core.merkle import MerkleTree, Node

ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;]*[mK]')


# ANSI color codes for terminal output
class Colors:
    HEADER = '\033[95m'
    OKGREEN = '\033[92m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def short_hash(hash_str: str, length: int = 8) -> str:
    """Shorten a hex digest to ``head...tail`` for display."""
    if not hash_str:
        return ""

    if len(hash_str) <= length + 2:
        return hash_str

    return f"{hash_str[:length // 2]}...{hash_str[-(length - length // 2):]}"


def strip_colors(text: str) -> str:
    """Remove ANSI color codes, e.g. before writing to a file."""
    return ANSI_ESCAPE.sub('', text)


class TreeRenderer:
    """Renders a tree as indented branches, left child above right child."""

    def __init__(self, hash_length: int = 8, color: bool = False):
        self.hash_length = hash_length
        self.color = color

    def _paint(self, text: str, code: str) -> str:
        if not self.color:
            return text
        return f"{code}{text}{Colors.ENDC}"

    def render_node(self, node: Node) -> List[str]:
        lines: List[str] = []
        # (node, prefix, is_left) in pre-order
        stack = [(node, "", False)]
        while stack:
            current, prefix, is_left = stack.pop()
            label = short_hash(current.hash.hex(), self.hash_length)
            if current.is_leaf():
                label = self._paint(label, Colors.OKGREEN)
            lines.append(f"{prefix}{'├── ' if is_left else '└── '}{label}")

            child_prefix = prefix + ("│   " if is_left else "    ")
            if current.right is not None:
                stack.append((current.right, child_prefix, False))
            if current.left is not None:
                stack.append((current.left, child_prefix, True))
        return lines

    def render(self, tree: MerkleTree, header: bool = True) -> str:
        lines = []
        if header:
            lines.append(self._paint("Merkle Tree", Colors.HEADER + Colors.BOLD))
            lines.append(f"Algorithm: {tree.algorithm}")
            lines.append(f"Items: {tree.leaf_count}")
            lines.append(f"Depth: {tree.depth}")
            lines.append(f"Root: {tree.root_hex}")
            lines.append("")
        lines.extend(self.render_node(tree.root))
        return '\n'.join(lines)


def render_tree(tree: MerkleTree, hash_length: int = 8, color: bool = False, header: bool = True) -> str:
    """Render ``tree`` as text."""
    return TreeRenderer(hash_length=hash_length, color=color).render(tree, header=header)
