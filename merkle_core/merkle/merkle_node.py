"""
Merkle Node
A single vertex of the tree: a leaf wrapping one record digest, or an
internal node owning exactly two children.

Node shapes:
- Leaf: hash = keccak256(record), no children
- Internal: hash = keccak256(left.hash + right.hash), both children present
- A node with exactly one child is rejected at construction

Nodes are frozen so a built tree can be shared read-only. Traversal helpers
use explicit stacks, so tree depth never reaches the interpreter's
recursion limit.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from merkle_core.crypto.hashing import Digest, combine, ensure_digest, hash_leaf, to_hex
from merkle_core.schemas.errors import InvalidNodeException


@dataclass(frozen=True)
class MerkleNode:
    """
    A node in the Merkle tree.

    Attributes:
        hash: 32-byte commitment of this node
        left: Left child, None for a leaf
        right: Right child, None for a leaf
    """
    hash: Digest
    left: MerkleNode | None = None
    right: MerkleNode | None = None

    def __post_init__(self) -> None:
        """Validate node shape."""
        ensure_digest(self.hash)
        if (self.left is None) != (self.right is None):
            raise InvalidNodeException(
                "Merkle node must have both children or none",
                details={"hash": to_hex(self.hash)},
            )

    @classmethod
    def new_leaf(cls, record: bytes) -> MerkleNode:
        """Create a leaf node from raw record bytes."""
        return cls(hash=hash_leaf(record))

    @classmethod
    def new_internal(cls, left: MerkleNode, right: MerkleNode) -> MerkleNode:
        """Create an internal node owning both children."""
        return cls(hash=combine(left.hash, right.hash), left=left, right=right)

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    def children(self) -> tuple[MerkleNode, MerkleNode]:
        """Return (left, right); only valid on internal nodes."""
        if self.left is None or self.right is None:
            raise InvalidNodeException(
                "Leaf node has no children",
                details={"hash": to_hex(self.hash)},
            )
        return self.left, self.right

    def iter_preorder(self) -> Iterator[tuple[str, MerkleNode]]:
        """
        Yield (path, node) in pre-order, left subtree before right.

        The path spells the route from this node: "" for itself, then one
        "L" or "R" per level descended.
        """
        stack: list[tuple[str, MerkleNode]] = [("", self)]
        while stack:
            path, node = stack.pop()
            yield path, node
            if node.left is not None and node.right is not None:
                # Right pushed first so the left subtree is visited first
                stack.append((path + "R", node.right))
                stack.append((path + "L", node.left))

    def iter_in_order(self) -> Iterator[MerkleNode]:
        """Yield nodes in-order: left subtree, node, right subtree."""
        stack: list[MerkleNode] = []
        node: MerkleNode | None = self
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def height(self) -> int:
        """Number of levels below this node (0 for a leaf)."""
        return max(len(path) for path, _ in self.iter_preorder())

    def render(self) -> str:
        """Render the subtree, one "- <hex>" line per node, two spaces per level."""
        lines = [
            f"{'  ' * len(path)}- {to_hex(node.hash)}"
            for path, node in self.iter_preorder()
        ]
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()


__all__ = [
    "MerkleNode",
]
