"""
Merkle Tree Implementation
Deterministic tree construction, proof generation and integrity checking.

This module provides:
- Tree construction from an ordered list of records
- Promotion rule for an odd number of nodes at any level
- Inclusion proof generation for a record (or its leaf digest)
- Structural integrity checking of every internal node

Commitment Rules:
1. Leaf hashing: leaf = keccak256(record)
2. Parent hashing: parent = keccak256(left + right)
3. Odd count: the last node of a level is promoted unchanged to the next
   level (never duplicated, never combined with itself)
4. Empty input: rejected with EmptyInputException
5. Single record: root = the leaf itself

Leaf Index:
- Maps leaf digest -> original record bytes, built once at construction
- Records that repeat collapse into one entry, so lookup is by digest and
  a proof for a repeated record resolves to its left-most occurrence
- Never serialized; trees loaded from a document have an empty index

Determinism Notes:
- Tree shape depends only on record order and count
- This module never sorts records; it trusts input order
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from merkle_core.crypto.hashing import Digest, combine, hash_leaf, to_hex
from merkle_core.merkle.merkle_node import MerkleNode
from merkle_core.merkle.proof import MerkleProof, ProofStep
from merkle_core.schemas.errors import (
    EmptyInputException,
    ErrorCodes,
    RecordNotFoundException,
)
from merkle_core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


class MerkleTree:
    """
    A Merkle tree built once from a fixed list of records.

    The tree is immutable after construction: nodes are frozen and the
    leaf index is exposed read-only, so one tree can serve concurrent
    proof generation.

    Example:
        >>> tree = MerkleTree.from_records([b"a", b"b", b"c"])
        >>> proof = tree.generate_proof(b"c")
        >>> proof.verify(tree.root_hash)
        True
    """

    def __init__(
        self,
        root: MerkleNode,
        leaves: Mapping[Digest, bytes] | None = None,
        leaf_count: int = 0,
    ) -> None:
        self._root = root
        self._leaves = MappingProxyType(dict(leaves or {}))
        self._leaf_count = leaf_count

    @classmethod
    def from_records(cls, records: Iterable[bytes]) -> MerkleTree:
        """Build a tree from records. See build_merkle_tree()."""
        return build_merkle_tree(records)

    @property
    def root(self) -> MerkleNode:
        return self._root

    @property
    def root_hash(self) -> Digest:
        """The root digest, a commitment to every record and its order."""
        return self._root.hash

    @property
    def leaves(self) -> Mapping[Digest, bytes]:
        """Read-only leaf index: leaf digest -> record."""
        return self._leaves

    @property
    def leaf_count(self) -> int:
        """Records the tree was built from (0 if loaded from a document)."""
        return self._leaf_count

    def contains(self, record: bytes) -> bool:
        return hash_leaf(record) in self._leaves

    def generate_proof(self, record: bytes) -> MerkleProof:
        return generate_proof(self, record)

    def generate_proof_for_leaf(self, leaf_hash: Digest) -> MerkleProof:
        return generate_proof_for_leaf(self, leaf_hash)

    def verify_integrity(self) -> bool:
        return check_tree_integrity(self)

    def inspect_integrity(self) -> VerificationResult:
        return inspect_tree_integrity(self)

    def traverse_in_order(self, func: Callable[[MerkleNode], None]) -> None:
        """Apply func to every node in-order (left, node, right)."""
        for node in self._root.iter_in_order():
            func(node)

    def render(self) -> str:
        return self._root.render()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"MerkleTree(root_hash={to_hex(self.root_hash)!r}, "
            f"leaf_count={self._leaf_count})"
        )


def build_merkle_tree(records: Iterable[bytes]) -> MerkleTree:
    """
    Build a Merkle tree from an ordered sequence of records.

    Algorithm:
    1. Hash every record into a leaf node, filling the leaf index
    2. Reduce level by level:
       - Pair adjacent nodes left-to-right into internal nodes
       - If one node is left over, promote it unchanged
    3. Stop when a single node remains; that node is the root

    Example: [a, b, c] -> [parent(a,b), c] -> [parent(parent(a,b), c)]

    Args:
        records: Ordered record bytes. Order matters and is preserved.

    Returns:
        The built MerkleTree

    Raises:
        EmptyInputException: If records is empty
    """
    records = [bytes(record) for record in records]
    if not records:
        raise EmptyInputException()

    logger.info(f"Building Merkle Tree with {len(records)} leaves.")

    leaf_nodes: list[MerkleNode] = []
    leaves: dict[Digest, bytes] = {}
    for record in records:
        leaf = MerkleNode.new_leaf(record)
        leaves.setdefault(leaf.hash, record)
        leaf_nodes.append(leaf)

    if len(leaves) < len(records):
        logger.debug(
            f"{len(records) - len(leaves)} repeated record(s) share a leaf index entry"
        )

    root = _reduce_levels(leaf_nodes)
    return MerkleTree(root, leaves, leaf_count=len(records))


def _reduce_levels(nodes: list[MerkleNode]) -> MerkleNode:
    """Combine levels until a single root node remains."""
    current_level = nodes

    while len(current_level) > 1:
        logger.debug(f"Building tree level with {len(current_level)} nodes.")

        next_level: list[MerkleNode] = []
        for i in range(0, len(current_level), 2):
            if i + 1 < len(current_level):
                next_level.append(
                    MerkleNode.new_internal(current_level[i], current_level[i + 1])
                )
            else:
                # Odd node, promote to next level
                logger.info(
                    f"Promoting node with hash {to_hex(current_level[i].hash)} "
                    f"to next level due to odd count."
                )
                next_level.append(current_level[i])

        current_level = next_level

    return current_level[0]


def find_proof_steps(root: MerkleNode, target: Digest) -> list[ProofStep] | None:
    """
    Search the tree for a node whose digest equals target.

    Depth-first, left subtree before right, with an explicit stack. Each
    stack entry carries the steps collected on the way down; descending
    left records the right sibling on the right, descending right records
    the left sibling on the left.

    Args:
        root: Node to search from
        target: Digest to locate

    Returns:
        Steps ordered lowest level first, or None if target is absent
    """
    stack: list[tuple[MerkleNode, tuple[ProofStep, ...]]] = [(root, ())]

    while stack:
        node, path = stack.pop()
        if node.hash == target:
            return list(reversed(path))

        if node.left is not None and node.right is not None:
            stack.append(
                (node.right, path + (ProofStep.sibling_on_left(node.left.hash),))
            )
            stack.append(
                (node.left, path + (ProofStep.sibling_on_right(node.right.hash),))
            )

    return None


def generate_proof(tree: MerkleTree, record: bytes) -> MerkleProof:
    """
    Generate an inclusion proof for a record.

    Args:
        tree: Tree containing the record
        record: Raw record bytes

    Returns:
        MerkleProof for the record's leaf

    Raises:
        RecordNotFoundException: If the record's leaf digest is not in the
            tree's leaf index
    """
    return generate_proof_for_leaf(tree, hash_leaf(record))


def generate_proof_for_leaf(tree: MerkleTree, leaf_hash: Digest) -> MerkleProof:
    """
    Generate an inclusion proof for a leaf digest.

    Raises:
        RecordNotFoundException: If leaf_hash is not in the leaf index
    """
    if leaf_hash not in tree.leaves:
        raise RecordNotFoundException(leaf_hash=to_hex(leaf_hash))

    steps = find_proof_steps(tree.root, leaf_hash)
    if steps is None:
        raise RecordNotFoundException(
            "Leaf is indexed but not reachable from the root",
            leaf_hash=to_hex(leaf_hash),
        )

    logger.debug(f"Generated proof with {len(steps)} steps for leaf {to_hex(leaf_hash)}")
    return MerkleProof(leaf_hash=leaf_hash, steps=tuple(steps))


def _root_of(tree: MerkleTree | MerkleNode) -> MerkleNode:
    return tree.root if isinstance(tree, MerkleTree) else tree


def check_tree_integrity(tree: MerkleTree | MerkleNode) -> bool:
    """
    Check that every internal node's digest matches its children.

    Leaves are taken as given: original records are not re-hashed, so this
    detects tampering with the internal structure, not forged leaves.

    Args:
        tree: Tree (or subtree root) to check

    Returns:
        True only if every internal node is self-consistent
    """
    for _, node in _root_of(tree).iter_preorder():
        if node.left is not None and node.right is not None:
            if combine(node.left.hash, node.right.hash) != node.hash:
                return False
    return True


def inspect_tree_integrity(tree: MerkleTree | MerkleNode) -> VerificationResult:
    """
    Check every internal node and report each inconsistent one.

    Unlike check_tree_integrity(), this does not stop at the first
    mismatch. Each failed check names the node's path from the root
    ("" for the root, then "L"/"R" per level).

    Returns:
        VerificationResult with one failed check per mismatching node, or a
        single passed check summarizing the nodes examined
    """
    result = VerificationResult.success()
    internal_nodes = 0

    for path, node in _root_of(tree).iter_preorder():
        if node.left is None or node.right is None:
            continue
        internal_nodes += 1
        expected = combine(node.left.hash, node.right.hash)
        if expected != node.hash:
            result.add_check(
                CheckResult.failed(
                    check_id="node_hash",
                    message=f"Node hash mismatch at path '{path or 'root'}'",
                    details={
                        "code": ErrorCodes.NODE_HASH_MISMATCH,
                        "path": path,
                        "stored": to_hex(node.hash),
                        "expected": to_hex(expected),
                    },
                )
            )

    if result.ok:
        result.add_check(
            CheckResult.passed(
                check_id="node_hash",
                message=f"All {internal_nodes} internal node hashes are consistent",
                details={"internal_nodes": internal_nodes},
            )
        )
    else:
        logger.warning(f"Tree integrity check found {result.error_count} inconsistent node(s)")

    return result


__all__ = [
    "MerkleTree",
    "build_merkle_tree",
    "find_proof_steps",
    "generate_proof",
    "generate_proof_for_leaf",
    "check_tree_integrity",
    "inspect_tree_integrity",
]
