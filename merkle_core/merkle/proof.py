"""
Merkle Inclusion Proofs
Proof value types and standalone proof verification.

A proof is a leaf digest plus the ordered sibling digests on the path from
that leaf up to the root. Each step records which side the sibling sits on:

- Left:  sibling is placed before the running digest
         running = keccak256(sibling + running)
- Right: sibling is placed after the running digest
         running = keccak256(running + sibling)

Steps are ordered leaf-to-root and replayed in that order. Verification
never needs the tree: it only consumes the proof and a claimed root.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from merkle_core.crypto.hashing import Digest, combine, ensure_digest
from merkle_core.schemas.errors import InvalidNodeException


class Side(str, Enum):
    """Which side of the running digest a sibling is placed on."""
    LEFT = "Left"
    RIGHT = "Right"


@dataclass(frozen=True)
class ProofStep:
    """
    A single step of an inclusion proof.

    Attributes:
        side: Side the sibling digest is placed on when recombining
        sibling: 32-byte digest of the sibling subtree
    """
    side: Side
    sibling: Digest

    def __post_init__(self) -> None:
        if not isinstance(self.side, Side):
            raise InvalidNodeException(
                f"Proof step side must be a Side, got {self.side!r}",
                details={"side": repr(self.side)},
            )
        ensure_digest(self.sibling)

    @classmethod
    def sibling_on_left(cls, sibling: Digest) -> ProofStep:
        """Sibling digest goes before the running digest."""
        return cls(side=Side.LEFT, sibling=sibling)

    @classmethod
    def sibling_on_right(cls, sibling: Digest) -> ProofStep:
        """Sibling digest goes after the running digest."""
        return cls(side=Side.RIGHT, sibling=sibling)

    def apply(self, running: Digest) -> Digest:
        """Recombine the running digest with this step's sibling."""
        if self.side is Side.LEFT:
            return combine(self.sibling, running)
        return combine(running, self.sibling)


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single leaf.

    The proof is self-contained: it carries no reference to the tree that
    produced it.

    Attributes:
        leaf_hash: Digest of the record being proven
        steps: Sibling steps, lowest level first
    """
    leaf_hash: Digest
    steps: tuple[ProofStep, ...] = ()

    def __post_init__(self) -> None:
        ensure_digest(self.leaf_hash)
        object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def depth(self) -> int:
        """Number of levels between the leaf and the root."""
        return len(self.steps)

    def compute_root(self) -> Digest:
        """Replay the steps against the leaf digest."""
        return compute_root(self)

    def verify(self, root_hash: Digest) -> bool:
        """Verify this proof against a claimed root digest."""
        return verify_merkle_proof(self, root_hash)


def compute_root(proof: MerkleProof) -> Digest:
    """
    Recompute the root digest implied by a proof.

    Algorithm:
    1. running = leaf_hash
    2. For each step in order:
       - Left:  running = combine(sibling, running)
       - Right: running = combine(running, sibling)
    3. Return running

    Args:
        proof: MerkleProof to replay

    Returns:
        32-byte digest the proof commits to
    """
    running = proof.leaf_hash
    for step in proof.steps:
        running = step.apply(running)
    return running


def verify_merkle_proof(proof: MerkleProof, root_hash: Digest) -> bool:
    """
    Verify a Merkle proof against a claimed root.

    A proof that does not establish membership is a normal False result,
    never an exception.

    Args:
        proof: MerkleProof to verify
        root_hash: Claimed root digest

    Returns:
        True if the replayed digest equals the claimed root
    """
    return compute_root(proof) == root_hash


__all__ = [
    "Side",
    "ProofStep",
    "MerkleProof",
    "compute_root",
    "verify_merkle_proof",
]
