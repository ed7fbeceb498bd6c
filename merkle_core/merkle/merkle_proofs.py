"""
Merkle Proofs Convenience Wrappers
Thin wrappers around the core tree and proof functions for a cleaner API.

This module provides class-based interfaces:
- MerkleProver: Build trees and generate proofs from records
- MerkleVerifier: Verify proofs, from core types or from hex components

These are convenience wrappers around merkle_tree.py and proof.py.
"""
from __future__ import annotations

from typing import Sequence

from merkle_core.crypto.hashing import Digest, decode_digest, hash_leaf
from merkle_core.merkle.merkle_tree import MerkleTree, build_merkle_tree
from merkle_core.merkle.proof import MerkleProof, ProofStep, verify_merkle_proof
from merkle_core.merkle.serialization import load_proof_json


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove([b"a", b"b", b"c"], b"b")
        >>> proof.leaf_hash == hash_leaf(b"b")
        True
    """

    @staticmethod
    def prove(records: Sequence[bytes], record: bytes) -> MerkleProof:
        """
        Build a tree from records and generate a proof for one of them.

        Raises:
            EmptyInputException: If records is empty
            RecordNotFoundException: If record is not among records
        """
        return build_merkle_tree(records).generate_proof(record)

    @staticmethod
    def prove_all(records: Sequence[bytes]) -> tuple[Digest, list[MerkleProof]]:
        """
        Build a tree and generate a proof for every record, in order.

        Returns:
            (root digest, proofs aligned with records)
        """
        tree = build_merkle_tree(records)
        return tree.root_hash, [tree.generate_proof(record) for record in records]

    @staticmethod
    def compute_root(records: Sequence[bytes]) -> Digest:
        """Compute the root digest for a sequence of records."""
        return build_merkle_tree(records).root_hash


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> tree = MerkleTree.from_records([b"a", b"b"])
        >>> MerkleVerifier.verify(tree.generate_proof(b"a"), tree.root_hash)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof, root_hash: Digest) -> bool:
        return verify_merkle_proof(proof, root_hash)

    @staticmethod
    def verify_record(
        record: bytes,
        steps: Sequence[ProofStep],
        root_hash: Digest,
    ) -> bool:
        """
        Verify a raw record is included under a root.

        The record is hashed to produce the leaf digest.
        """
        proof = MerkleProof(leaf_hash=hash_leaf(record), steps=tuple(steps))
        return verify_merkle_proof(proof, root_hash)

    @staticmethod
    def verify_json(proof_json: str | bytes, root_hex: str) -> bool:
        """
        Verify a proof document against a hex root.

        Raises:
            MalformedDigestException: If root_hex or a proof digest is malformed
            DeserializationMismatchException: If the document shape is wrong
        """
        return verify_merkle_proof(load_proof_json(proof_json), decode_digest(root_hex))


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
