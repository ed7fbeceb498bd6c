"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleNode / MerkleTree: the tree and its read-only leaf index
- ProofStep / MerkleProof: self-contained inclusion proofs
- build_merkle_tree: Build a tree from ordered records
- generate_proof: Generate a proof for a record
- verify_merkle_proof: Verify a proof against a claimed root
- check_tree_integrity: Recompute every internal node from its children
- Document converters for the JSON forms of trees and proofs

Commitment Rules:
1. Leaf hashing: keccak256(record)
2. Parent hashing: keccak256(left + right)
3. Odd count: promote the last node of a level unchanged
4. Empty input: rejected
5. Single record: root = leaf

Usage:
    from merkle_core.merkle import build_merkle_tree, verify_merkle_proof

    tree = build_merkle_tree(records)
    proof = tree.generate_proof(records[2])
    assert verify_merkle_proof(proof, tree.root_hash)
"""
from .merkle_node import MerkleNode

from .proof import (
    Side,
    ProofStep,
    MerkleProof,
    compute_root,
    verify_merkle_proof,
)

from .merkle_tree import (
    MerkleTree,
    build_merkle_tree,
    find_proof_steps,
    generate_proof,
    generate_proof_for_leaf,
    check_tree_integrity,
    inspect_tree_integrity,
)

from .serialization import (
    NodeDocument,
    TreeDocument,
    ProofStepDocument,
    ProofDocument,
    tree_to_document,
    tree_from_document,
    tree_to_dict,
    tree_from_dict,
    dump_tree_json,
    load_tree_json,
    proof_to_document,
    proof_from_document,
    proof_to_dict,
    proof_from_dict,
    dump_proof_json,
    load_proof_json,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleNode",
    "MerkleTree",
    "Side",
    "ProofStep",
    "MerkleProof",
    # Core functions
    "build_merkle_tree",
    "find_proof_steps",
    "generate_proof",
    "generate_proof_for_leaf",
    "compute_root",
    "verify_merkle_proof",
    "check_tree_integrity",
    "inspect_tree_integrity",
    # Documents
    "NodeDocument",
    "TreeDocument",
    "ProofStepDocument",
    "ProofDocument",
    "tree_to_document",
    "tree_from_document",
    "tree_to_dict",
    "tree_from_dict",
    "dump_tree_json",
    "load_tree_json",
    "proof_to_document",
    "proof_from_document",
    "proof_to_dict",
    "proof_from_dict",
    "dump_proof_json",
    "load_proof_json",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
