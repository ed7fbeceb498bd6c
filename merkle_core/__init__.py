"""
Keccak-256 Merkle commitments.

Build a binary hash tree over ordered byte records, produce inclusion
proofs for individual records and verify them against a root digest.

Usage:
    from merkle_core.merkle import build_merkle_tree, verify_merkle_proof

    tree = build_merkle_tree(records)
    proof = tree.generate_proof(records[2])
    assert verify_merkle_proof(proof, tree.root_hash)
"""

__version__ = "0.1.0"
