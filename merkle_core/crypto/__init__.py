"""
Core cryptographic utilities.

Keccak-256 hashing for leaves and internal nodes, plus hex codecs.
"""
from .hashing import (
    DIGEST_SIZE,
    Digest,
    keccak256,
    hash_leaf,
    combine,
    hash_pair,
    to_hex,
    from_hex,
    ensure_digest,
    decode_digest,
)

__all__ = [
    "DIGEST_SIZE",
    "Digest",
    "keccak256",
    "hash_leaf",
    "combine",
    "hash_pair",
    "to_hex",
    "from_hex",
    "ensure_digest",
    "decode_digest",
]
