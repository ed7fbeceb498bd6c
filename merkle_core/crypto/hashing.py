"""
Hashing Utilities
Keccak-256 leaf and node hashing plus hex codecs for Merkle commitments.

This module provides:
- Keccak-256 hashing for raw bytes (Ethereum's Keccak, not NIST SHA3-256)
- Leaf hashing: leaf = keccak256(record)
- Node combining: parent = keccak256(left + right)
- Hex encoding/decoding with optional 0x prefix
- Fixed-width (32-byte) digest decoding

Security/Determinism Notes:
- Records are hashed exactly as given, with no domain-separation prefix
- Internal nodes use the same hash with no prefix either, so a 32-byte
  value equal to some leaf hash is structurally indistinguishable from an
  internal-node input. Adding a prefix would change every committed root,
  so the scheme is kept as is.
- All operations are deterministic
"""
from __future__ import annotations

from Crypto.Hash import keccak

from merkle_core.schemas.errors import MalformedDigestException


# Width of every digest in the tree
DIGEST_SIZE: int = 32

# A Digest is a 32-byte bytes value
Digest = bytes


def keccak256(data: bytes) -> Digest:
    """
    Compute Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def hash_leaf(record: bytes) -> Digest:
    """
    Compute the leaf commitment of a raw record.

    Rule: leaf = keccak256(record)

    Args:
        record: Raw record bytes (any length, including empty)

    Returns:
        32-byte leaf digest
    """
    return keccak256(record)


def combine(left: Digest, right: Digest) -> Digest:
    """
    Compute the parent digest of two child digests.

    Rule: parent = keccak256(left + right), left first.

    Args:
        left: Left child digest
        right: Right child digest

    Returns:
        32-byte parent digest
    """
    return keccak256(left + right)


# Alias matching the usual pairwise naming
hash_pair = combine


def to_hex(data: bytes, prefix: bool = False) -> str:
    """
    Convert bytes to a lowercase hexadecimal string.

    Args:
        data: Raw bytes
        prefix: Prepend "0x" when True

    Returns:
        Hex string (e.g., "deadbeef" or "0xdeadbeef")
    """
    encoded = data.hex()
    return "0x" + encoded if prefix else encoded


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string to bytes.

    Surrounding whitespace and an optional 0x/0X prefix are stripped.

    Args:
        hex_string: Hex string

    Returns:
        Decoded bytes

    Raises:
        MalformedDigestException: If the string has odd length or contains
            invalid hex characters
    """
    if not isinstance(hex_string, str):
        raise MalformedDigestException(
            f"Hex value must be a string, got {type(hex_string).__name__}"
        )

    hex_content = hex_string.strip()
    if hex_content[:2] in ("0x", "0X"):
        hex_content = hex_content[2:]

    if len(hex_content) % 2 != 0:
        raise MalformedDigestException(
            f"Hex string must have even length, got length {len(hex_content)}",
            value=hex_string,
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise MalformedDigestException(
            f"Invalid hex characters in string: {e}",
            value=hex_string,
        ) from e


def ensure_digest(data: bytes) -> Digest:
    """
    Check that a byte value is exactly DIGEST_SIZE bytes long.

    Raises:
        MalformedDigestException: On any other length
    """
    if len(data) != DIGEST_SIZE:
        raise MalformedDigestException(
            f"Digest must be exactly {DIGEST_SIZE} bytes, got {len(data)}",
            value=data.hex(),
        )
    return bytes(data)


def decode_digest(hex_string: str) -> Digest:
    """
    Decode a hex string into a 32-byte digest.

    Never zero-fills or truncates: anything but exactly 32 decoded bytes
    is rejected.

    Args:
        hex_string: Hex string with or without 0x prefix

    Returns:
        32-byte digest

    Raises:
        MalformedDigestException: If the value is not valid hex or does not
            decode to exactly 32 bytes
    """
    decoded = from_hex(hex_string)
    if len(decoded) != DIGEST_SIZE:
        raise MalformedDigestException(
            f"Digest must be exactly {DIGEST_SIZE} bytes, got {len(decoded)}",
            value=hex_string,
        )
    return decoded


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
