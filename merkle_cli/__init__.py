"""
Merkle CLI

Command-line interface for building Merkle trees, generating inclusion
proofs and verifying them.

Usage:
    python -m merkle_cli build --input records.txt --output tree.json
    python -m merkle_cli proof --input records.txt --record <hex> --output proof.json
    python -m merkle_cli verify --root-hash <hex> --proof proof.json
    python -m merkle_cli check --tree tree.json
"""

__version__ = "0.1.0"
