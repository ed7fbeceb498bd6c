"""
Test fixtures package for Merkle tree tests.

This package provides factory functions for creating test objects:
- records.py: records, record files and tamper helpers

Usage:
    from fixtures import make_records, tamper_node

    def test_something():
        records = make_records(5)
"""

from .records import (
    make_record,
    make_records,
    write_record_file,
    flip_bit,
    tamper_node,
)

__all__ = [
    "make_record",
    "make_records",
    "write_record_file",
    "flip_bit",
    "tamper_node",
]
