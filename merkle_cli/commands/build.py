"""
CLI Build Command

Build a Merkle tree from a record list and save its tree document.

Usage:
    merkle build --input records.txt --output tree.json [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import asdict, dataclass

from merkle_core.crypto.hashing import to_hex
from merkle_core.merkle.merkle_tree import build_merkle_tree
from merkle_cli.io import read_records, save_tree
from merkle_cli.output import EXIT_SUCCESS, print_json, wants_json


logger = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    """Summary of a tree build for CLI output."""
    input_path: str = ""
    output_path: str = ""
    record_count: int = 0
    unique_leaves: int = 0
    height: int = 0
    root_hash: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def build_cmd(args: Namespace) -> int:
    """Handle build command."""
    records = read_records(args.input)
    tree = build_merkle_tree(records)
    out = save_tree(tree, args.output, indent=args.cli_config.json_indent)

    summary = BuildSummary(
        input_path=str(args.input),
        output_path=str(out),
        record_count=tree.leaf_count,
        unique_leaves=len(tree.leaves),
        height=tree.root.height(),
        root_hash=to_hex(tree.root_hash),
    )

    if wants_json(args):
        print_json({"ok": True, **summary.to_dict()})
    else:
        print(f"Merkle Tree built successfully. Root Hash: {summary.root_hash}")

    return EXIT_SUCCESS
