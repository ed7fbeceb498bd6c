"""
CLI Proof Command

Build a Merkle tree from a record list and save the inclusion proof for
one record.

Usage:
    merkle proof --input records.txt --record <hex> --output proof.json [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import asdict, dataclass

from merkle_core.crypto.hashing import decode_digest, to_hex
from merkle_core.merkle.merkle_tree import build_merkle_tree
from merkle_cli.io import read_records, save_proof
from merkle_cli.output import EXIT_SUCCESS, print_json, wants_json


logger = logging.getLogger(__name__)


@dataclass
class ProofSummary:
    """Summary of proof generation for CLI output."""
    output_path: str = ""
    record: str = ""
    leaf_hash: str = ""
    steps: int = 0
    root_hash: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def proof_cmd(args: Namespace) -> int:
    """Handle proof command."""
    # Target is validated before the record file is read
    record = decode_digest(args.record)

    records = read_records(args.input)
    tree = build_merkle_tree(records)
    proof = tree.generate_proof(record)
    out = save_proof(proof, args.output, indent=args.cli_config.json_indent)

    summary = ProofSummary(
        output_path=str(out),
        record=to_hex(record),
        leaf_hash=to_hex(proof.leaf_hash),
        steps=proof.depth,
        root_hash=to_hex(tree.root_hash),
    )

    if wants_json(args):
        print_json({"ok": True, **summary.to_dict()})
    else:
        print("Merkle Proof generated successfully.")

    return EXIT_SUCCESS
