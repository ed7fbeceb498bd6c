"""
CLI Check Command

Recompute every internal node of a saved tree from its children and report
nodes whose stored hash does not match.

Usage:
    merkle check --tree tree.json [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace

from merkle_core.crypto.hashing import to_hex
from merkle_core.merkle.merkle_tree import inspect_tree_integrity
from merkle_cli.io import load_tree
from merkle_cli.output import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    print_json,
    wants_json,
)


logger = logging.getLogger(__name__)


def check_cmd(args: Namespace) -> int:
    """Handle check command."""
    tree = load_tree(args.tree)
    result = inspect_tree_integrity(tree)

    if wants_json(args):
        print_json({
            "tree_path": str(args.tree),
            "root_hash": to_hex(tree.root_hash),
            "ok": result.ok,
            "passed_count": result.passed_count,
            "error_count": result.error_count,
            "checks": [check.model_dump(mode="json") for check in result.checks],
        })
    else:
        print(f"tree: {args.tree}")
        print(f"root_hash: {to_hex(tree.root_hash)}")
        print(f"integrity_ok: {str(result.ok).lower()}")
        messages = result.get_error_messages()
        if messages:
            print(f"\nerrors ({len(messages)}):")
            for message in messages[:10]:
                print(f"  ✗ {message}")
            if len(messages) > 10:
                print(f"  ... and {len(messages) - 10} more")

    return EXIT_SUCCESS if result.ok else EXIT_VERIFICATION_FAILED
