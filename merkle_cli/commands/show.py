"""
CLI Show Command

Print a saved tree, one node per line, indented by depth.

Usage:
    merkle show --tree tree.json
"""

from __future__ import annotations

from argparse import Namespace

from merkle_cli.io import load_tree
from merkle_cli.output import EXIT_SUCCESS


def show_cmd(args: Namespace) -> int:
    """Handle show command."""
    tree = load_tree(args.tree)
    print(tree.render(), end="")
    return EXIT_SUCCESS
