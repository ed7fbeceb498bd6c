"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    merkle build --input records.txt --output tree.json [--json]
    merkle proof --input records.txt --record <hex> --output proof.json [--json]
    merkle verify --root-hash <hex> --proof proof.json [--json]
    merkle check --tree tree.json [--json]
    merkle show --tree tree.json
    merkle config --init

Environment Variables:
    MERKLE_LOG_LEVEL        Log level (default: WARNING)
    MERKLE_LOG_FILE         Also write logs to this file
    MERKLE_OUTPUT_FORMAT    Default output format: human or json
    MERKLE_JSON_INDENT      Indent for written tree/proof documents
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from merkle_cli import __version__
from merkle_cli.commands import build, proof, verify, check, show
from merkle_cli.config import LOG_LEVELS, get_default_config_template, load_config
from merkle_cli.output import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    report_error,
    wants_json,
)
from merkle_core.schemas.errors import MerkleException


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_RUNTIME_ERROR",
    "EXIT_VERIFICATION_FAILED",
    "create_parser",
    "setup_logging",
    "main",
]

VERBOSITY_LEVELS = {1: "INFO", 2: "DEBUG"}


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle",
        description="Build Keccak-256 Merkle trees, generate inclusion proofs and verify them.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merkle.json or ~/.config/merkle/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=list(LOG_LEVELS),
        help="Log level (overrides config and -v)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a Merkle tree from a file of record hashes",
        description="Read 32-byte hex records (one per line), build the tree and save it as JSON.",
    )
    build_parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Input file containing records (one per line, hex encoded)",
    )
    build_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Output file for the tree JSON",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Generate a Merkle proof for one record",
        description="Build the tree from the input records and save the inclusion proof for one record.",
    )
    proof_parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Input file containing records (one per line, hex encoded)",
    )
    proof_parser.add_argument(
        "--record", "--tx-hash", "-r",
        dest="record",
        type=str,
        required=True,
        help="The record to generate the proof for (32-byte hex)",
    )
    proof_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Output file for the proof JSON",
    )
    proof_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a Merkle proof against a root hash",
        description="Replay the proof steps from its leaf hash and compare with the claimed root.",
    )
    verify_parser.add_argument(
        "--root-hash", "-r",
        type=str,
        required=True,
        help="Merkle root hash (32-byte hex)",
    )
    verify_parser.add_argument(
        "--proof", "-p",
        type=Path,
        required=True,
        help="Input file containing the proof JSON",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- check command ---
    check_parser = subparsers.add_parser(
        "check",
        help="Check the internal consistency of a saved tree",
        description="Recompute every internal node hash from its children.",
    )
    check_parser.add_argument(
        "--tree", "-t",
        type=Path,
        required=True,
        help="Tree JSON file",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    check_parser.set_defaults(func=check.check_cmd)

    # --- show command ---
    show_parser = subparsers.add_parser(
        "show",
        help="Print a saved tree",
        description="Print every node hash, indented by depth.",
    )
    show_parser.add_argument(
        "--tree", "-t",
        type=Path,
        required=True,
        help="Tree JSON file",
    )
    show_parser.set_defaults(func=show.show_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkle.json",
        help="Path for config file (default: merkle.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: merkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging: --log-level, then -v, then config
    log_level = args.log_level or VERBOSITY_LEVELS.get(min(args.verbose, 2)) or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleException as e:
        logging.getLogger(__name__).debug(f"{args.command} failed: {e!r}")
        report_error(e, as_json=wants_json(args))
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.verbose >= 2:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
