"""
CLI Output Helpers

Exit codes and the shared human/JSON reporting used by every command.
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from typing import Any

from merkle_core.schemas.errors import MerkleException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def wants_json(args: Namespace) -> bool:
    """True if the command should emit JSON (flag or configured default)."""
    if getattr(args, "json", False):
        return True
    config = getattr(args, "cli_config", None)
    return config is not None and config.default_output_format == "json"


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def report_error(error: MerkleException, as_json: bool = False) -> None:
    """Report a MerkleException with its error code."""
    if as_json:
        print_json({"ok": False, "error": error.to_error_model().model_dump(mode="json")})
        return
    print(f"Error [{error.code}]: {error.message}", file=sys.stderr)
