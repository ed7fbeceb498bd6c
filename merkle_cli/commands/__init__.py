"""
CLI command modules.
"""

from merkle_cli.commands import build, proof, verify, check, show

__all__ = ["build", "proof", "verify", "check", "show"]
