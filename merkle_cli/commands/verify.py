"""
CLI Verify Command

Verify a proof document against a claimed root digest. Needs no records
and no tree.

Usage:
    merkle verify --root-hash <hex> --proof proof.json [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import asdict, dataclass

from merkle_core.crypto.hashing import decode_digest, to_hex
from merkle_core.merkle.proof import compute_root, verify_merkle_proof
from merkle_core.schemas.errors import ErrorCodes, MerkleError
from merkle_core.schemas.verification import CheckResult, VerificationResult
from merkle_cli.io import load_proof
from merkle_cli.output import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    print_json,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    leaf_hash: str = ""
    steps: int = 0
    root_hash: str = ""
    computed_root: str = ""
    ok: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def proof_result(summary: VerifySummary) -> VerificationResult:
    """Build the verification report for one proof."""
    details = {
        "root_hash": summary.root_hash,
        "computed_root": summary.computed_root,
        "steps": summary.steps,
    }
    if summary.ok:
        return VerificationResult.success([
            CheckResult.passed(
                check_id="merkle_proof",
                message="Proof replays to the claimed root",
                details=details,
            )
        ])

    message = "Computed root does not match the claimed root"
    return VerificationResult.failure(
        [
            CheckResult.failed(
                check_id="merkle_proof",
                message=message,
                details={"code": ErrorCodes.MERKLE_PROOF_INVALID, **details},
            )
        ],
        error=MerkleError(
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            message=message,
            details=details,
        ),
    )


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    root_hash = decode_digest(args.root_hash)
    proof = load_proof(args.proof)

    logger.info(f"Verifying proof from {args.proof} with {proof.depth} steps")
    ok = verify_merkle_proof(proof, root_hash)

    summary = VerifySummary(
        proof_path=str(args.proof),
        leaf_hash=to_hex(proof.leaf_hash),
        steps=proof.depth,
        root_hash=to_hex(root_hash),
        computed_root=to_hex(compute_root(proof)),
        ok=ok,
    )
    result = proof_result(summary)

    if wants_json(args):
        print_json({**summary.to_dict(), **result.model_dump(mode="json")})
    elif ok:
        print("Merkle Proof is valid.")
    else:
        print("Merkle Proof is INVALID.")

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED
