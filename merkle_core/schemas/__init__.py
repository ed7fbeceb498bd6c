"""
Schemas for error communication and verification reports.

Error taxonomy:
- EmptyInputException: tree built from zero records
- RecordNotFoundException: proof requested for a leaf not in the tree
- MalformedDigestException: bad hex or not exactly 32 bytes
- DeserializationMismatchException: document with an unexpected shape
"""

from .errors import (
    ErrorCodes,
    MerkleError,
    MerkleException,
    EmptyInputException,
    RecordNotFoundException,
    InvalidNodeException,
    MalformedDigestException,
    DeserializationMismatchException,
    RecordFileException,
)
from .verification import (
    CheckSeverity,
    CheckResult,
    VerificationResult,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "EmptyInputException",
    "RecordNotFoundException",
    "InvalidNodeException",
    "MalformedDigestException",
    "DeserializationMismatchException",
    "RecordFileException",
    # Verification
    "CheckSeverity",
    "CheckResult",
    "VerificationResult",
]
