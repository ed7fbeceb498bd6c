"""
Schemas & Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for tree construction, proof generation
and document decoding. Defines both Pydantic models for structured error
communication and Python exceptions for control flow.

None of these conditions are transient: every one reflects invalid input or
a genuine absence, so all errors are non-retryable.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction & lookup
    EMPTY_INPUT = "EMPTY_INPUT"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    INVALID_NODE = "INVALID_NODE"

    # Boundary decoding
    MALFORMED_DIGEST = "MALFORMED_DIGEST"
    DESERIALIZATION_MISMATCH = "DESERIALIZATION_MISMATCH"
    RECORD_FILE_ERROR = "RECORD_FILE_ERROR"

    # Verification outcomes (reported, never raised)
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    NODE_HASH_MISMATCH = "NODE_HASH_MISMATCH"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the command layer to emit machine-readable failures and by
    verification reports that carry an error instead of raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_DIGEST],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all Merkle tree errors.

    Carries structured error information and can be converted to
    MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputException(MerkleException):
    """Raised when a tree is built from zero records."""

    def __init__(
        self,
        message: str = "Cannot build a Merkle Tree with no data",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class RecordNotFoundException(MerkleException):
    """Raised when a proof is requested for a leaf absent from the tree."""

    def __init__(
        self,
        message: str = "Data not found in the tree",
        leaf_hash: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_hash:
            full_details["leaf_hash"] = leaf_hash
        super().__init__(
            message=message,
            code=ErrorCodes.RECORD_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class InvalidNodeException(MerkleException):
    """Raised when a node would be constructed with exactly one child."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_NODE,
            details=details,
            retryable=False,
        )


class MalformedDigestException(MerkleException):
    """Raised when a hex value is not valid hex or not exactly 32 bytes."""

    def __init__(
        self,
        message: str,
        value: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if value is not None:
            # Truncated so details stay printable
            full_details["value"] = value if len(value) <= 80 else value[:77] + "..."
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_DIGEST,
            details=full_details,
            retryable=False,
        )


class DeserializationMismatchException(MerkleException):
    """Raised when a tree or proof document does not have the expected shape."""

    def __init__(
        self,
        message: str,
        document: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if document:
            full_details["document"] = document
        super().__init__(
            message=message,
            code=ErrorCodes.DESERIALIZATION_MISMATCH,
            details=full_details,
            retryable=False,
        )


class RecordFileException(MerkleException):
    """Raised when a record list or document file cannot be read or written."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        if line is not None:
            full_details["line"] = line
        super().__init__(
            message=message,
            code=ErrorCodes.RECORD_FILE_ERROR,
            details=full_details,
            retryable=False,
        )
