"""
Tree & Proof Documents
Pydantic document models for the JSON forms of trees and proofs, and
converters between documents and the core types.

Document shapes:
- Tree:  {"root": {"hash": "<hex>", "left": <node>|null, "right": <node>|null}}
- Proof: {"leaf_hash": "<hex>", "proof_steps": [{"Left": "<hex>"}, {"Right": "<hex>"}]}

Digests are lowercase hex without 0x prefix on output; a 0x prefix is
accepted on input. The leaf index is never serialized.

Decoding Rules:
- Wrong shape (missing field, extra key, unknown or ambiguous step tag,
  node with exactly one child, invalid JSON) -> DeserializationMismatchException
- Bad hex or a digest that is not exactly 32 bytes -> MalformedDigestException
- Loaded trees are trusted as-is; run the integrity checker to re-verify
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from merkle_core.crypto.hashing import decode_digest, to_hex
from merkle_core.merkle.merkle_node import MerkleNode
from merkle_core.merkle.merkle_tree import MerkleTree
from merkle_core.merkle.proof import MerkleProof, ProofStep, Side
from merkle_core.schemas.errors import DeserializationMismatchException


DEFAULT_JSON_INDENT = 2

STEP_TAGS = ("Left", "Right")


# =============================================================================
# Document Models
# =============================================================================

class NodeDocument(BaseModel):
    """A tree node as it appears in a tree document."""

    model_config = ConfigDict(extra="forbid")

    hash: str = Field(..., description="Hex-encoded node digest")
    left: NodeDocument | None = Field(default=None, description="Left child")
    right: NodeDocument | None = Field(default=None, description="Right child")


class TreeDocument(BaseModel):
    """A whole tree. Only the committed structure is stored."""

    model_config = ConfigDict(extra="forbid")

    root: NodeDocument = Field(..., description="Apex node of the tree")


class ProofStepDocument(BaseModel):
    """
    A tagged proof step: exactly one of "Left" or "Right".

    The tag names the side the sibling digest is placed on. Tags are
    matched on the raw input, so field names, nulls and extra tags are
    all rejected.
    """

    model_config = ConfigDict(extra="forbid")

    left: str | None = Field(default=None, alias="Left")
    right: str | None = Field(default=None, alias="Right")

    @model_validator(mode="before")
    @classmethod
    def _exactly_one_tag(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        tags = [key for key in data if key in STEP_TAGS]
        if len(data) != 1 or len(tags) != 1:
            raise ValueError(
                f"Proof step must carry exactly one of 'Left' or 'Right', got {sorted(map(str, data))}"
            )
        if not isinstance(data[tags[0]], str):
            raise ValueError(f"Proof step '{tags[0]}' must be a hex string")
        return data


class ProofDocument(BaseModel):
    """An inclusion proof."""

    model_config = ConfigDict(extra="forbid")

    leaf_hash: str = Field(..., description="Hex-encoded leaf digest")
    proof_steps: list[ProofStepDocument] = Field(
        ...,
        description="Sibling steps, lowest level first",
    )


NodeDocument.model_rebuild()


def _mismatch(document: str, error: ValidationError) -> DeserializationMismatchException:
    errors = [
        {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
        for err in error.errors()
    ]
    first = errors[0] if errors else {"loc": "", "msg": str(error)}
    where = f" at '{first['loc']}'" if first["loc"] else ""
    return DeserializationMismatchException(
        f"Invalid {document} document{where}: {first['msg']}",
        document=document,
        details={"errors": errors},
    )


# =============================================================================
# Tree Conversion
# =============================================================================

def tree_to_document(tree: MerkleTree | MerkleNode) -> TreeDocument:
    """Convert a tree (or bare root node) to its document form."""
    root = tree.root if isinstance(tree, MerkleTree) else tree

    # Post-order: an internal node is emitted after both child documents
    stack: list[tuple[MerkleNode, bool]] = [(root, False)]
    built: list[NodeDocument] = []
    while stack:
        node, expanded = stack.pop()
        if node.left is None or node.right is None:
            built.append(NodeDocument(hash=to_hex(node.hash)))
        elif not expanded:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            right = built.pop()
            left = built.pop()
            built.append(NodeDocument(hash=to_hex(node.hash), left=left, right=right))

    return TreeDocument(root=built[0])


def tree_from_document(document: TreeDocument) -> MerkleTree:
    """
    Convert a tree document to a MerkleTree.

    The result has an empty leaf index, so proofs cannot be generated from
    it; its digests are not re-verified.

    Raises:
        DeserializationMismatchException: If a node has exactly one child
        MalformedDigestException: If a hash is not a 32-byte hex digest
    """
    stack: list[tuple[str, NodeDocument, bool]] = [("root", document.root, False)]
    built: list[MerkleNode] = []
    while stack:
        path, doc, expanded = stack.pop()
        if doc.left is None and doc.right is None:
            built.append(MerkleNode(hash=decode_digest(doc.hash)))
        elif doc.left is None or doc.right is None:
            raise DeserializationMismatchException(
                f"Invalid tree document at '{path}': node must have both children or none",
                document="tree",
                details={"path": path},
            )
        elif not expanded:
            stack.append((path, doc, True))
            stack.append((path + ".right", doc.right, False))
            stack.append((path + ".left", doc.left, False))
        else:
            right = built.pop()
            left = built.pop()
            built.append(MerkleNode(hash=decode_digest(doc.hash), left=left, right=right))

    return MerkleTree(built[0])


def tree_to_dict(tree: MerkleTree | MerkleNode) -> dict[str, Any]:
    return tree_to_document(tree).model_dump(mode="json")


def tree_from_dict(data: Any) -> MerkleTree:
    try:
        document = TreeDocument.model_validate(data)
    except ValidationError as e:
        raise _mismatch("tree", e) from e
    return tree_from_document(document)


def dump_tree_json(tree: MerkleTree | MerkleNode, indent: int | None = DEFAULT_JSON_INDENT) -> str:
    """Serialize a tree to JSON text. Leaves keep explicit null children."""
    return tree_to_document(tree).model_dump_json(indent=indent)


def load_tree_json(text: str | bytes) -> MerkleTree:
    """
    Parse a tree from JSON text.

    Raises:
        DeserializationMismatchException: Invalid JSON or unexpected shape
        MalformedDigestException: Bad hex digest
    """
    try:
        document = TreeDocument.model_validate_json(text)
    except ValidationError as e:
        raise _mismatch("tree", e) from e
    return tree_from_document(document)


# =============================================================================
# Proof Conversion
# =============================================================================

def proof_to_document(proof: MerkleProof) -> ProofDocument:
    """Convert a proof to its document form."""
    steps = []
    for step in proof.steps:
        if step.side is Side.LEFT:
            steps.append(ProofStepDocument.model_validate({"Left": to_hex(step.sibling)}))
        else:
            steps.append(ProofStepDocument.model_validate({"Right": to_hex(step.sibling)}))
    return ProofDocument(leaf_hash=to_hex(proof.leaf_hash), proof_steps=steps)


def proof_from_document(document: ProofDocument) -> MerkleProof:
    """
    Convert a proof document to a MerkleProof.

    Raises:
        MalformedDigestException: If a digest is not 32-byte hex
    """
    steps = []
    for step in document.proof_steps:
        if step.left is not None:
            steps.append(ProofStep.sibling_on_left(decode_digest(step.left)))
        else:
            steps.append(ProofStep.sibling_on_right(decode_digest(step.right)))
    return MerkleProof(leaf_hash=decode_digest(document.leaf_hash), steps=tuple(steps))


def proof_to_dict(proof: MerkleProof) -> dict[str, Any]:
    return proof_to_document(proof).model_dump(mode="json", by_alias=True, exclude_none=True)


def proof_from_dict(data: Any) -> MerkleProof:
    try:
        document = ProofDocument.model_validate(data)
    except ValidationError as e:
        raise _mismatch("proof", e) from e
    return proof_from_document(document)


def dump_proof_json(proof: MerkleProof, indent: int | None = DEFAULT_JSON_INDENT) -> str:
    """Serialize a proof to JSON text."""
    return proof_to_document(proof).model_dump_json(
        indent=indent, by_alias=True, exclude_none=True
    )


def load_proof_json(text: str | bytes) -> MerkleProof:
    """
    Parse a proof from JSON text.

    Raises:
        DeserializationMismatchException: Invalid JSON or unexpected shape
        MalformedDigestException: Bad hex digest
    """
    try:
        document = ProofDocument.model_validate_json(text)
    except ValidationError as e:
        raise _mismatch("proof", e) from e
    return proof_from_document(document)


__all__ = [
    "DEFAULT_JSON_INDENT",
    "NodeDocument",
    "TreeDocument",
    "ProofStepDocument",
    "ProofDocument",
    "tree_to_document",
    "tree_from_document",
    "tree_to_dict",
    "tree_from_dict",
    "dump_tree_json",
    "load_tree_json",
    "proof_to_document",
    "proof_from_document",
    "proof_to_dict",
    "proof_from_dict",
    "dump_proof_json",
    "load_proof_json",
]
