"""
Record & Document IO

Purpose: Read record lists and read/write tree and proof documents on disk.

Record list format:
- One 32-byte value per line, hex encoded (0x prefix optional)
- Surrounding whitespace is trimmed and blank lines are skipped
- The decoded 32 bytes are the record; its leaf is keccak256(record)
"""

from __future__ import annotations

import logging
from pathlib import Path

from merkle_core.crypto.hashing import decode_digest
from merkle_core.merkle.merkle_tree import MerkleTree
from merkle_core.merkle.proof import MerkleProof
from merkle_core.merkle.serialization import (
    DEFAULT_JSON_INDENT,
    dump_proof_json,
    dump_tree_json,
    load_proof_json,
    load_tree_json,
)
from merkle_core.schemas.errors import MalformedDigestException, RecordFileException


logger = logging.getLogger(__name__)


def parse_records(text: str, source: str = "<records>") -> list[bytes]:
    """
    Parse a record list.

    Raises:
        MalformedDigestException: If a line is not a 32-byte hex value. The
            details name the source and the 1-based line number.
    """
    records: list[bytes] = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        value = line.strip()
        if not value:
            continue
        try:
            records.append(decode_digest(value))
        except MalformedDigestException as e:
            raise MalformedDigestException(
                f"{source}:{line_no}: {e.message}",
                details={**e.details, "path": source, "line": line_no},
            ) from e
    return records


def read_text(path: str | Path) -> str:
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise RecordFileException(f"File not found: {path}", path=str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise RecordFileException(f"Cannot read {path}: {e}", path=str(path)) from e


def write_text(path: str | Path, content: str) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise RecordFileException(f"Cannot write {path}: {e}", path=str(path)) from e
    return path


def read_records(path: str | Path) -> list[bytes]:
    """Read a record list file. An empty file yields an empty list."""
    records = parse_records(read_text(path), source=str(path))
    logger.info(f"Read {len(records)} records from {path}")
    return records


def save_tree(tree: MerkleTree, path: str | Path, indent: int = DEFAULT_JSON_INDENT) -> Path:
    out = write_text(path, dump_tree_json(tree, indent=indent))
    logger.info(f"Wrote tree document to {out}")
    return out


def load_tree(path: str | Path) -> MerkleTree:
    return load_tree_json(read_text(path))


def save_proof(proof: MerkleProof, path: str | Path, indent: int = DEFAULT_JSON_INDENT) -> Path:
    out = write_text(path, dump_proof_json(proof, indent=indent))
    logger.info(f"Wrote proof document to {out}")
    return out


def load_proof(path: str | Path) -> MerkleProof:
    return load_proof_json(read_text(path))
