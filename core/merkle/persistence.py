"""
Merkle Tree Persistence
Save and load a whole MerkleTree so leaves accumulate across requests.

The record is a canonical JSON document (see core.schemas.tree.TreeRecord):

    {"built":false,"levels":[["0x..","0x.."]],"schema_version":"v1"}

A tree is saved and loaded as one unit. Writes go to a temporary file in the
target directory which then atomically replaces the record, so readers only
ever observe a complete old record or a complete new one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.crypto.hashing import digest_from_hex, to_hex
from core.merkle.merkle_tree import MerkleNode, MerkleTree
from core.schemas.canonical import dumps_canonical
from core.schemas.errors import CorruptRecordException, StorageUnavailableException
from core.schemas.tree import TreeRecord


logger = logging.getLogger(__name__)


def tree_to_record(tree: MerkleTree) -> TreeRecord:
    """Convert a tree into its persisted record."""
    return TreeRecord(
        levels=[[to_hex(node.digest) for node in level] for level in tree.levels],
        built=tree.built,
    )


def tree_from_record(record: TreeRecord) -> MerkleTree:
    """Convert a validated record back into a tree."""
    levels = tuple(
        tuple(MerkleNode(digest_from_hex(d)) for d in level)
        for level in record.levels
    )
    # An empty level 0 is stored as [[]] by some writers; treat it as no levels
    if levels and not levels[0]:
        levels = ()
    return MerkleTree(levels=levels, built=record.built)


def dumps_tree(tree: MerkleTree) -> bytes:
    """Serialize a tree to record bytes."""
    return dumps_canonical(tree_to_record(tree)).encode("utf-8")


def loads_tree(data: bytes | str, *, source: str | None = None) -> MerkleTree:
    """
    Deserialize record bytes into a tree.

    Raises:
        CorruptRecordException: If the bytes are not a structurally valid record
    """
    try:
        raw: Any = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptRecordException(
            f"Tree record is not valid JSON: {e}", path=source
        ) from e

    try:
        record = TreeRecord.model_validate(raw)
    except ValidationError as e:
        raise CorruptRecordException(
            f"Tree record failed validation: {e.error_count()} error(s)",
            path=source,
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    return tree_from_record(record)


def save_tree(tree: MerkleTree, location: str | Path) -> Path:
    """
    Persist the full tree structure to location.

    Args:
        tree: Tree to save (built or unbuilt)
        location: Record file path; parent directories are created

    Returns:
        Path of the written record

    Raises:
        StorageUnavailableException: If the record cannot be written
    """
    path = Path(location)
    data = dumps_tree(tree)

    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        logger.error(f"Failed to save Merkle tree to {path}: {e}")
        raise StorageUnavailableException(
            f"Failed to save Merkle tree: {e}", path=str(path)
        ) from e
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)

    logger.debug(f"Saved Merkle tree to {path} ({tree.leaf_count} leaves, built={tree.built})")
    return path


def load_tree(location: str | Path) -> MerkleTree:
    """
    Load a tree previously written by save_tree.

    Raises:
        StorageUnavailableException: If the record cannot be read (missing included)
        CorruptRecordException: If the record is structurally invalid
    """
    path = Path(location)
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.error(f"Failed to load Merkle tree from {path}: {e}")
        raise StorageUnavailableException(
            f"Failed to load Merkle tree: {e}", path=str(path)
        ) from e

    return loads_tree(data, source=str(path))


def load_tree_or_empty(location: str | Path) -> MerkleTree:
    """Load a tree, or return a fresh empty tree when no record exists yet."""
    path = Path(location)
    if not path.exists():
        return MerkleTree()
    return load_tree(path)


__all__ = [
    "tree_to_record",
    "tree_from_record",
    "dumps_tree",
    "loads_tree",
    "save_tree",
    "load_tree",
    "load_tree_or_empty",
]
