"""
Segment Store

On-disk store of named segments of named files, with a Merkle tree record
per file committing to every segment uploaded so far.

Layout (all under StorageConfig.uploads_dir):

    <file_name>/<segment_name>      raw segment bytes
    <file_name>/merkleTree.json     persisted tree record (see core.merkle.persistence)

Upload order defines each segment's leaf index, which is the identifier
used when requesting a proof.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import StorageConfig
from core.crypto.hashing import to_hex
from core.merkle.merkle_proofs import Proof, generate_proof, proof_to_dict, verify_proof
from core.merkle.merkle_tree import MerkleTree
from core.merkle.persistence import load_tree, load_tree_or_empty, save_tree
from core.schemas.errors import (
    FileNotFoundException,
    InvalidNameException,
    InvalidSegmentIdentifierException,
    MerkleVerificationException,
    SegmentExistsException,
    SegmentNotFoundException,
    SegmentTooLargeException,
    StorageUnavailableException,
)
from core.storage.locks import FileLockRegistry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    """Outcome of storing one segment."""
    file_name: str
    segment_name: str
    leaf_index: int
    leaf_digest: bytes
    leaf_count: int
    path: Path

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "segment_name": self.segment_name,
            "leaf_index": self.leaf_index,
            "leaf_digest": to_hex(self.leaf_digest),
            "leaf_count": self.leaf_count,
        }


@dataclass(frozen=True)
class ProofResult:
    """A membership proof for one segment and the root it proves against."""
    file_name: str
    leaf_index: int
    root: bytes
    proof: Proof = field(default_factory=list)
    verified: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "file_name": self.file_name,
            "leaf_index": self.leaf_index,
            "root": to_hex(self.root),
            "proof": proof_to_dict(self.proof),
        }
        if self.verified is not None:
            d["verified"] = self.verified
        return d


@dataclass(frozen=True)
class FileListing:
    """Segment names and leaf count of one file, read together."""
    file_name: str
    segments: list[str]
    leaf_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "segments": list(self.segments),
            "leaf_count": self.leaf_count,
        }


def validate_name(name: str, kind: str = "name") -> str:
    """
    Check that a file or segment name maps to exactly one directory entry.

    Rejects empty names, path separators, NUL bytes and names starting with
    a dot (which covers "." and ".." and the store's temporary files).
    """
    if (
        not isinstance(name, str)
        or not name
        or name.startswith(".")
        or "/" in name
        or "\\" in name
        or "\x00" in name
    ):
        raise InvalidNameException(str(name), kind=kind)
    return name


def parse_segment_index(identifier: Any) -> int:
    """
    Parse a user-facing segment identifier into a leaf index.

    Range is not checked here; generate_proof does that against the tree.
    """
    if isinstance(identifier, bool):
        raise InvalidSegmentIdentifierException(identifier)
    if isinstance(identifier, int):
        return identifier
    try:
        return int(str(identifier).strip())
    except ValueError as e:
        raise InvalidSegmentIdentifierException(identifier) from e


class SegmentStore:
    """
    File-segment store with Merkle membership proofs.

    Every operation on one file runs under that file's lock from the
    shared FileLockRegistry: uploads and deletes exclusively, proofs and
    reads shared.
    """

    def __init__(
        self,
        config: StorageConfig | None = None,
        locks: FileLockRegistry | None = None,
    ) -> None:
        self.config = config or StorageConfig()
        self.locks = locks or FileLockRegistry()

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def root_dir(self) -> Path:
        return self.config.uploads_path

    def file_dir(self, file_name: str) -> Path:
        return self.root_dir / validate_name(file_name, "file name")

    def tree_path(self, file_name: str) -> Path:
        return self.file_dir(file_name) / self.config.tree_file_name

    def segment_path(self, file_name: str, segment_name: str) -> Path:
        validate_name(segment_name, "segment name")
        if segment_name == self.config.tree_file_name:
            raise InvalidNameException(segment_name, kind="segment name")
        return self.file_dir(file_name) / segment_name

    # ------------------------------------------------------------------
    # Upload path (exclusive)
    # ------------------------------------------------------------------

    def upload_segment(self, file_name: str, segment_name: str, data: bytes) -> UploadResult:
        """
        Store one segment and append its leaf to the file's tree.

        Args:
            file_name: Logical file the segment belongs to
            segment_name: Name of the segment within the file
            data: Raw segment bytes

        Returns:
            UploadResult with the new leaf's index and digest

        Raises:
            InvalidNameException: If either name is unusable
            SegmentTooLargeException: If data exceeds max_upload_size
            SegmentExistsException: If the segment was already uploaded
            StorageUnavailableException: If the segment or tree cannot be written
            CorruptRecordException: If the existing tree record is invalid
        """
        segment_path = self.segment_path(file_name, segment_name)
        tree_path = self.tree_path(file_name)
        data = bytes(data)

        if len(data) > self.config.max_upload_size:
            raise SegmentTooLargeException(len(data), self.config.max_upload_size)

        with self.locks.write(file_name):
            tree = load_tree_or_empty(tree_path)

            if segment_path.exists():
                raise SegmentExistsException(file_name, segment_name)

            created_dir = not segment_path.parent.exists()
            try:
                segment_path.parent.mkdir(parents=True, exist_ok=True)
                with open(segment_path, "xb") as f:
                    f.write(data)
            except FileExistsError as e:
                raise SegmentExistsException(file_name, segment_name) from e
            except OSError as e:
                logger.error(f"Failed to write segment {segment_path}: {e}")
                self._discard_segment(segment_path, created_dir)
                raise StorageUnavailableException(
                    f"Failed to write segment: {e}", path=str(segment_path)
                ) from e

            tree = tree.add_leaf(data)
            try:
                save_tree(tree, tree_path)
            except StorageUnavailableException:
                # No leaf, no segment; a first upload leaves no file behind
                self._discard_segment(segment_path, created_dir)
                raise

        leaf_index = tree.leaf_count - 1
        logger.info(
            f"Uploaded segment {file_name}/{segment_name} as leaf {leaf_index}"
        )
        return UploadResult(
            file_name=file_name,
            segment_name=segment_name,
            leaf_index=leaf_index,
            leaf_digest=tree.leaf_digest(leaf_index),
            leaf_count=tree.leaf_count,
            path=segment_path,
        )

    def _discard_segment(self, segment_path: Path, created_dir: bool) -> None:
        segment_path.unlink(missing_ok=True)
        if not created_dir:
            return
        try:
            segment_path.parent.rmdir()
        except OSError as e:
            logger.warning(f"Could not remove {segment_path.parent} after failed upload: {e}")

    def delete_file(self, file_name: str) -> bool:
        """
        Remove a file's directory, segments and tree record included.

        Returns:
            True if something was removed, False if the file did not exist
        """
        file_dir = self.file_dir(file_name)
        with self.locks.write(file_name):
            if not file_dir.exists():
                return False
            try:
                shutil.rmtree(file_dir)
            except OSError as e:
                logger.error(f"Failed to delete {file_dir}: {e}")
                raise StorageUnavailableException(
                    f"Failed to delete file: {e}", path=str(file_dir)
                ) from e

        logger.info(f"Deleted file {file_name}")
        return True

    # ------------------------------------------------------------------
    # Proof path (shared, read-only)
    # ------------------------------------------------------------------

    def _load_built_tree(self, file_name: str) -> MerkleTree:
        tree_path = self.tree_path(file_name)
        if not tree_path.exists():
            raise FileNotFoundException(file_name)
        tree = load_tree(tree_path)
        if not tree.built:
            tree = tree.build()
        return tree

    def request_proof(
        self,
        file_name: str,
        segment_index: int | str,
        *,
        verify: bool | None = None,
    ) -> ProofResult:
        """
        Prove that the segment at segment_index belongs to the file's tree.

        The stored tree is built in memory when needed; the record on disk is
        not modified.

        Args:
            file_name: Logical file name
            segment_index: Leaf index, or its string form
            verify: Self-check the proof before returning it
                    (defaults to StorageConfig.verify_proofs)

        Returns:
            ProofResult with root, proof and the self-check outcome

        Raises:
            InvalidSegmentIdentifierException: If segment_index is not an integer
            FileNotFoundException: If the file has no tree record
            IndexOutOfRangeException: If the index is outside [0, leaf_count)
            MerkleVerificationException: If the self-check fails
        """
        leaf_index = parse_segment_index(segment_index)
        if verify is None:
            verify = self.config.verify_proofs

        with self.locks.read(file_name):
            tree = self._load_built_tree(file_name)

        proof = generate_proof(tree, leaf_index)
        root = tree.root_digest()

        verified: bool | None = None
        if verify:
            verified = verify_proof(root, proof)
            if not verified:
                raise MerkleVerificationException(
                    "Proof verification failed", leaf_index=leaf_index
                )

        return ProofResult(
            file_name=file_name,
            leaf_index=leaf_index,
            root=root,
            proof=proof,
            verified=verified,
        )

    def root(self, file_name: str) -> bytes:
        """Return the file's current Merkle root."""
        with self.locks.read(file_name):
            tree = self._load_built_tree(file_name)
        return tree.root_digest()

    def leaf_count(self, file_name: str) -> int:
        """Return the number of segments committed to the file's tree."""
        with self.locks.read(file_name):
            tree_path = self.tree_path(file_name)
            if not tree_path.exists():
                raise FileNotFoundException(file_name)
            return load_tree(tree_path).leaf_count

    # ------------------------------------------------------------------
    # Listing and download
    # ------------------------------------------------------------------

    def list_files(self) -> list[str]:
        """Names of all stored files (directories under uploads_dir)."""
        if not self.root_dir.is_dir():
            return []
        try:
            return sorted(
                p.name for p in self.root_dir.iterdir()
                if p.is_dir() and not p.name.startswith(".")
            )
        except OSError as e:
            raise StorageUnavailableException(
                f"Error reading directory: {e}", path=str(self.root_dir)
            ) from e

    def _segment_names(self, file_name: str) -> list[str]:
        file_dir = self.file_dir(file_name)
        if not file_dir.is_dir():
            raise FileNotFoundException(file_name)
        return sorted(
            p.name for p in file_dir.iterdir()
            if p.is_file()
            and p.name != self.config.tree_file_name
            and not p.name.startswith(".")
        )

    def list_segments(self, file_name: str) -> list[str]:
        """Stored segment names of a file, sorted by name."""
        with self.locks.read(file_name):
            return self._segment_names(file_name)

    def describe_file(self, file_name: str) -> FileListing:
        """
        Segment names and leaf count of a file as one consistent snapshot.

        Both are read under a single shared lock, so no upload can land
        between them.

        Raises:
            FileNotFoundException: If the file has no tree record
        """
        with self.locks.read(file_name):
            tree_path = self.tree_path(file_name)
            if not tree_path.exists():
                raise FileNotFoundException(file_name)
            return FileListing(
                file_name=file_name,
                segments=self._segment_names(file_name),
                leaf_count=load_tree(tree_path).leaf_count,
            )

    def read_segment(self, file_name: str, segment_name: str) -> bytes:
        """Return the stored bytes of one segment."""
        segment_path = self.segment_path(file_name, segment_name)
        with self.locks.read(file_name):
            if not segment_path.is_file():
                raise SegmentNotFoundException(file_name, segment_name)
            try:
                return segment_path.read_bytes()
            except OSError as e:
                raise StorageUnavailableException(
                    f"Failed to read segment: {e}", path=str(segment_path)
                ) from e


__all__ = [
    "UploadResult",
    "ProofResult",
    "FileListing",
    "SegmentStore",
    "validate_name",
    "parse_segment_index",
]
