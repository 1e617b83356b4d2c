"""
Merkle Proofs
Authentication path generation and verification for a built MerkleTree.

This module provides:
- Orientation / ProofStep: one element of an authentication path
- generate_proof: derive the path for a leaf index
- verify_proof: recompute a root from a path and compare it to a trusted root
- MerkleProver / MerkleVerifier: class-based convenience wrappers

Proof Format:
- proof[0] carries the leaf's own digest; its orientation is not used
- proof[1:] are sibling digests consumed bottom-up
- RIGHT means the step digest is the right operand: parent = H(current + step)
- LEFT means the step digest is the left operand: parent = H(step + current)
- A lone final node is proven with its own digest again, marked LEFT,
  mirroring the duplication rule used when the tree was built
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from pydantic import ValidationError

from core.crypto.hashing import DIGEST_SIZE, is_digest, sha256, to_hex
from core.merkle.merkle_tree import MerkleTree, merkle_parent
from core.schemas.errors import (
    IndexOutOfRangeException,
    MalformedProofException,
    TreeNotConstructedException,
)
from core.schemas.tree import ProofRecord


logger = logging.getLogger(__name__)


class Orientation(str, Enum):
    """Operand position of a proof digest during recombination."""
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    """
    A single element of a Merkle proof.

    Attributes:
        digest: 32-byte digest (leaf digest for the first step, sibling otherwise)
        orientation: Which side of the running hash this digest occupies
    """
    digest: bytes
    orientation: Orientation

    def __post_init__(self) -> None:
        """Accept plain "left"/"right" strings as orientations."""
        object.__setattr__(self, "orientation", Orientation(self.orientation))

    @property
    def is_right(self) -> bool:
        return self.orientation is Orientation.RIGHT

    def to_dict(self) -> dict[str, str]:
        return {"digest": to_hex(self.digest), "orientation": self.orientation.value}


Proof = list[ProofStep]


def generate_proof(tree: MerkleTree, leaf_index: int) -> Proof:
    """
    Generate the authentication path for the leaf at the given index.

    Algorithm:
    1. Emit the leaf's own digest
    2. At each level below the root:
       - Even index: sibling at index + 1 marked RIGHT, or the node's own
         digest marked LEFT when it is the lone final node
       - Odd index: sibling at index - 1 marked LEFT
       - Move up: index = index // 2

    Args:
        tree: Built MerkleTree
        leaf_index: 0-based index of the leaf (insertion order)

    Returns:
        Ordered list of ProofStep, length 1 + (tree.depth - 1)

    Raises:
        TreeNotConstructedException: If the tree has no leaves or is not built
        IndexOutOfRangeException: If leaf_index is outside [0, leaf_count)
    """
    if tree.is_empty:
        raise TreeNotConstructedException(
            "Cannot generate proof: Merkle tree has no leaves"
        )

    if (
        isinstance(leaf_index, bool)
        or not isinstance(leaf_index, int)
        or leaf_index < 0
        or leaf_index >= tree.leaf_count
    ):
        raise IndexOutOfRangeException(leaf_index, tree.leaf_count)

    if not tree.built:
        raise TreeNotConstructedException(
            "Cannot generate proof: Merkle tree has not been built"
        )

    proof: Proof = [ProofStep(tree.leaf_digest(leaf_index), Orientation.LEFT)]

    index = leaf_index
    for nodes_at_level in tree.levels[:-1]:
        if index % 2 == 0:
            if index + 1 < len(nodes_at_level):
                # Current node is the left operand, sibling the right one
                proof.append(ProofStep(nodes_at_level[index + 1].digest, Orientation.RIGHT))
            else:
                # Lone final node, combined with itself when the tree was built
                proof.append(ProofStep(nodes_at_level[index].digest, Orientation.LEFT))
        else:
            proof.append(ProofStep(nodes_at_level[index - 1].digest, Orientation.LEFT))

        index //= 2

    logger.debug(
        f"Generated proof for leaf {leaf_index} of {tree.leaf_count} ({len(proof)} steps)"
    )
    return proof


def verify_proof(trusted_root: bytes, proof: Sequence[ProofStep]) -> bool:
    """
    Verify a Merkle proof against a trusted root.

    Algorithm:
    1. current = proof[0].digest
    2. For each following step:
       - RIGHT: current = parent(current, step.digest)
       - LEFT:  current = parent(step.digest, current)
    3. Compare current with the trusted root

    Args:
        trusted_root: 32-byte root the proof must reproduce
        proof: Ordered proof steps (see generate_proof)

    Returns:
        True if the recomputed root equals trusted_root, False otherwise

    Raises:
        MalformedProofException: If the proof is empty or any digest
            (root included) is not exactly 32 bytes
    """
    if not proof:
        raise MalformedProofException("Invalid proof: proof has no elements")

    if not is_digest(trusted_root):
        raise MalformedProofException(
            f"Invalid root: expected {DIGEST_SIZE} bytes"
        )

    for position, step in enumerate(proof):
        if not is_digest(step.digest):
            raise MalformedProofException(
                f"Invalid hash size in proof part: expected {DIGEST_SIZE} bytes",
                step=position,
            )

    current = bytes(proof[0].digest)
    for step in proof[1:]:
        if step.orientation is Orientation.RIGHT:
            current = merkle_parent(current, bytes(step.digest))
        else:
            current = merkle_parent(bytes(step.digest), current)

    return hmac.compare_digest(current, bytes(trusted_root))


def proof_to_dict(proof: Sequence[ProofStep]) -> list[dict[str, str]]:
    """Serialize a proof to JSON-ready dicts with 0x-hex digests."""
    return [step.to_dict() for step in proof]


def proof_from_dict(data: Any) -> Proof:
    """
    Parse a proof from its JSON form (see proof_to_dict).

    Raises:
        MalformedProofException: If the data is not a list of valid steps
    """
    try:
        record = ProofRecord.from_data(data)
    except ValidationError as e:
        raise MalformedProofException(
            f"Invalid proof: {e.error_count()} validation error(s)",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    return [
        ProofStep(step.digest_bytes, Orientation(step.orientation))
        for step in record.root
    ]


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> tree = MerkleTree.from_leaves([b"a", b"b", b"c"])
        >>> proof = MerkleProver.prove(tree, 2)
        >>> proof[0].digest == sha256(b"c")
        True
    """

    @staticmethod
    def prove(tree: MerkleTree, index: int) -> Proof:
        """
        Generate a proof, building the tree first if necessary.

        Args:
            tree: Built or unbuilt tree
            index: 0-based index of the leaf to prove

        Returns:
            Proof for the specified leaf
        """
        if not tree.built and not tree.is_empty:
            tree = tree.build()
        return generate_proof(tree, index)

    @staticmethod
    def prove_segments(segments: Sequence[bytes], index: int) -> tuple[bytes, Proof]:
        """
        Build a tree over raw segments and prove one of them.

        Returns:
            (root, proof)
        """
        tree = MerkleTree.from_leaves(list(segments))
        return tree.root_digest(), generate_proof(tree, index)


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> root, proof = MerkleProver.prove_segments([b"a", b"b"], 1)
        >>> MerkleVerifier.verify(root, proof)
        True
    """

    @staticmethod
    def verify(trusted_root: bytes, proof: Sequence[ProofStep]) -> bool:
        """Verify a proof against a trusted root (see verify_proof)."""
        return verify_proof(trusted_root, proof)

    @staticmethod
    def verify_segment(
        segment: bytes,
        trusted_root: bytes,
        proof: Sequence[ProofStep],
    ) -> bool:
        """
        Verify that raw segment bytes are the leaf a proof starts from.

        The segment is hashed and compared to proof[0] before the path
        is recombined.
        """
        if not verify_proof(trusted_root, proof):
            return False
        return hmac.compare_digest(sha256(bytes(segment)), bytes(proof[0].digest))


__all__ = [
    "Orientation",
    "ProofStep",
    "Proof",
    "generate_proof",
    "verify_proof",
    "proof_to_dict",
    "proof_from_dict",
    "MerkleProver",
    "MerkleVerifier",
]
