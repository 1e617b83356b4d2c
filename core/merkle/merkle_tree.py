"""
Merkle Tree Implementation
Leveled Merkle tree over uploaded segments.

This module provides:
- MerkleNode: a single digest at a (level, slot) position
- MerkleTree: immutable leveled tree with leaf ingestion and full rebuild

Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = sha256(segment_bytes)
2. Parent hashing: parent = sha256(left + right), left operand first
3. Unbalanced rule: a lone final node at an odd-length level is combined
   with itself, parent = sha256(node + node)
4. Empty tree: cannot be built (EmptyTreeException)
5. Single leaf: root = leaf (the leaf digest itself)

Determinism Notes:
- Leaves keep insertion order; a leaf's position is its stable index
- Upper levels are always recomputed from level 0, never patched
- Trees are values: add_leaf() and build() return new trees
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from core.crypto.hashing import DIGEST_SIZE, hash_concat, sha256
from core.schemas.errors import EmptyTreeException, TreeNotConstructedException


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleNode:
    """
    One node of the tree.

    Nodes hold no child pointers; a node's place in the tree is given
    by its (level, slot) position in MerkleTree.levels.

    Attributes:
        digest: 32-byte SHA-256 digest
    """
    digest: bytes

    def __post_init__(self) -> None:
        """Validate digest width."""
        if not isinstance(self.digest, bytes) or len(self.digest) != DIGEST_SIZE:
            raise ValueError(
                f"Node digest must be {DIGEST_SIZE} bytes, got {self.digest!r}"
            )


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Parent hash is deterministic: sha256(left + right)

    Args:
        left: Left child hash
        right: Right child hash

    Returns:
        Parent hash (32 bytes)
    """
    return hash_concat(left, right)


def build_next_level(level: tuple[MerkleNode, ...]) -> tuple[MerkleNode, ...]:
    """
    Derive level k+1 from level k.

    Nodes are paired left to right. A lone final node is paired with itself.
    Example: [a, b, c] -> [parent(a,b), parent(c,c)]
    """
    parents: list[MerkleNode] = []
    for i in range(0, len(level), 2):
        left = level[i]
        right = level[i + 1] if i + 1 < len(level) else left
        parents.append(MerkleNode(merkle_parent(left.digest, right.digest)))
    return tuple(parents)


@dataclass(frozen=True)
class MerkleTree:
    """
    Leveled Merkle tree.

    levels[0] holds the leaves in insertion order; levels[k + 1] is derived
    from levels[k]. The tree is a value: mutating operations return a new
    tree and leave the receiver untouched.

    Attributes:
        levels: Tuple of levels, each a tuple of MerkleNode
        built: True once build() has derived every level up to a single root

    Example:
        >>> tree = MerkleTree().add_leaf(b"a").add_leaf(b"b").build()
        >>> tree.root_digest() == sha256(sha256(b"a") + sha256(b"b"))
        True
    """
    levels: tuple[tuple[MerkleNode, ...], ...] = field(default_factory=tuple)
    built: bool = False

    @property
    def leaves(self) -> tuple[MerkleNode, ...]:
        """Level 0 (empty tuple for a fresh tree)."""
        return self.levels[0] if self.levels else ()

    @property
    def leaf_count(self) -> int:
        return len(self.leaves)

    @property
    def depth(self) -> int:
        """Number of stored levels, leaves included."""
        return len(self.levels)

    @property
    def is_empty(self) -> bool:
        return self.leaf_count == 0

    def add_leaf(self, data: bytes) -> "MerkleTree":
        """
        Append the digest of one segment to level 0.

        Upper levels are not re-derived, so the returned tree is unbuilt and
        keeps only level 0. Callers must build() before trusting a root.

        Args:
            data: Raw segment bytes

        Returns:
            New unbuilt tree with one more leaf
        """
        leaf = MerkleNode(sha256(bytes(data)))
        return MerkleTree(levels=(self.leaves + (leaf,),), built=False)

    def add_leaves(self, items: list[bytes]) -> "MerkleTree":
        """Append several segments in order (see add_leaf)."""
        tree = self
        for data in items:
            tree = tree.add_leaf(data)
        return tree

    def build(self) -> "MerkleTree":
        """
        Recompute every level above level 0.

        This is a full rebuild from the current leaves. Derivation stops when
        a level holds exactly one node; that node is the root.

        Returns:
            New built tree

        Raises:
            EmptyTreeException: If level 0 has no nodes
        """
        if self.is_empty:
            raise EmptyTreeException("Cannot build Merkle tree: no leaves provided")

        levels: list[tuple[MerkleNode, ...]] = [self.leaves]
        while len(levels[-1]) > 1:
            levels.append(build_next_level(levels[-1]))

        logger.debug(f"Built Merkle tree: {len(self.leaves)} leaves, {len(levels)} levels")
        return MerkleTree(levels=tuple(levels), built=True)

    def root_digest(self) -> bytes:
        """
        Return the digest of the single node at the topmost level.

        Raises:
            TreeNotConstructedException: If the tree has not been built
        """
        if not self.built or not self.levels or len(self.levels[-1]) != 1:
            raise TreeNotConstructedException(
                "Merkle tree must be built before reading its root"
            )
        return self.levels[-1][0].digest

    def leaf_digest(self, index: int) -> bytes:
        """Return the digest of the leaf at index (plain IndexError if absent)."""
        return self.leaves[index].digest

    @classmethod
    def from_leaves(cls, items: list[bytes]) -> "MerkleTree":
        """Create a built tree from raw segment bytes."""
        return cls().add_leaves(items).build()


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of levels of a built tree with given number of leaves.

    A single leaf has depth 1, two leaves have depth 2, three have depth 3.

    Args:
        num_leaves: Number of leaves in the tree

    Returns:
        Tree depth (0 for empty tree)
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "MerkleNode",
    "MerkleTree",
    "merkle_parent",
    "build_next_level",
    "compute_tree_depth",
]
