"""
Merkle Tree and Commitments
Leveled Merkle tree over file segments, membership proofs, and persistence.

This module provides:
- MerkleTree / MerkleNode: immutable leveled tree (add_leaf, build, root_digest)
- generate_proof / verify_proof: authentication paths and their verification
- save_tree / load_tree: whole-tree persistence across requests

Commitment Rules:
1. Leaf hashing: sha256(segment_bytes)
2. Parent hashing: sha256(left + right)
3. Unbalanced levels: the lone final node is combined with itself
4. Empty tree: cannot be built
5. Single leaf: root = leaf

Usage:
    from core.merkle import MerkleTree, generate_proof, verify_proof

    tree = MerkleTree().add_leaf(b"a").add_leaf(b"b").add_leaf(b"c").build()
    proof = generate_proof(tree, 2)
    assert verify_proof(tree.root_digest(), proof)
"""
from .merkle_tree import (
    MerkleNode,
    MerkleTree,
    merkle_parent,
    build_next_level,
    compute_tree_depth,
)

from .merkle_proofs import (
    Orientation,
    ProofStep,
    Proof,
    generate_proof,
    verify_proof,
    proof_to_dict,
    proof_from_dict,
    MerkleProver,
    MerkleVerifier,
)

from .persistence import (
    tree_to_record,
    tree_from_record,
    dumps_tree,
    loads_tree,
    save_tree,
    load_tree,
    load_tree_or_empty,
)


__all__ = [
    # Core types
    "MerkleNode",
    "MerkleTree",
    "Orientation",
    "ProofStep",
    "Proof",
    # Core functions
    "merkle_parent",
    "build_next_level",
    "compute_tree_depth",
    "generate_proof",
    "verify_proof",
    "proof_to_dict",
    "proof_from_dict",
    # Persistence
    "tree_to_record",
    "tree_from_record",
    "dumps_tree",
    "loads_tree",
    "save_tree",
    "load_tree",
    "load_tree_or_empty",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
