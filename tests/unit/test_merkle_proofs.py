"""
Merkle Proof Unit Tests
Tests for core/merkle/merkle_proofs.py

1. Completeness - every leaf of every tree size verifies against its root
2. Proof shape - leaf digest first, one step per level below the root
3. Bounds - indices outside [0, n) are rejected
4. Tamper detection - any flipped bit, swapped orientation or wrong root fails
5. Malformed proofs - empty proofs and wrong digest widths are errors, not False
6. JSON form - proof_to_dict / proof_from_dict
"""
import pytest

from core.crypto.hashing import sha256, to_hex
from core.merkle.merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
    Orientation,
    ProofStep,
    generate_proof,
    proof_from_dict,
    proof_to_dict,
    verify_proof,
)
from core.merkle.merkle_tree import MerkleTree, merkle_parent
from core.schemas.errors import (
    IndexOutOfRangeException,
    MalformedProofException,
    TreeNotConstructedException,
)
from fixtures.common import make_segments, make_tree


def _flip_bit(digest: bytes, bit: int = 0) -> bytes:
    data = bytearray(digest)
    data[bit // 8] ^= 1 << (bit % 8)
    return bytes(data)


class TestProofCompleteness:
    """Every leaf of every tree proves against that tree's root."""

    @pytest.mark.parametrize("n", range(1, 18))
    def test_all_indices_verify(self, n):
        tree = make_tree(n)
        root = tree.root_digest()

        for i in range(n):
            proof = generate_proof(tree, i)
            assert verify_proof(root, proof), f"leaf {i} of {n} failed"

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 8, 13])
    def test_proof_length(self, n):
        """One leaf step plus one step per level below the root."""
        tree = make_tree(n)
        for i in range(n):
            assert len(generate_proof(tree, i)) == tree.depth

    def test_first_step_is_leaf_digest(self):
        segments = make_segments(5)
        tree = make_tree(5)
        for i, segment in enumerate(segments):
            assert generate_proof(tree, i)[0].digest == sha256(segment)

    def test_single_leaf_proof(self):
        """A one-leaf proof is just the leaf and reproduces the root directly."""
        tree = MerkleTree.from_leaves([b"only"])
        proof = generate_proof(tree, 0)

        assert len(proof) == 1
        assert verify_proof(tree.root_digest(), proof)


class TestProofOrientation:
    """Tests for the orientation of each step."""

    def test_three_leaves_last_index(self):
        """Proving c in [a, b, c]: its own digest marked LEFT, then H(a,b) marked LEFT."""
        tree = MerkleTree.from_leaves([b"a", b"b", b"c"])
        proof = generate_proof(tree, 2)

        c = sha256(b"c")
        assert proof[1] == ProofStep(c, Orientation.LEFT)
        assert proof[2] == ProofStep(
            merkle_parent(sha256(b"a"), sha256(b"b")), Orientation.LEFT
        )

    def test_even_index_sibling_is_right(self):
        tree = MerkleTree.from_leaves([b"a", b"b"])
        proof = generate_proof(tree, 0)
        assert proof[1] == ProofStep(sha256(b"b"), Orientation.RIGHT)
        assert proof[1].is_right

    def test_odd_index_sibling_is_left(self):
        tree = MerkleTree.from_leaves([b"a", b"b"])
        proof = generate_proof(tree, 1)
        assert proof[1] == ProofStep(sha256(b"a"), Orientation.LEFT)


class TestProofBounds:
    """Tests for index and tree-state validation."""

    @pytest.mark.parametrize("n", [1, 2, 7])
    def test_index_equal_to_leaf_count(self, n):
        with pytest.raises(IndexOutOfRangeException) as exc_info:
            generate_proof(make_tree(n), n)
        assert exc_info.value.leaf_count == n

    def test_negative_index(self):
        with pytest.raises(IndexOutOfRangeException):
            generate_proof(make_tree(4), -1)

    def test_bool_index_rejected(self):
        with pytest.raises(IndexOutOfRangeException):
            generate_proof(make_tree(4), True)

    def test_empty_tree(self):
        with pytest.raises(TreeNotConstructedException):
            generate_proof(MerkleTree(), 0)

    def test_unbuilt_tree(self):
        with pytest.raises(TreeNotConstructedException):
            generate_proof(make_tree(3, built=False), 0)

    def test_unbuilt_tree_checks_index_first(self):
        with pytest.raises(IndexOutOfRangeException):
            generate_proof(make_tree(3, built=False), 3)


class TestTamperDetection:
    """Any change to a proof or root makes verification fail."""

    @pytest.mark.parametrize("n", [2, 3, 6, 9])
    def test_flipped_bit_in_any_step(self, n):
        tree = make_tree(n)
        root = tree.root_digest()

        for i in range(n):
            proof = generate_proof(tree, i)
            for position, step in enumerate(proof):
                tampered = list(proof)
                tampered[position] = ProofStep(_flip_bit(step.digest, 7), step.orientation)
                assert not verify_proof(root, tampered), (
                    f"leaf {i} of {n}: flipping step {position} went undetected"
                )

    def test_flipped_bit_in_root(self):
        tree = make_tree(4)
        proof = generate_proof(tree, 1)
        assert not verify_proof(_flip_bit(tree.root_digest(), 200), proof)

    def test_swapped_orientation(self):
        tree = make_tree(4)
        proof = generate_proof(tree, 0)
        flipped = Orientation.LEFT if proof[1].is_right else Orientation.RIGHT
        proof[1] = ProofStep(proof[1].digest, flipped)
        assert not verify_proof(tree.root_digest(), proof)

    def test_proof_from_other_tree(self):
        proof = generate_proof(make_tree(4), 2)
        other_root = MerkleTree.from_leaves([b"w", b"x", b"y", b"z"]).root_digest()
        assert not verify_proof(other_root, proof)

    def test_first_step_orientation_ignored(self):
        tree = make_tree(3)
        proof = generate_proof(tree, 1)
        proof[0] = ProofStep(proof[0].digest, Orientation.RIGHT)
        assert verify_proof(tree.root_digest(), proof)


class TestProofStep:
    """Orientation values on proof steps."""

    def test_string_orientation_coerced(self):
        step = ProofStep(sha256(b"a"), "right")
        assert step.orientation is Orientation.RIGHT
        assert step.is_right

    def test_string_orientations_verify(self):
        tree = make_tree(5)
        proof = [ProofStep(s.digest, s.orientation.value) for s in generate_proof(tree, 3)]
        assert verify_proof(tree.root_digest(), proof)

    def test_unknown_orientation_rejected(self):
        with pytest.raises(ValueError):
            ProofStep(sha256(b"a"), "up")


class TestMalformedProofs:
    """Structurally invalid proofs raise rather than return False."""

    def test_empty_proof(self):
        with pytest.raises(MalformedProofException):
            verify_proof(sha256(b"root"), [])

    def test_short_step_digest(self):
        proof = [ProofStep(sha256(b"a"), Orientation.LEFT), ProofStep(b"\x00" * 31, Orientation.RIGHT)]
        with pytest.raises(MalformedProofException) as exc_info:
            verify_proof(sha256(b"root"), proof)
        assert exc_info.value.details["step"] == 1

    def test_short_root(self):
        proof = [ProofStep(sha256(b"a"), Orientation.LEFT)]
        with pytest.raises(MalformedProofException):
            verify_proof(b"\x00" * 16, proof)


class TestProofSerialization:
    """Tests for the JSON form of proofs."""

    def test_to_dict_shape(self):
        proof = generate_proof(MerkleTree.from_leaves([b"a", b"b"]), 0)
        data = proof_to_dict(proof)

        assert data[0] == {"digest": to_hex(sha256(b"a")), "orientation": "left"}
        assert data[1] == {"digest": to_hex(sha256(b"b")), "orientation": "right"}

    def test_from_dict_inverts_to_dict(self):
        tree = make_tree(7)
        proof = generate_proof(tree, 5)
        parsed = proof_from_dict(proof_to_dict(proof))

        assert parsed == proof
        assert verify_proof(tree.root_digest(), parsed)

    def test_from_dict_accepts_uppercase_hex(self):
        data = [{"digest": "0x" + sha256(b"a").hex().upper(), "orientation": "left"}]
        assert proof_from_dict(data)[0].digest == sha256(b"a")

    @pytest.mark.parametrize(
        "data",
        [
            [],
            None,
            "0x00",
            [{"digest": "0x00", "orientation": "left"}],
            [{"digest": to_hex(sha256(b"a")), "orientation": "up"}],
            [{"digest": to_hex(sha256(b"a"))}],
            [{"digest": to_hex(sha256(b"a")), "orientation": "left", "extra": 1}],
        ],
    )
    def test_from_dict_rejects_malformed(self, data):
        with pytest.raises(MalformedProofException):
            proof_from_dict(data)


class TestProverVerifier:
    """Tests for the class-based wrappers."""

    def test_prove_builds_unbuilt_tree(self):
        tree = make_tree(5, built=False)
        proof = MerkleProver.prove(tree, 4)
        assert MerkleVerifier.verify(tree.build().root_digest(), proof)

    def test_prove_segments(self):
        segments = make_segments(6)
        root, proof = MerkleProver.prove_segments(segments, 3)
        assert MerkleVerifier.verify(root, proof)
        assert MerkleVerifier.verify_segment(segments[3], root, proof)

    def test_verify_segment_rejects_other_segment(self):
        segments = make_segments(6)
        root, proof = MerkleProver.prove_segments(segments, 3)
        assert not MerkleVerifier.verify_segment(segments[2], root, proof)

    def test_verify_segment_wrong_root(self):
        segments = make_segments(2)
        _, proof = MerkleProver.prove_segments(segments, 0)
        assert not MerkleVerifier.verify_segment(segments[0], sha256(b"other"), proof)
