"""
Tree Persistence Unit Tests
Tests for core/merkle/persistence.py and core/schemas/tree.py

1. Round trip - built, unbuilt and empty trees survive save/load unchanged
2. Record format - canonical JSON with 0x-hex digests per level
3. Corrupt records - bad JSON, bad digests and bad level shapes are rejected
4. Storage errors - unreadable or unwritable locations raise StorageUnavailable
5. Atomic replace - no temporary files are left behind
"""
import json

import pytest

from core.crypto.hashing import sha256, to_hex
from core.merkle.merkle_tree import MerkleTree
from core.merkle.persistence import (
    dumps_tree,
    load_tree,
    load_tree_or_empty,
    loads_tree,
    save_tree,
    tree_from_record,
    tree_to_record,
)
from core.schemas.errors import CorruptRecordException, StorageUnavailableException
from core.schemas.tree import TreeRecord
from fixtures.common import make_tree


class TestRoundTrip:
    """Saved trees load back equal."""

    @pytest.mark.parametrize("n", [1, 2, 3, 8, 13])
    def test_built_tree(self, tmp_path, n):
        tree = make_tree(n)
        path = save_tree(tree, tmp_path / "merkleTree.json")

        loaded = load_tree(path)

        assert loaded == tree
        assert loaded.root_digest() == tree.root_digest()

    def test_unbuilt_tree(self, tmp_path):
        tree = make_tree(5, built=False)
        save_tree(tree, tmp_path / "t.json")

        loaded = load_tree(tmp_path / "t.json")

        assert loaded == tree
        assert not loaded.built
        assert loaded.build().root_digest() == tree.build().root_digest()

    def test_empty_tree(self, tmp_path):
        save_tree(MerkleTree(), tmp_path / "t.json")
        assert load_tree(tmp_path / "t.json").is_empty

    def test_save_logged(self, tmp_path, caplog):
        with caplog.at_level("DEBUG", logger="core.merkle.persistence"):
            save_tree(make_tree(3), tmp_path / "t.json")
        assert "(3 leaves, built=True)" in caplog.text

    def test_record_conversion(self):
        tree = make_tree(6)
        assert tree_from_record(tree_to_record(tree)) == tree

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "a" / "b" / "merkleTree.json"
        save_tree(make_tree(2), path)
        assert path.exists()

    def test_overwrite_replaces_record(self, tmp_path):
        path = tmp_path / "t.json"
        save_tree(make_tree(2), path)
        save_tree(make_tree(3), path)
        assert load_tree(path).leaf_count == 3


class TestRecordFormat:
    """Tests for the serialized record."""

    def test_canonical_json(self):
        tree = MerkleTree.from_leaves([b"a", b"b"])
        text = dumps_tree(tree).decode("utf-8")

        a, b = to_hex(sha256(b"a")), to_hex(sha256(b"b"))
        root = to_hex(tree.root_digest())
        assert text == (
            '{"built":true,"levels":[["%s","%s"],["%s"]],"schema_version":"v1"}'
            % (a, b, root)
        )

    def test_deterministic_bytes(self):
        assert dumps_tree(make_tree(9)) == dumps_tree(make_tree(9))

    def test_empty_level_zero_loads_as_empty(self):
        assert loads_tree(b'{"levels":[[]],"built":false}').is_empty

    def test_schema_version_optional_on_read(self):
        record = {"levels": [[to_hex(sha256(b"a"))]], "built": True}
        assert loads_tree(json.dumps(record)).root_digest() == sha256(b"a")


class TestCorruptRecords:
    """Structurally invalid records raise CorruptRecordException."""

    def test_not_json(self):
        with pytest.raises(CorruptRecordException):
            loads_tree(b"{not json")

    def test_not_utf8(self):
        with pytest.raises(CorruptRecordException):
            loads_tree(b"\xff\xfe\x00")

    def test_bad_digest(self):
        with pytest.raises(CorruptRecordException):
            loads_tree(json.dumps({"levels": [["0x1234"]], "built": False}))

    def test_wrong_level_width(self):
        d = to_hex(sha256(b"a"))
        record = {"levels": [[d, d, d], [d, d, d]], "built": False}
        with pytest.raises(CorruptRecordException):
            loads_tree(json.dumps(record))

    def test_built_without_single_root(self):
        d = to_hex(sha256(b"a"))
        with pytest.raises(CorruptRecordException):
            loads_tree(json.dumps({"levels": [[d, d]], "built": True}))

    def test_level_above_root(self):
        d = to_hex(sha256(b"a"))
        with pytest.raises(CorruptRecordException):
            loads_tree(json.dumps({"levels": [[d], [d]], "built": True}))

    def test_unknown_field(self):
        with pytest.raises(CorruptRecordException):
            loads_tree(json.dumps({"levels": [], "built": False, "root": "0x00"}))

    def test_unsupported_schema_version(self):
        with pytest.raises(CorruptRecordException):
            loads_tree(json.dumps({"levels": [], "built": False, "schema_version": "v9"}))

    def test_corrupt_file_reports_path(self, tmp_path):
        path = tmp_path / "t.json"
        path.write_text("[]")
        with pytest.raises(CorruptRecordException) as exc_info:
            load_tree(path)
        assert exc_info.value.details["path"] == str(path)


class TestTreeRecordModel:
    """Tests for TreeRecord validation."""

    def test_digests_lowercased(self):
        d = "0x" + sha256(b"a").hex().upper()
        record = TreeRecord(levels=[[d]], built=True)
        assert record.levels[0][0] == d.lower()
        assert record.leaf_count == 1

    def test_unbuilt_single_leaf_allowed(self):
        assert TreeRecord(levels=[[to_hex(sha256(b"a"))]], built=False).leaf_count == 1


class TestStorageErrors:
    """Failures at the storage boundary."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(StorageUnavailableException):
            load_tree(tmp_path / "missing.json")

    def test_load_or_empty_missing_file(self, tmp_path):
        assert load_tree_or_empty(tmp_path / "missing.json").is_empty

    def test_save_into_file_path_parent(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(StorageUnavailableException):
            save_tree(make_tree(2), blocker / "merkleTree.json")

    def test_load_directory(self, tmp_path):
        with pytest.raises(StorageUnavailableException):
            load_tree(tmp_path)


class TestAtomicReplace:
    """Writes leave only the final record behind."""

    def test_no_temporary_files_left(self, tmp_path):
        path = tmp_path / "merkleTree.json"
        for n in range(1, 6):
            save_tree(make_tree(n), path)

        assert [p.name for p in tmp_path.iterdir()] == ["merkleTree.json"]
