"""
CLI Tests

Tests for segproof_cli/main.py and its commands, run in-process through main(argv).
"""
import json

import pytest

from core.crypto.hashing import sha256, to_hex
from core.merkle.merkle_tree import MerkleTree
from fixtures.common import make_runtime_config, make_segments
from segproof_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)


@pytest.fixture
def config_path(tmp_path):
    """Config file pointing the CLI at a temporary uploads directory."""
    path = tmp_path / "segproof.json"
    path.write_text(json.dumps(make_runtime_config(tmp_path).to_dict()))
    return path


@pytest.fixture
def cli(config_path):
    """Run the CLI with the temporary config."""
    def _run(*argv):
        return main(["--config", str(config_path), *argv])
    return _run


@pytest.fixture
def uploaded(cli, tmp_path):
    """Upload three segments of file "f"; returns their bytes."""
    segments = make_segments(3)
    for i, data in enumerate(segments):
        path = tmp_path / f"part-{i:03d}"
        path.write_bytes(data)
        assert cli("upload", "f", str(path)) == EXIT_SUCCESS
    return segments


class TestParser:
    """Tests for argument parsing."""

    def test_no_command(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "segproof" in capsys.readouterr().out

    def test_proof_args(self):
        args = create_parser().parse_args(["proof", "f", "2", "--no-verify", "--json"])
        assert args.file_name == "f"
        assert args.segment_index == "2"
        assert args.no_verify
        assert args.json


class TestUploadAndProof:
    """Tests for upload, proof, root and verify."""

    def test_upload_json(self, cli, tmp_path, capsys):
        path = tmp_path / "chunk"
        path.write_bytes(b"hello")

        assert cli("upload", "f", str(path), "--segment-name", "s0", "--json") == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["segment_name"] == "s0"
        assert data["leaf_index"] == 0
        assert data["leaf_digest"] == to_hex(sha256(b"hello"))

    def test_upload_missing_source(self, cli, tmp_path):
        assert cli("upload", "f", str(tmp_path / "nope")) == EXIT_RUNTIME_ERROR

    def test_upload_duplicate(self, cli, uploaded, tmp_path, capsys):
        assert cli("upload", "f", str(tmp_path / "part-000")) == EXIT_RUNTIME_ERROR
        assert "SEGMENT_EXISTS" in capsys.readouterr().err

    def test_root(self, cli, uploaded, capsys):
        capsys.readouterr()
        assert cli("root", "f") == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == to_hex(
            MerkleTree.from_leaves(uploaded).root_digest()
        )

    def test_proof_json(self, cli, uploaded, capsys):
        capsys.readouterr()
        assert cli("proof", "f", "2", "--json") == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["leaf_index"] == 2
        assert data["verified"] is True
        assert data["proof"][0]["digest"] == to_hex(sha256(uploaded[2]))

    def test_proof_out_of_range(self, cli, uploaded, capsys):
        assert cli("proof", "f", "3") == EXIT_RUNTIME_ERROR
        assert "INDEX_OUT_OF_RANGE" in capsys.readouterr().err

    def test_proof_then_verify(self, cli, uploaded, tmp_path):
        out = tmp_path / "proof.json"
        assert cli("proof", "f", "1", "--out", str(out)) == EXIT_SUCCESS
        assert out.exists()

        root = to_hex(MerkleTree.from_leaves(uploaded).root_digest())
        assert cli("verify", str(out), "--root", root) == EXIT_SUCCESS
        assert cli("verify", str(out), "--segment", str(tmp_path / "part-001")) == EXIT_SUCCESS

    def test_verify_wrong_root(self, cli, uploaded, tmp_path):
        out = tmp_path / "proof.json"
        cli("proof", "f", "0", "--out", str(out))

        wrong = to_hex(sha256(b"not the root"))
        assert cli("verify", str(out), "--root", wrong) == EXIT_VERIFICATION_FAILED

    def test_verify_wrong_segment(self, cli, uploaded, tmp_path):
        out = tmp_path / "proof.json"
        cli("proof", "f", "0", "--out", str(out))
        assert cli("verify", str(out), "--segment", str(tmp_path / "part-002")) == EXIT_VERIFICATION_FAILED

    def test_verify_malformed(self, cli, tmp_path):
        out = tmp_path / "proof.json"
        out.write_text(json.dumps({"root": to_hex(sha256(b"r")), "proof": []}))
        assert cli("verify", str(out)) == EXIT_RUNTIME_ERROR

    @pytest.mark.parametrize("document", [42, "0xabc", None, True])
    def test_verify_rejects_non_object(self, cli, tmp_path, capsys, document):
        out = tmp_path / "proof.json"
        out.write_text(json.dumps(document))
        assert cli("verify", str(out)) == EXIT_RUNTIME_ERROR
        assert "MALFORMED_PROOF" in capsys.readouterr().err

    def test_verify_not_json(self, cli, tmp_path):
        out = tmp_path / "proof.json"
        out.write_text("{")
        assert cli("verify", str(out)) == EXIT_RUNTIME_ERROR


class TestFileCommands:
    """Tests for list, download and delete."""

    def test_list(self, cli, uploaded, capsys):
        capsys.readouterr()
        assert cli("list", "--json") == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out) == ["f"]

        assert cli("list", "f") == EXIT_SUCCESS
        assert capsys.readouterr().out.split() == ["part-000", "part-001", "part-002"]

    def test_download(self, cli, uploaded, tmp_path):
        out = tmp_path / "copy"
        assert cli("download", "f", "part-001", "--out", str(out)) == EXIT_SUCCESS
        assert out.read_bytes() == uploaded[1]
        assert cli("download", "f", "part-001", "--out", str(out)) == EXIT_RUNTIME_ERROR

    def test_delete(self, cli, uploaded, capsys):
        assert cli("delete", "f") == EXIT_SUCCESS
        assert cli("root", "f") == EXIT_RUNTIME_ERROR
        assert "FILE_NOT_FOUND" in capsys.readouterr().err


class TestConfigCommand:
    """Tests for the config command."""

    def test_init(self, cli, tmp_path):
        path = tmp_path / "new.json"
        assert cli("config", "--init", "--path", str(path)) == EXIT_SUCCESS
        assert json.loads(path.read_text())["storage"]["tree_file_name"] == "merkleTree.json"
        assert cli("config", "--init", "--path", str(path)) == EXIT_RUNTIME_ERROR

    def test_show(self, cli, tmp_path, capsys):
        assert cli("config", "--show") == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["storage"]["uploads_dir"] == str(tmp_path / "uploads")
