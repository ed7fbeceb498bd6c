"""
CLI Command Tests
Tests for merkle_cli/main.py and merkle_cli/commands/*

Each test runs main([...]) in an isolated working directory and checks
the exit code plus stdout/stderr.

Exit codes:
- 0: success / proof valid / tree consistent
- 1: runtime error (bad input, missing file, absent record)
- 2: proof invalid / tree inconsistent
"""
import json

import pytest

from merkle_cli.main import main
from merkle_cli.output import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, EXIT_VERIFICATION_FAILED
from merkle_core.crypto.hashing import hash_leaf
from merkle_core.merkle.merkle_tree import build_merkle_tree
from merkle_core.schemas.errors import ErrorCodes

from fixtures import make_record, make_records, write_record_file


@pytest.fixture
def workspace(isolated_cli, record_file):
    """Isolated working directory holding the default record file."""
    return isolated_cli


def _build(workspace, record_file):
    tree_path = workspace / "out" / "tree.json"
    assert main(["build", "--input", str(record_file), "--output", str(tree_path)]) == EXIT_SUCCESS
    return tree_path


def _proof(workspace, record_file, record):
    proof_path = workspace / "proof.json"
    code = main([
        "proof",
        "--input", str(record_file),
        "--record", record.hex(),
        "--output", str(proof_path),
    ])
    assert code == EXIT_SUCCESS
    return proof_path


class TestBuildCommand:
    """Tests for merkle build."""

    def test_build_writes_tree(self, workspace, record_file, records, capsys):
        tree_path = _build(workspace, record_file)

        expected_root = build_merkle_tree(records).root_hash.hex()
        out = capsys.readouterr().out
        assert out.strip() == f"Merkle Tree built successfully. Root Hash: {expected_root}"

        data = json.loads(tree_path.read_text())
        assert data["root"]["hash"] == expected_root

    def test_build_json_summary(self, workspace, record_file, records, capsys):
        code = main([
            "build", "--input", str(record_file),
            "--output", str(workspace / "tree.json"), "--json",
        ])

        assert code == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["ok"] is True
        assert summary["record_count"] == 7
        assert summary["unique_leaves"] == 7
        assert summary["height"] == 3
        assert summary["root_hash"] == build_merkle_tree(records).root_hash.hex()

    def test_build_accepts_prefixed_records(self, workspace, records, capsys):
        path = write_record_file(workspace / "prefixed.txt", records, with_prefix=True)

        code = main(["build", "--input", str(path), "--output", str(workspace / "t.json")])

        assert code == EXIT_SUCCESS
        assert build_merkle_tree(records).root_hash.hex() in capsys.readouterr().out

    def test_build_empty_input(self, workspace, capsys):
        path = workspace / "empty.txt"
        path.write_text("\n\n")

        code = main(["build", "--input", str(path), "--output", str(workspace / "t.json")])

        assert code == EXIT_RUNTIME_ERROR
        err = capsys.readouterr().err
        assert f"Error [{ErrorCodes.EMPTY_INPUT}]: Cannot build a Merkle Tree with no data" in err
        assert not (workspace / "t.json").exists()

    def test_build_malformed_line(self, workspace, records, capsys):
        path = workspace / "bad.txt"
        path.write_text(records[0].hex() + "\n" + "abcd\n")

        code = main(["build", "--input", str(path), "--output", str(workspace / "t.json")])

        assert code == EXIT_RUNTIME_ERROR
        err = capsys.readouterr().err
        assert f"Error [{ErrorCodes.MALFORMED_DIGEST}]" in err
        assert "bad.txt:2" in err

    def test_build_missing_input(self, workspace, capsys):
        code = main([
            "build", "--input", str(workspace / "nope.txt"),
            "--output", str(workspace / "t.json"),
        ])

        assert code == EXIT_RUNTIME_ERROR
        assert f"Error [{ErrorCodes.RECORD_FILE_ERROR}]: File not found" in capsys.readouterr().err

    def test_build_error_as_json(self, workspace, capsys):
        code = main([
            "build", "--input", str(workspace / "nope.txt"),
            "--output", str(workspace / "t.json"), "--json",
        ])

        assert code == EXIT_RUNTIME_ERROR
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is False
        assert report["error"]["code"] == ErrorCodes.RECORD_FILE_ERROR


class TestProofCommand:
    """Tests for merkle proof."""

    def test_proof_writes_document(self, workspace, record_file, records, capsys):
        proof_path = _proof(workspace, record_file, records[2])

        assert capsys.readouterr().out.strip() == "Merkle Proof generated successfully."
        data = json.loads(proof_path.read_text())
        assert data["leaf_hash"] == hash_leaf(records[2]).hex()
        for step in data["proof_steps"]:
            assert list(step) in (["Left"], ["Right"])

    def test_proof_tx_hash_alias(self, workspace, record_file, records, capsys):
        code = main([
            "proof", "--input", str(record_file),
            "--tx-hash", "0x" + records[0].hex(),
            "--output", str(workspace / "p.json"), "--json",
        ])

        assert code == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["record"] == records[0].hex()
        assert summary["steps"] == 3

    def test_proof_absent_record(self, workspace, record_file, capsys):
        code = main([
            "proof", "--input", str(record_file),
            "--record", make_record("absent").hex(),
            "--output", str(workspace / "p.json"),
        ])

        assert code == EXIT_RUNTIME_ERROR
        err = capsys.readouterr().err
        assert f"Error [{ErrorCodes.RECORD_NOT_FOUND}]: Data not found in the tree" in err

    def test_proof_malformed_target(self, workspace, record_file, capsys):
        code = main([
            "proof", "--input", str(record_file),
            "--record", "1234",
            "--output", str(workspace / "p.json"),
        ])

        assert code == EXIT_RUNTIME_ERROR
        assert f"Error [{ErrorCodes.MALFORMED_DIGEST}]" in capsys.readouterr().err


class TestVerifyCommand:
    """Tests for merkle verify."""

    def test_verify_valid(self, workspace, record_file, records, capsys):
        proof_path = _proof(workspace, record_file, records[6])
        root = build_merkle_tree(records).root_hash.hex()
        capsys.readouterr()

        code = main(["verify", "--root-hash", root, "--proof", str(proof_path)])

        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "Merkle Proof is valid."

    def test_verify_invalid(self, workspace, record_file, records, capsys):
        proof_path = _proof(workspace, record_file, records[6])
        other_root = build_merkle_tree(make_records(7, "other")).root_hash.hex()
        capsys.readouterr()

        code = main(["verify", "--root-hash", other_root, "--proof", str(proof_path)])

        assert code == EXIT_VERIFICATION_FAILED
        assert capsys.readouterr().out.strip() == "Merkle Proof is INVALID."

    def test_verify_json(self, workspace, record_file, records, capsys):
        proof_path = _proof(workspace, record_file, records[1])
        root = build_merkle_tree(records).root_hash.hex()
        capsys.readouterr()

        code = main(["verify", "-r", "0x" + root, "-p", str(proof_path), "--json"])

        assert code == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is True
        assert report["computed_root"] == root
        assert report["leaf_hash"] == hash_leaf(records[1]).hex()
        assert report["error"] is None
        assert report["checks"][0]["check_id"] == "merkle_proof"
        assert report["checks"][0]["ok"] is True

    def test_verify_invalid_json_report(self, workspace, record_file, records, capsys):
        proof_path = _proof(workspace, record_file, records[1])
        other_root = build_merkle_tree(make_records(7, "other")).root_hash.hex()
        capsys.readouterr()

        code = main(["verify", "-r", other_root, "-p", str(proof_path), "--json"])

        assert code == EXIT_VERIFICATION_FAILED
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is False
        assert report["error"]["code"] == ErrorCodes.MERKLE_PROOF_INVALID
        assert report["checks"][0]["details"]["code"] == ErrorCodes.MERKLE_PROOF_INVALID
        assert report["checks"][0]["details"]["root_hash"] == other_root

    def test_verify_document_without_steps(self, workspace, records, capsys):
        """A proof document missing proof_steps never verifies as a bare leaf."""
        leaf = hash_leaf(records[0]).hex()
        proof_path = workspace / "proof.json"
        proof_path.write_text(json.dumps({"leaf_hash": leaf}))

        code = main(["verify", "--root-hash", leaf, "--proof", str(proof_path)])

        assert code == EXIT_RUNTIME_ERROR
        assert f"Error [{ErrorCodes.DESERIALIZATION_MISMATCH}]" in capsys.readouterr().err

    def test_verify_malformed_root(self, workspace, record_file, records, capsys):
        proof_path = _proof(workspace, record_file, records[1])

        code = main(["verify", "--root-hash", "00" * 31, "--proof", str(proof_path)])

        assert code == EXIT_RUNTIME_ERROR
        assert f"Error [{ErrorCodes.MALFORMED_DIGEST}]" in capsys.readouterr().err

    def test_verify_bad_document(self, workspace, capsys):
        proof_path = workspace / "proof.json"
        proof_path.write_text(json.dumps({"leaf_hash": "aa" * 32, "proof_steps": [{"Up": "bb" * 32}]}))

        code = main(["verify", "--root-hash", "aa" * 32, "--proof", str(proof_path)])

        assert code == EXIT_RUNTIME_ERROR
        assert f"Error [{ErrorCodes.DESERIALIZATION_MISMATCH}]" in capsys.readouterr().err


class TestCheckAndShowCommands:
    """Tests for merkle check and merkle show."""

    def test_check_consistent_tree(self, workspace, record_file, capsys):
        tree_path = _build(workspace, record_file)
        capsys.readouterr()

        code = main(["check", "--tree", str(tree_path)])

        assert code == EXIT_SUCCESS
        assert "integrity_ok: true" in capsys.readouterr().out

    def test_check_tampered_tree(self, workspace, record_file, capsys):
        tree_path = _build(workspace, record_file)
        data = json.loads(tree_path.read_text())
        data["root"]["left"]["hash"] = "00" * 32
        tree_path.write_text(json.dumps(data))
        capsys.readouterr()

        code = main(["check", "--tree", str(tree_path)])

        assert code == EXIT_VERIFICATION_FAILED
        out = capsys.readouterr().out
        assert "integrity_ok: false" in out
        assert "Node hash mismatch at path 'L'" in out
        assert "Node hash mismatch at path 'root'" in out
        assert "errors (2):" in out

    def test_check_json(self, workspace, record_file, capsys):
        tree_path = _build(workspace, record_file)
        capsys.readouterr()

        code = main(["check", "--tree", str(tree_path), "--json"])

        assert code == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is True
        assert report["passed_count"] == 1
        assert report["error_count"] == 0
        assert report["checks"][0]["check_id"] == "node_hash"

    def test_show_renders_tree(self, workspace, record_file, records, capsys):
        tree_path = _build(workspace, record_file)
        capsys.readouterr()

        code = main(["show", "--tree", str(tree_path)])

        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out == build_merkle_tree(records).render()

    def test_show_malformed_document(self, workspace, capsys):
        tree_path = workspace / "tree.json"
        tree_path.write_text("not json")

        assert main(["show", "--tree", str(tree_path)]) == EXIT_RUNTIME_ERROR
        assert f"Error [{ErrorCodes.DESERIALIZATION_MISMATCH}]" in capsys.readouterr().err


class TestMainAndConfig:
    """Tests for global options and the config command."""

    def test_no_command_prints_help(self, isolated_cli, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR
        assert "usage: merkle" in capsys.readouterr().out

    def test_config_init_and_show(self, isolated_cli, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (isolated_cli / "merkle.json").exists()

        # Second init refuses to overwrite
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR
        capsys.readouterr()

        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["log_level"] == "WARNING"
        assert shown["default_output_format"] == "human"

    def test_output_format_from_env(self, workspace, record_file, monkeypatch, capsys):
        monkeypatch.setenv("MERKLE_OUTPUT_FORMAT", "json")

        code = main(["build", "--input", str(record_file), "--output", str(workspace / "t.json")])

        assert code == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["ok"] is True

    def test_json_indent_from_config_file(self, workspace, record_file, capsys):
        config_path = workspace / "custom.json"
        config_path.write_text(json.dumps({"json_indent": 4}))
        tree_path = workspace / "t.json"

        code = main([
            "--config", str(config_path),
            "build", "--input", str(record_file), "--output", str(tree_path),
        ])

        assert code == EXIT_SUCCESS
        assert tree_path.read_text().startswith('{\n    "root"')

    def test_bad_config_file(self, isolated_cli, capsys):
        config_path = isolated_cli / "bad.json"
        config_path.write_text(json.dumps({"default_output_format": "xml"}))

        assert main(["--config", str(config_path), "config", "--show"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err

    def test_missing_config_file(self, isolated_cli, capsys):
        code = main(["--config", str(isolated_cli / "absent.json"), "config", "--show"])

        assert code == EXIT_RUNTIME_ERROR
