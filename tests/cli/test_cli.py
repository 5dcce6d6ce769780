"""Tests for the `python . <command>` CLI."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
        timeout=60,
    )


@pytest.fixture
def incomplete_tabs_file(tmp_path, incomplete_tabs_document) -> Path:
    path = tmp_path / "incomplete.json"
    path.write_text(json.dumps(incomplete_tabs_document), encoding="utf-8")
    return path


@pytest.fixture
def complete_tabs_file(tmp_path, complete_tabs_document) -> Path:
    path = tmp_path / "complete.json"
    path.write_text(json.dumps(complete_tabs_document), encoding="utf-8")
    return path


@pytest.mark.integration
class TestHelp:
    def test_no_command_shows_help(self):
        result = _run()
        assert result.returncode == 1
        assert "Usage: python . {command}" in result.stdout

    def test_help_flag(self):
        result = _run("--help")
        assert result.returncode == 0
        assert "patterns" in result.stdout

    def test_unknown_command(self):
        assert _run("frobnicate").returncode == 1


@pytest.mark.integration
class TestPatternsCommand:
    def test_list(self):
        result = _run("patterns", "list")

        assert result.returncode == 0
        assert json.loads(result.stdout)["count"] == 6

    def test_list_by_category(self):
        result = _run("patterns", "list", "--category", "Forms")

        data = json.loads(result.stdout)
        assert [p["id"] for p in data["patterns"]] == ["pattern.form"]

    def test_list_rejects_unknown_layer(self):
        result = _run("patterns", "list", "--layer", "organisms")
        assert result.returncode == 2

    def test_show(self):
        result = _run("patterns", "show", "pattern.tabs")

        assert result.returncode == 0
        assert json.loads(result.stdout)["name"] == "Tabs"

    def test_show_unknown(self):
        result = _run("patterns", "show", "pattern.nope")

        assert result.returncode == 1
        assert 'Pattern "pattern.nope" not found' in result.stderr

    def test_search(self):
        result = _run("patterns", "search", "modal")

        data = json.loads(result.stdout)
        assert [p["id"] for p in data["patterns"]] == ["pattern.dialog"]


@pytest.mark.integration
class TestDocumentCommands:
    def test_detect(self, incomplete_tabs_file):
        result = _run("detect", str(incomplete_tabs_file))

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["count"] == 1
        assert data["instances"][0]["rootNodeId"] == "tablist"

    def test_detect_missing_file(self, tmp_path):
        result = _run("detect", str(tmp_path / "missing.json"))

        assert result.returncode == 1
        assert "Document not found" in result.stderr

    def test_detect_directory_path(self, tmp_path):
        result = _run("detect", str(tmp_path))

        assert result.returncode == 1
        assert "Cannot read document" in result.stderr
        assert "Traceback" not in result.stderr

    def test_validate_non_utf8_file(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"name": "caf\xe9"}')

        result = _run("validate", str(path))

        assert result.returncode == 1
        assert "not UTF-8" in result.stderr
        assert "Traceback" not in result.stderr

    def test_validate_reports_without_failing(self, incomplete_tabs_file):
        result = _run("validate", str(incomplete_tabs_file))

        assert result.returncode == 0
        assert json.loads(result.stdout)["valid"] is False

    def test_validate_strict_exit(self, incomplete_tabs_file):
        assert _run("validate", str(incomplete_tabs_file), "--strict-exit").returncode == 1

    def test_validate_strict_exit_on_valid_document(self, complete_tabs_file):
        result = _run("validate", str(complete_tabs_file), "--strict-exit")

        assert result.returncode == 0
        assert json.loads(result.stdout)["valid"] is True

    def test_validate_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = _run("validate", str(path))

        assert result.returncode == 1
        assert "Invalid JSON" in result.stderr

    def test_validate_schema_errors(self, tmp_path):
        path = tmp_path / "no-artboards.json"
        path.write_text(json.dumps({"id": "doc", "name": "Doc"}), encoding="utf-8")

        result = _run("validate", str(path))

        assert result.returncode == 1
        assert json.loads(result.stdout)["document_errors"]


@pytest.mark.integration
class TestGenerateCommand:
    def test_generate_to_stdout(self):
        result = _run("generate", "pattern.card", "--name", "Card")

        assert result.returncode == 0
        document = json.loads(result.stdout)
        assert document["name"] == "Card"
        assert len(document["artboards"][0]["children"]) == 4

    def test_generate_nested_to_file(self, tmp_path):
        output = tmp_path / "out" / "dialog.json"

        result = _run(
            "generate", "pattern.dialog", "--name", "Confirm", "--nested", "-o", str(output)
        )

        assert result.returncode == 0
        document = json.loads(output.read_text(encoding="utf-8"))
        assert len(document["artboards"][0]["children"]) == 2

    def test_generate_help_recommends_nested(self):
        result = _run("generate", "--help")

        assert result.returncode == 0
        text = " ".join(result.stdout.split())
        assert "Use --nested for a document that passes validate" in text

    def test_flat_card_fails_validation_nested_passes(self, tmp_path):
        flat = tmp_path / "flat.json"
        nested = tmp_path / "nested.json"
        _run("generate", "pattern.card", "--name", "Card", "-o", str(flat))
        _run("generate", "pattern.card", "--name", "Card", "--nested", "-o", str(nested))

        flat_report = json.loads(_run("validate", str(flat)).stdout)
        nested_report = json.loads(_run("validate", str(nested)).stdout)

        assert flat_report["valid"] is False
        assert nested_report["valid"] is True

    def test_generate_requires_name(self):
        assert _run("generate", "pattern.card").returncode == 2

    def test_generate_unknown_pattern(self):
        result = _run("generate", "pattern.nope", "--name", "X")

        assert result.returncode == 1
        assert "pattern.nope" in result.stderr


@pytest.mark.integration
class TestMCPCommand:
    def test_info(self):
        result = _run("mcp", "info")

        assert result.returncode == 0
        assert "canvas-patterns MCP Server" in result.stdout
        assert "pattern.tabs" in result.stdout

    def test_no_subcommand_prints_usage(self):
        result = _run("mcp")

        assert result.returncode == 1
        assert "MCP Server Commands" in result.stdout
