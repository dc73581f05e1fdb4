"""
Integration tests for the openapi-ir command line.
"""

import json

import pytest
from click.testing import CliRunner

from openapi_ir.cli import cli
from openapi_ir.ir.serialization import document_from_dict
from openapi_ir.loader import load_openapi_document


@pytest.fixture
def runner():
    return CliRunner()


class TestBuildCommand:
    """Test `openapi-ir build`."""

    def test_build_to_stdout(self, runner, fixtures_dir, petstore_ir):
        result = runner.invoke(cli, ["-q", "build", str(fixtures_dir / "petstore_30.yaml")])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert document_from_dict(data) == petstore_ir

    def test_build_to_file_with_check(self, runner, fixtures_dir, temp_output_dir):
        out_file = temp_output_dir / "ir.json"
        result = runner.invoke(cli, [
            "-q", "build", str(fixtures_dir / "graph_31.yaml"), "--out", str(out_file), "--check",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(out_file.read_text())
        assert data["schema_names"] == ["Node", "Parent", "Child", "Filter", "Anything", "Owner"]

    def test_build_error_exits_with_status_1(self, runner, fixtures_dir):
        result = runner.invoke(cli, ["-q", "build", str(fixtures_dir / "invalid_ref.yaml")])
        assert result.exit_code == 1
        assert "IR build failed" in result.output

    def test_missing_file(self, runner, temp_output_dir):
        result = runner.invoke(cli, ["build", str(temp_output_dir / "nope.yaml")])
        assert result.exit_code == 2


class TestRoundtripCommand:
    """Test `openapi-ir roundtrip`."""

    def test_roundtrip_is_stable(self, runner, fixtures_dir, temp_output_dir):
        out_file = temp_output_dir / "written.yaml"
        result = runner.invoke(cli, [
            "-q", "roundtrip", str(fixtures_dir / "petstore_30.yaml"), "--out", str(out_file),
        ])
        assert result.exit_code == 0, result.output
        assert "Round trip is stable" in result.output
        written = load_openapi_document(out_file)
        assert written["openapi"] == "3.0.3"
        assert list(written["paths"]) == ["/pets", "/pets/{petId}"]


class TestGraphCommand:
    """Test `openapi-ir graph`."""

    def test_table(self, runner, fixtures_dir):
        result = runner.invoke(cli, ["-q", "graph", str(fixtures_dir / "graph_31.yaml")])
        assert result.exit_code == 0, result.output
        assert "Parent" in result.output
        assert "cycle: Parent -> Child -> Parent" in result.output
        assert "cycle: Node -> Node" in result.output

    def test_mermaid(self, runner, fixtures_dir):
        result = runner.invoke(cli, ["-q", "graph", str(fixtures_dir / "petstore_30.yaml"), "--mermaid"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("```mermaid")
        assert "NewPet --> PetStatus" in result.output


class TestComplexityCommand:
    """Test `openapi-ir complexity`."""

    def test_default_threshold(self, runner, fixtures_dir):
        result = runner.invoke(cli, ["-q", "complexity", str(fixtures_dir / "petstore_30.yaml")])
        assert result.exit_code == 0, result.output
        assert "threshold 4" in result.output
        assert "inline" in result.output
        assert "named" in result.output

    def test_inline_everything(self, runner, fixtures_dir):
        result = runner.invoke(cli, [
            "-q", "complexity", str(fixtures_dir / "petstore_30.yaml"), "--threshold", "-1",
        ])
        assert result.exit_code == 0, result.output
        assert "named" not in result.output

    def test_threshold_below_minus_one(self, runner, fixtures_dir):
        result = runner.invoke(cli, [
            "complexity", str(fixtures_dir / "petstore_30.yaml"), "--threshold", "-2",
        ])
        assert result.exit_code == 2
