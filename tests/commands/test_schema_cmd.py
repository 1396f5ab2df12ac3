"""Tests for the schema command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from modelctl.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestSchemaCommand:
    def test_json_in_memory(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "schema"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["data"]["count"] == 5
        assert "entity" in data["data"]["schemas"]

    def test_writes_directory(self, cli_runner: CliRunner, model_tree: Path) -> None:
        result = cli_runner.invoke(cli, ["schema", "-o", "schemas"])
        assert result.exit_code == 0, result.output
        assert (model_tree / "schemas" / "entity.schema.json").is_file()
        assert (model_tree / "schemas" / "validation-profiles.schema.json").is_file()
