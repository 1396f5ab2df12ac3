"""Tests for the serve command."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from modelctl.cli import cli


class TestServeCommand:
    def test_serve_registered(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert "serve" in result.output

    def test_serve_help_shows_transports(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["serve", "--help"])
        assert "stdio" in result.output
        assert "streamable-http" in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_serve_invokes_create_server(self, cli_runner: CliRunner) -> None:
        server = MagicMock()
        with (
            patch("modelctl.mcp.server.mcp_available", True),
            patch("modelctl.mcp.server.create_server", return_value=server) as create_server,
        ):
            result = cli_runner.invoke(
                cli, ["serve", "--transport", "sse", "--host", "0.0.0.0", "--port", "9000"]
            )

        assert result.exit_code == 0, result.output
        _, kwargs = create_server.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
        server.run.assert_called_once_with(transport="sse")

    @pytest.mark.usefixtures("_isolated_project")
    def test_transport_defaults_to_config(
        self, cli_runner: CliRunner, model_tree: Path
    ) -> None:
        (model_tree / "modelctl.toml").write_text(
            '[mcp]\ntransport = "streamable-http"\n', encoding="utf-8"
        )
        server = MagicMock()
        with (
            patch("modelctl.mcp.server.mcp_available", True),
            patch("modelctl.mcp.server.create_server", return_value=server),
        ):
            result = cli_runner.invoke(cli, ["serve"])
        assert result.exit_code == 0, result.output
        server.run.assert_called_once_with(transport="streamable-http")

    @pytest.mark.usefixtures("_isolated_project")
    def test_serve_without_mcp(self, cli_runner: CliRunner) -> None:
        with patch("modelctl.mcp.server.mcp_available", False):
            result = cli_runner.invoke(cli, ["serve"])
        assert result.exit_code == 1
        assert "MCP not installed" in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_serve_disabled_by_config(self, cli_runner: CliRunner, model_tree: Path) -> None:
        (model_tree / "modelctl.toml").write_text("[mcp]\nenabled = false\n", encoding="utf-8")
        with patch("modelctl.mcp.server.mcp_available", True):
            result = cli_runner.invoke(cli, ["serve"])
        assert result.exit_code == 1
        assert "disabled" in result.output
