"""Tests for the ``sales-intel`` CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from sales_intel.cli import main

DEMO_ENV: dict[str, str | None] = {
    "API_BASE_URL": None,
    "API_KEY": None,
    "MCP_TIMEOUT": None,
    "MCP_LOG_LEVEL": None,
}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner(env=DEMO_ENV)


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "sales-intelligence-mcp" in result.output
        assert "1.0.0" in result.output


class TestToolsList:
    def test_lists_every_tool(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tools", "list"])
        assert result.exit_code == 0
        assert "find_sales_content" in result.output
        assert "discover_standalone_plays" in result.output
        assert "5 tools" in result.output


class TestToolsCall:
    def test_runs_tool_on_demo_data(self, runner: CliRunner) -> None:
        args = json.dumps({"competitor": "Plaid"})
        result = runner.invoke(main, ["tools", "call", "get_competitive_intel", "--args", args])
        assert result.exit_code == 0
        assert "# Competitive Intelligence: Plaid" in result.output

    def test_invalid_input_is_rendered(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tools", "call", "get_competitive_intel"])
        assert result.exit_code == 0
        assert "competitor" in result.output

    def test_unknown_tool(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tools", "call", "nope"])
        assert result.exit_code == 1
        assert "Tool error" in result.output

    def test_bad_json(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tools", "call", "get_competitive_intel", "--args", "{oops"])
        assert result.exit_code == 2
        assert "not valid JSON" in result.output

    def test_non_object_json(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tools", "call", "get_competitive_intel", "--args", "[1, 2]"])
        assert result.exit_code == 2
        assert "must be a JSON object" in result.output

    def test_bad_configuration(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tools", "call", "get_competitive_intel"], env={"MCP_TIMEOUT": "soon"})
        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestCheck:
    def test_demo_mode(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["check"])
        assert result.exit_code == 0
        assert "Mode: demo" in result.output
        assert "Demo mode" in result.output

    def test_bad_configuration(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["check"], env={"MCP_LOG_LEVEL": "loud"})
        assert result.exit_code == 1
        assert "Configuration error" in result.output
