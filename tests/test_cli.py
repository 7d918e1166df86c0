"""
Tests for the command-line interface.

Tests for the CLI commands including:
- Main CLI group
- lint (formats, filters, exit codes, config discovery)
- rules
- init
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from kanon.cli.main import EXIT_CLEAN, EXIT_ERROR, EXIT_VIOLATIONS, cli


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path, clean_source):
    """A project with one clean and one dirty Swift file."""
    (tmp_path / "Clean.swift").write_text(clean_source)
    (tmp_path / "Dirty.swift").write_text("let Value = 1 \n")
    return tmp_path


class TestCLIGroup:
    """Tests for main CLI group."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Kanon" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "Kanon v0.1.0" in result.output

    def test_cli_no_command(self, runner):
        result = runner.invoke(cli)
        assert result.exit_code == 0
        assert "Usage:" in result.output


class TestLintCommand:
    """Tests for lint command."""

    def test_clean_file(self, runner, project):
        result = runner.invoke(cli, ["lint", str(project / "Clean.swift")])
        assert result.exit_code == EXIT_CLEAN
        assert "0 violation(s) in 1 file(s)" in result.output

    def test_violations(self, runner, project):
        result = runner.invoke(cli, ["lint", str(project)])
        assert result.exit_code == EXIT_VIOLATIONS
        assert "[whitespace.trailing]" in result.output
        assert "[naming.value-name]" in result.output
        assert "Dirty.swift:1:5: warning" in result.output
        assert "2 violation(s) in 2 file(s)" in result.output

    def test_json_format(self, runner, project):
        result = runner.invoke(cli, ["lint", str(project / "Dirty.swift"), "--format", "json"])
        assert result.exit_code == EXIT_VIOLATIONS
        records = json.loads(result.stdout)
        assert [r["ruleId"] for r in records] == ["naming.value-name", "whitespace.trailing"]
        assert all(r["path"].endswith("Dirty.swift") for r in records)

    def test_toon_format(self, runner, project):
        result = runner.invoke(cli, ["lint", str(project / "Dirty.swift"), "--format", "toon"])
        assert result.exit_code == EXIT_VIOLATIONS
        assert "whitespace.trailing" in result.stdout

    def test_category_filter(self, runner, project):
        result = runner.invoke(
            cli, ["lint", str(project / "Dirty.swift"), "--category", "whitespace"]
        )
        assert result.exit_code == EXIT_VIOLATIONS
        assert "[whitespace.trailing]" in result.output
        assert "[naming.value-name]" not in result.output

    def test_disable(self, runner, project):
        result = runner.invoke(
            cli,
            [
                "lint",
                str(project / "Dirty.swift"),
                "--disable",
                "whitespace.trailing",
                "--disable",
                "naming.value-name",
            ],
        )
        assert result.exit_code == EXIT_CLEAN

    def test_max_line_length(self, runner, tmp_path):
        path = tmp_path / "Long.swift"
        path.write_text("let value = 1\n")
        result = runner.invoke(cli, ["lint", str(path), "--max-line-length", "10"])
        assert result.exit_code == EXIT_VIOLATIONS
        assert "[line-length.max]" in result.output

    def test_malformed_file(self, runner, tmp_path):
        path = tmp_path / "Broken.swift"
        path.write_text("func f() {\n")
        result = runner.invoke(cli, ["lint", str(path)])
        assert result.exit_code == EXIT_ERROR
        assert "Unclosed '{'" in result.output
        assert "1 file(s) could not be linted" in result.output

    def test_invalid_config(self, runner, project):
        config = project / "bad.json"
        config.write_text("{ nope")
        result = runner.invoke(cli, ["lint", str(project), "--config", str(config)])
        assert result.exit_code == EXIT_ERROR
        assert "[Error]" in result.output

    def test_discovers_project_config(self, runner, project):
        (project / ".kanon").mkdir()
        (project / ".kanon" / "config.json").write_text(
            json.dumps({"disabled_rules": ["whitespace.trailing", "naming.value-name"]})
        )
        result = runner.invoke(cli, ["lint", str(project)])
        assert result.exit_code == EXIT_CLEAN

    def test_missing_path(self, runner, tmp_path):
        result = runner.invoke(cli, ["lint", str(tmp_path / "nope.swift")])
        assert result.exit_code == 2

    def test_empty_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["lint", str(tmp_path)])
        assert result.exit_code == EXIT_CLEAN


class TestRulesCommand:
    """Tests for rules command."""

    def test_lists_rules(self, runner):
        result = runner.invoke(cli, ["rules"])
        assert result.exit_code == 0
        assert "spacing.binary-operator" in result.output
        assert "whitespace.tab-indent" in result.output

    def test_category(self, runner):
        result = runner.invoke(cli, ["rules", "--category", "naming"])
        lines = result.output.strip().splitlines()
        assert len(lines) == 3
        assert all(line.startswith("naming.") for line in lines)

    def test_json(self, runner):
        result = runner.invoke(cli, ["rules", "--json"])
        rules = json.loads(result.output)
        assert len(rules) == 18
        assert set(rules[0]) == {"id", "category", "severity", "description"}


class TestInitCommand:
    """Tests for init command."""

    def test_init_creates_config(self, runner, tmp_path):
        result = runner.invoke(cli, ["init", str(tmp_path)])
        assert result.exit_code == 0
        assert "initialized" in result.output.lower()

        config_file = tmp_path / ".kanon" / "config.json"
        config = json.loads(config_file.read_text())
        assert config["language"]["max_line_length"] == 100
        assert "spacing" in config["enabled_categories"]

    def test_init_keeps_existing(self, runner, tmp_path):
        runner.invoke(cli, ["init", str(tmp_path)])
        config_file = tmp_path / ".kanon" / "config.json"
        config_file.write_text("{}")

        result = runner.invoke(cli, ["init", str(tmp_path)])
        assert "already exists" in result.output
        assert config_file.read_text() == "{}"

        runner.invoke(cli, ["init", str(tmp_path), "--force"])
        assert config_file.read_text() != "{}"

    def test_init_current_directory(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["init"])
            assert result.exit_code == 0
            assert Path(".kanon/config.json").exists()
