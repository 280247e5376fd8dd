"""
Tests for the ``uritpl`` command line.
"""

import json

import pytest
from click.testing import CliRunner

from uritpl.cli.__main__ import cli
from uritpl.cli.commands.bindings import BindingsError, load_vars_file, parse_assignments


@pytest.fixture
def runner():
    return CliRunner()


class TestExpandCommand:
    """Test ``uritpl expand``."""

    def test_simple(self, runner):
        result = runner.invoke(cli, ["expand", "{/a}{?q}", "-v", "a=users", "-v", "q=x y"])
        assert result.exit_code == 0, result.output
        assert result.output == "/users?q=x%20y\n"

    def test_repeated_name_builds_list(self, runner):
        result = runner.invoke(cli, ["expand", "{/p*}", "-v", "p=x", "-v", "p=y", "-v", "p=z"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "/x/y/z"

    def test_value_with_equals(self, runner):
        result = runner.invoke(cli, ["expand", "{?f}", "--var", "f=a=b"])
        assert result.output.strip() == "?f=a%3Db"

    def test_json_vars_file(self, runner, tmp_path):
        path = tmp_path / "bindings.json"
        path.write_text(json.dumps({"keys": {"semi": ";", "dot": "."}}))
        result = runner.invoke(cli, ["expand", "{?keys*}", "--vars", str(path)])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "?semi=%3B&dot=."

    def test_yaml_vars_file(self, runner, tmp_path):
        path = tmp_path / "bindings.yaml"
        path.write_text("list:\n  - red\n  - green\nid: 7\n")
        result = runner.invoke(cli, ["expand", "{/id}{?list*}", "--vars", str(path)])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "/7?list=red&list=green"

    def test_options_override_file(self, runner, tmp_path):
        path = tmp_path / "bindings.json"
        path.write_text('{"a": "file"}')
        result = runner.invoke(cli, ["expand", "{a}", "--vars", str(path), "-v", "a=cli"])
        assert result.output.strip() == "cli"

    def test_bad_assignment(self, runner):
        result = runner.invoke(cli, ["expand", "{a}", "-v", "a"])
        assert result.exit_code == 1
        assert "Expected name=value" in result.output

    def test_bad_vars_file(self, runner, tmp_path):
        path = tmp_path / "bindings.json"
        path.write_text("[1, 2]")
        result = runner.invoke(cli, ["expand", "{a}", "--vars", str(path)])
        assert result.exit_code == 1
        assert "must be a mapping" in result.output

    def test_syntax_error(self, runner):
        result = runner.invoke(cli, ["expand", "{a"])
        assert result.exit_code == 1
        assert "TemplateSyntaxError: Unterminated expression" in result.output

    def test_strict_failure(self, runner):
        result = runner.invoke(cli, ["expand", "a#b#{x}", "-v", "x=1"])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "TemplateExpansionError: Expanded result is not a valid URI reference" in result.output
        assert "Result: a#b#1" in result.output

    def test_no_strict(self, runner):
        result = runner.invoke(cli, ["expand", "a#b#{x}", "-v", "x=1", "--no-strict"])
        assert result.exit_code == 0
        assert result.output.strip() == "a#b#1"

    def test_env_file_settings(self, runner, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("URITPL_STRICT=false\n")
        result = runner.invoke(cli, ["--env-file", str(env_file), "expand", "a#b#"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "a#b#"

    def test_invalid_settings(self, runner, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("URITPL_LOG_LEVEL=chatty\n")
        result = runner.invoke(cli, ["--env-file", str(env_file), "expand", "{a}"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output


class TestParseCommand:
    """Test ``uritpl parse``."""

    def test_json(self, runner):
        result = runner.invoke(cli, ["parse", "/x{?a,b*}", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["variables"] == ["a", "b"]
        assert data["expressions"][0]["operator"] == "QUERY"

    def test_summary(self, runner):
        result = runner.invoke(cli, ["parse", "/x{?a}{/b:3}"])
        assert result.exit_code == 0, result.output
        assert "Canonical:" in result.output
        assert "/x{?a}{/b:3}" in result.output
        assert "{?a}  query  [2, 6)" in result.output
        assert "{/b:3}  path  [6, 12)" in result.output

    def test_literal_only(self, runner):
        result = runner.invoke(cli, ["parse", "/static"])
        assert result.exit_code == 0
        assert "Expressions" not in result.output

    def test_syntax_error(self, runner):
        result = runner.invoke(cli, ["parse", "{}"])
        assert result.exit_code == 1
        assert "Empty variable list" in result.output


class TestVarsCommand:
    """Test ``uritpl vars``."""

    def test_discovery_order(self, runner):
        result = runner.invoke(cli, ["vars", "{b}{?a,b}{#c}"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["b", "a", "c"]


class TestGroup:
    """Test the command group."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("expand", "parse", "vars"):
            assert name in result.output


class TestBindings:
    """Test binding helpers."""

    def test_parse_assignments(self):
        assert parse_assignments(["a=1", "b=", "a=2"]) == {"a": ["1", "2"], "b": ""}

    def test_empty_name(self):
        with pytest.raises(BindingsError):
            parse_assignments(["=1"])

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_vars_file(path) == {}

    def test_bad_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(BindingsError, match="Cannot read bindings"):
            load_vars_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(BindingsError):
            load_vars_file(tmp_path / "missing.json")
