# tests/test_cli.py
"""Tests for the recordschema CLI."""

import json

import pytest
import yaml
from click.testing import CliRunner

from recordschema import __version__
from recordschema.cli import cli

TARGET = "recordschema.property:Property"
DEFINITION = "RecordschemaPropertyProperty"


@pytest.fixture()
def runner():
    return CliRunner()


class TestCLISkeleton:
    """Command registration and global flags."""

    def test_cli_group_exists(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "describe" in result.output
        assert "config" in result.output

    def test_describe_command_registered(self, runner):
        result = runner.invoke(cli, ["describe", "--help"])
        assert result.exit_code == 0
        assert "module:Class" in result.output

    def test_version_flag(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestDescribe:
    """The describe command."""

    def test_json_output(self, runner):
        result = runner.invoke(cli, ["describe", TARGET])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        schema = payload["schema"]
        assert schema["type"] == "object"
        assert schema["properties"]["$ref"] == {"type": "string"}
        assert schema["properties"]["items"] == {"$ref": f"#/$defs/{DEFINITION}"}
        assert "items" not in schema["required"]
        assert "title" in schema["required"]
        assert list(payload["definitions"]) == [DEFINITION]
        assert payload["definitions"][DEFINITION]["type"] == "object"

    def test_enum_choices_are_decoded(self, runner):
        result = runner.invoke(cli, ["describe", TARGET])
        type_node = json.loads(result.output)["schema"]["properties"]["type"]
        assert type_node["enum"] == ["string", "integer", "number", "boolean", "object", "array"]

    def test_dotted_target(self, runner):
        result = runner.invoke(cli, ["describe", "recordschema.property.Property"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["schema"]["type"] == "object"

    def test_yaml_output(self, runner):
        result = runner.invoke(cli, ["describe", TARGET, "--format", "yaml"])
        assert result.exit_code == 0, result.output
        payload = yaml.safe_load(result.output)
        assert payload["schema"]["properties"]["items"]["$ref"] == f"#/$defs/{DEFINITION}"

    def test_no_definitions(self, runner):
        result = runner.invoke(cli, ["describe", TARGET, "--no-definitions"])
        assert result.exit_code == 0, result.output
        assert "definitions" not in json.loads(result.output)

    def test_prefix_option(self, runner):
        result = runner.invoke(cli, ["describe", TARGET, "--prefix", "#/components/schemas/"])
        schema = json.loads(result.output)["schema"]
        assert schema["properties"]["items"]["$ref"] == f"#/components/schemas/{DEFINITION}"

    def test_prefix_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("RECORDSCHEMA_NAME_PREFIX", "#/definitions/")
        result = runner.invoke(cli, ["describe", TARGET])
        schema = json.loads(result.output)["schema"]
        assert schema["properties"]["items"]["$ref"] == f"#/definitions/{DEFINITION}"

    def test_tree_output(self, runner):
        result = runner.invoke(cli, ["describe", TARGET, "--format", "tree"])
        assert result.exit_code == 0, result.output
        assert TARGET in result.output
        assert DEFINITION in result.output
        assert "items" in result.output

    def test_output_file(self, runner, tmp_path):
        out = tmp_path / "property.json"
        result = runner.invoke(cli, ["describe", TARGET, "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "Wrote" in result.output
        assert json.loads(out.read_text(encoding="utf-8"))["schema"]["type"] == "object"

    def test_unknown_module(self, runner):
        result = runner.invoke(cli, ["describe", "no_such_module_xyz:Thing"])
        assert result.exit_code == 1
        assert "Cannot import" in result.output

    def test_unknown_attribute(self, runner):
        result = runner.invoke(cli, ["describe", "recordschema.property:Missing"])
        assert result.exit_code == 1
        assert "no attribute" in result.output

    def test_malformed_target(self, runner):
        result = runner.invoke(cli, ["describe", "Property"])
        assert result.exit_code == 2

    def test_non_record_target(self, runner):
        result = runner.invoke(cli, ["describe", "recordschema.config:get_config"])
        assert result.exit_code == 1
        assert "Expected a dataclass or Pydantic model" in result.output


class TestConfigCommand:
    """The config command."""

    def test_shows_settings(self, runner):
        result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0, result.output
        assert "name_prefix" in result.output
        assert "#/$defs/" in result.output
        assert "unknown_directives" in result.output


class TestLoggingFlags:
    """The --log and --verbose flags."""

    def test_log_flag_writes_session_log(self, runner, tmp_path):
        result = runner.invoke(cli, ["--log", "describe", TARGET])
        assert result.exit_code == 0, result.output
        logs = list((tmp_path / "home" / "logs").glob("recordschema_*.log"))
        assert len(logs) == 1

    def test_verbose_logs_debug_records(self, runner, tmp_path):
        result = runner.invoke(cli, ["--verbose", "describe", TARGET, "--format", "tree"])
        assert result.exit_code == 0, result.output
        (log_file,) = (tmp_path / "home" / "logs").glob("recordschema_*.log")
        text = log_file.read_text(encoding="utf-8")
        assert "DEBUG" in text
        assert f"Registered definition {DEFINITION}" in text
