"""Tests for agent.core.client - SDK options and run configuration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from agent.core.client import build_sdk_options, load_run_config, options_for_logging, parse_json_schema

_CONFIG_ENV_VARS = (
    "CLAUDE_MODEL",
    "CLAUDE_MAX_TURNS",
    "CLAUDE_ALLOWED_TOOLS",
    "CLAUDE_DISALLOWED_TOOLS",
    "CLAUDE_APPEND_SYSTEM_PROMPT",
    "CLAUDE_JSON_SCHEMA",
    "CLAUDE_PERMISSION_MODE",
    "SHOW_FULL_OUTPUT",
    "RUNNER_DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestBuildSdkOptions:
    def test_defaults(self):
        options = build_sdk_options()
        assert options.model is None
        assert options.max_turns is None
        assert options.permission_mode == "acceptEdits"
        assert options.system_prompt == {"type": "preset", "preset": "claude_code"}

    def test_append_system_prompt(self):
        options = build_sdk_options(append_system_prompt="Be brief.")
        assert options.system_prompt["append"] == "Be brief."

    def test_json_schema_becomes_output_format(self):
        schema = {"type": "object", "properties": {"ok": {"type": "boolean"}}}
        options = build_sdk_options(json_schema=schema)
        assert options.output_format == {"type": "json_schema", "schema": schema}

    def test_cwd_is_resolved(self, tmp_path: Path):
        options = build_sdk_options(cwd=tmp_path)
        assert options.cwd == str(tmp_path.resolve())


class TestOptionsForLogging:
    def test_env_is_never_logged(self):
        options = build_sdk_options(model="claude-sonnet-4-5", env={"GITHUB_TOKEN": "ghp_secret"})
        described = options_for_logging(options)
        assert "env" not in described
        assert "ghp_secret" not in json.dumps(described, default=str)
        assert described["model"] == "claude-sonnet-4-5"

    def test_empty_fields_are_dropped(self):
        described = options_for_logging(build_sdk_options())
        assert "allowed_tools" not in described
        assert "max_turns" not in described

    def test_callables_are_described_by_name(self):
        def my_stderr(line: str) -> None:
            pass

        options = build_sdk_options()
        options.stderr = my_stderr
        described = options_for_logging(options)
        assert described["stderr"] == "<TestOptionsForLogging.test_callables_are_described_by_name.<locals>.my_stderr>"


class TestLoadRunConfig:
    def test_explicit_values(self):
        config = load_run_config(model="claude-opus-4-5", max_turns=7, allowed_tools="Read,Bash")
        assert config.sdk_options.model == "claude-opus-4-5"
        assert config.sdk_options.max_turns == 7
        assert config.sdk_options.allowed_tools == ["Read", "Bash"]
        assert config.show_full_output is False
        assert config.has_json_schema is False

    def test_environment_fallbacks(self, monkeypatch):
        monkeypatch.setenv("CLAUDE_MODEL", "claude-haiku-4-5")
        monkeypatch.setenv("CLAUDE_MAX_TURNS", "5")
        monkeypatch.setenv("CLAUDE_DISALLOWED_TOOLS", "WebFetch\nWebSearch")
        monkeypatch.setenv("CLAUDE_JSON_SCHEMA", '{"type": "object"}')
        monkeypatch.setenv("SHOW_FULL_OUTPUT", "true")

        config = load_run_config()

        assert config.sdk_options.model == "claude-haiku-4-5"
        assert config.sdk_options.max_turns == 5
        assert config.sdk_options.disallowed_tools == ["WebFetch", "WebSearch"]
        assert config.has_json_schema is True
        assert config.show_full_output is True

    def test_runner_debug_enables_full_output(self, monkeypatch):
        monkeypatch.setenv("RUNNER_DEBUG", "1")
        assert load_run_config().show_full_output is True

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_invalid_max_turns(self, monkeypatch, value):
        monkeypatch.setenv("CLAUDE_MAX_TURNS", value)
        with pytest.raises(ValueError, match="CLAUDE_MAX_TURNS"):
            load_run_config()

    @pytest.mark.parametrize("value", [0, -5])
    def test_invalid_explicit_max_turns(self, value):
        with pytest.raises(ValueError, match="max_turns must be a positive integer"):
            load_run_config(max_turns=value)


class TestParseJsonSchema:
    def test_blank_is_none(self):
        assert parse_json_schema(None) is None
        assert parse_json_schema("  ") is None

    def test_inline(self):
        assert parse_json_schema('{"type": "object"}') == {"type": "object"}

    def test_file(self, tmp_path: Path):
        schema_file = tmp_path / "schema.json"
        schema_file.write_text('{"type": "object", "required": ["ok"]}', encoding="utf-8")
        assert parse_json_schema(str(schema_file)) == {"type": "object", "required": ["ok"]}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Failed to read JSON schema file"):
            parse_json_schema(str(tmp_path / "nope.json"))

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Invalid JSON schema"):
            parse_json_schema("{not json")

    def test_non_object(self, tmp_path: Path):
        schema_file = tmp_path / "schema.json"
        schema_file.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="must be an object"):
            parse_json_schema(str(schema_file))
