"""Tests for common.utils and common.actions."""

from __future__ import annotations

from pathlib import Path

import pytest

from common import actions
from common.utils import parse_bool, parse_list, truncate, validate_required_env_vars


class TestTruncate:
    def test_short_string_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_string_at_limit_unchanged(self):
        assert truncate("a" * 10, 10) == "a" * 10

    def test_long_string_cut_with_ellipsis(self):
        result = truncate("abcdefghijk", 5)
        assert result == "abcde..."
        assert len(result) == 5 + 3


class TestParsing:
    @pytest.mark.parametrize("value", ["1", "true", "TRUE", " yes ", "on"])
    def test_parse_bool_true(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "off", "nonsense"])
    def test_parse_bool_false(self, value):
        assert parse_bool(value) is False

    def test_parse_bool_blank_uses_default(self):
        assert parse_bool(None, default=True) is True
        assert parse_bool("  ", default=True) is True

    def test_parse_list_commas_and_newlines(self):
        assert parse_list("Read, Write\nBash(git:*)\n\n") == ["Read", "Write", "Bash(git:*)"]

    def test_parse_list_empty(self):
        assert parse_list(None) == []
        assert parse_list("") == []


class TestValidateRequiredEnvVars:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in (
            "ANTHROPIC_API_KEY",
            "CLAUDE_CODE_OAUTH_TOKEN",
            "CLAUDE_CODE_USE_BEDROCK",
            "CLAUDE_CODE_USE_VERTEX",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_missing_credentials(self):
        success, error = validate_required_env_vars()
        assert success is False
        assert "ANTHROPIC_API_KEY" in error

    def test_api_key(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
        assert validate_required_env_vars() == (True, "")

    def test_oauth_token(self, monkeypatch):
        monkeypatch.setenv("CLAUDE_CODE_OAUTH_TOKEN", "token")
        assert validate_required_env_vars() == (True, "")

    def test_bedrock(self, monkeypatch):
        monkeypatch.setenv("CLAUDE_CODE_USE_BEDROCK", "1")
        assert validate_required_env_vars() == (True, "")


class TestActions:
    def test_warning_annotation_escapes_newlines(self, capsys):
        actions.warning("first\nsecond 100%")
        assert capsys.readouterr().out == "::warning::first%0Asecond 100%25\n"

    def test_error_annotation_goes_to_stderr(self, capsys):
        actions.error("boom")
        assert capsys.readouterr().err == "::error::boom\n"

    def test_set_output_without_github_output(self, monkeypatch):
        monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
        assert actions.set_output("conclusion", "success") is False

    def test_set_output_appends_multiline_value(self, monkeypatch, tmp_path: Path):
        output_file = tmp_path / "output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))

        assert actions.set_output("structured_output", '{"a":\n1}') is True
        assert actions.set_output("conclusion", "success") is True

        lines = output_file.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("structured_output<<ghadelimiter_")
        assert lines[1:3] == ['{"a":', "1}"]
        assert lines[3] == lines[0].split("<<", 1)[1]
        assert lines[4].startswith("conclusion<<")
        assert lines[5] == "success"

    def test_is_debug(self, monkeypatch):
        monkeypatch.setenv("RUNNER_DEBUG", "1")
        assert actions.is_debug() is True
        monkeypatch.setenv("RUNNER_DEBUG", "0")
        assert actions.is_debug() is False
