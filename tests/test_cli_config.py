"""Tests for configuration file loading and CLI overrides."""

import json
import logging
from unittest.mock import patch

import pytest

from args import parse_args
from common.logging_utils import configure_logging
from cli_config import ConfigError, apply_config, configure, load_config
from constants import Constants


class TestLoadConfig:
    """YAML and JSON config files."""

    def test_yaml_section(self, tmp_path):
        path = tmp_path / "depimport.yml"
        path.write_text("depimport:\n  git_timeout: 5\n  github_api: yes\n", encoding="utf-8")

        assert load_config(str(path)) == {"git_timeout": 5, "github_api": True}

    def test_json_without_section(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"cache_ttl": 30}), encoding="utf-8")

        assert load_config(str(path)) == {"cache_ttl": 30}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(str(path)) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(str(tmp_path / "nope.yml"))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(str(path))


class TestApplyConfig:
    """Overlaying config values onto Constants."""

    def test_known_keys_are_applied(self):
        apply_config({
            "git_binary": "/usr/local/bin/git",
            "git_timeout": "15",
            "default_constraint_from_lock": "false",
        })

        assert Constants.GIT_BINARY == "/usr/local/bin/git"
        assert Constants.GIT_TIMEOUT_SEC == 15
        assert Constants.DEFAULT_CONSTRAINT_FROM_LOCK is False

    def test_unknown_keys_are_skipped(self, caplog):
        apply_config({"no_such_key": 1})

        assert "no_such_key" in caplog.text

    def test_invalid_value_raises(self):
        with pytest.raises(ConfigError, match="git_timeout"):
            apply_config({"git_timeout": "soon"})


class TestConfigure:
    """Precedence of CLI flags over the config file."""

    def test_cli_overrides_config(self, tmp_path):
        path = tmp_path / "depimport.yml"
        path.write_text("git_timeout: 5\ndefault_constraint_from_lock: true\n", encoding="utf-8")
        args = parse_args(["-i", "records.json", "-c", str(path), "--git-timeout", "9",
                           "--no-default-constraint", "--github-api"])

        configure(args)

        assert Constants.GIT_TIMEOUT_SEC == 9
        assert Constants.DEFAULT_CONSTRAINT_FROM_LOCK is False
        assert Constants.GITHUB_API_ENABLED is True

    def test_defaults_untouched_without_flags(self):
        args = parse_args(["-i", "records.json"])

        configure(args)

        assert Constants.GIT_TIMEOUT_SEC == 60
        assert Constants.DEFAULT_CONSTRAINT_FROM_LOCK is True
        assert Constants.GITHUB_API_ENABLED is False


class TestLogLevel:
    """Log level precedence between the flag and the environment."""

    def test_flag_has_no_default(self):
        assert parse_args(["-i", "records.json"]).LOG_LEVEL is None

    @patch("common.logging_utils.logging.basicConfig")
    def test_environment_level_applies_without_flag(self, mock_basic_config, monkeypatch):
        monkeypatch.setenv("DEPIMPORT_LOG_LEVEL", "DEBUG")

        configure_logging(parse_args(["-i", "records.json"]).LOG_LEVEL)

        assert mock_basic_config.call_args.kwargs["level"] == logging.DEBUG

    @patch("common.logging_utils.logging.basicConfig")
    def test_flag_overrides_environment(self, mock_basic_config, monkeypatch):
        monkeypatch.setenv("DEPIMPORT_LOG_LEVEL", "DEBUG")

        configure_logging(parse_args(["-i", "records.json", "--loglevel", "ERROR"]).LOG_LEVEL)

        assert mock_basic_config.call_args.kwargs["level"] == logging.ERROR

    @patch("common.logging_utils.logging.basicConfig")
    def test_defaults_to_info(self, mock_basic_config, monkeypatch):
        monkeypatch.delenv("DEPIMPORT_LOG_LEVEL", raising=False)

        configure_logging(None)

        assert mock_basic_config.call_args.kwargs["level"] == logging.INFO
