"""Tests for vish.cli -- the click entry point."""

from __future__ import annotations

import logging

import pytest
from click.testing import CliRunner

from vish import cli

configure_logging = cli._configure_logging


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    configured = []
    monkeypatch.setattr(cli, "_configure_logging", configured.append)
    return configured


class TestMain:
    def test_batch_mode_exit_status(self, runner) -> None:
        result = runner.invoke(cli.main, [], input="exit 3\n")
        assert result.exit_code == 3

    def test_batch_mode_runs_commands(self, runner) -> None:
        result = runner.invoke(cli.main, [], input="echo hello\nprintf done\n")
        assert result.exit_code == 0
        assert result.output == "hello\ndone"

    def test_status_of_last_command(self, runner) -> None:
        result = runner.invoke(cli.main, [], input="false\n")
        assert result.exit_code == 1

    def test_field_substitution_flag(self, runner) -> None:
        result = runner.invoke(cli.main, ["--field-substitution"], input="echo $(date)\n")
        assert result.output == "command: date\n"

    def test_options_override_environment(self, runner, _no_logging_setup) -> None:
        runner.invoke(
            cli.main,
            ["--log-level", "debug", "--log-file", "vish.log"],
            input="",
            env={"VISH_LOG_LEVEL": "error"},
        )
        (config,) = _no_logging_setup
        assert config.log_level == "debug"
        assert config.log_file == "vish.log"

    def test_environment_configures_logging(self, runner, _no_logging_setup) -> None:
        runner.invoke(cli.main, [], input="", env={"VISH_LOG_LEVEL": "info"})
        assert _no_logging_setup[0].log_level == "info"

    def test_rejects_unknown_log_level(self, runner) -> None:
        result = runner.invoke(cli.main, ["--log-level", "loud"])
        assert result.exit_code == 2


class TestOpenTerminal:
    def test_no_terminal_without_file_descriptors(self, runner) -> None:
        # CliRunner replaces stdin/stdout with in-memory streams
        with runner.isolation():
            assert cli._open_terminal() is None


def test_configure_logging_level(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    configure_logging(cli.ShellConfig(log_level="info", log_file="x.log"))
    assert calls[0]["level"] == logging.INFO
    assert calls[0]["filename"] == "x.log"
