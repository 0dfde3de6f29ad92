import pytest
from click.testing import CliRunner

from dockerd import cli as cli_module


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    # the runner's streams are closed after each invoke
    monkeypatch.setattr(cli_module, "setup_logging", lambda *args, **kwargs: None)


def test_exec_help_prints_summary():
    result = CliRunner().invoke(cli_module.cli, ["exec", "help"])

    assert result.exit_code == 0
    assert "Usage: docker COMMAND [arg...]" in result.output


def test_exec_command_usage():
    result = CliRunner().invoke(cli_module.cli, ["exec", "layers", "--help"])

    assert result.exit_code == 0
    assert "docker layers [OPTIONS] [NAME]" in result.output


def test_exec_unknown_command_fails():
    result = CliRunner().invoke(cli_module.cli, ["exec", "frobnicate"])

    assert result.exit_code == 1
    assert "Error: No such command: frobnicate" in result.output
