"""Tests for the primary CLI entry point and command lookup."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from qbo_query.cli.main import cli, main
from qbo_query.constants import ENTITY_COMMANDS


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    config_dir = tmp_path / "config"
    monkeypatch.setenv("QBO_QUERY_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("QBO_QUERY_CREDENTIALS", str(tmp_path / "missing.json"))
    return config_dir


def test_every_entity_command_is_registered() -> None:
    for command_name in ENTITY_COMMANDS:
        assert command_name in cli.commands

    for command_name in ("setup", "check", "refresh", "get", "refs", "config"):
        assert command_name in cli.commands


def test_command_lookup_is_case_insensitive() -> None:
    result = CliRunner().invoke(cli, ["Customers", "--help"])

    assert result.exit_code == 0
    assert "List Customer records." in result.output


def test_entity_help_lists_filters() -> None:
    result = CliRunner().invoke(cli, ["invoices", "--help"])

    assert result.exit_code == 0
    for option in ("--start", "--end", "--query-by", "--where", "--max"):
        assert option in result.output


def test_main_returns_one_on_unknown_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["payroll"]) == 1

    document = json.loads(capsys.readouterr().out)
    assert document["success"] is False
    assert "payroll" in document["error"]


def test_main_returns_one_on_bad_option(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["customers", "--bogus"]) == 1

    document = json.loads(capsys.readouterr().out)
    assert document["success"] is False
    assert "--bogus" in document["error"]


def test_main_returns_one_on_command_failure(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["customers"]) == 1

    document = json.loads(capsys.readouterr().out)
    assert set(document) == {"success", "error"}
    assert "Credentials file not found" in document["error"]


def test_main_returns_zero_on_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--help"]) == 0

    assert "QuickBooks Online query tool" in capsys.readouterr().out


def test_logging_goes_to_config_dir(isolated_config: Path) -> None:
    CliRunner().invoke(cli, ["customers"])

    assert (isolated_config / "app.log").exists()
