"""
Tests for the Typer command line interface against the bundled mock data.
"""

import pytest
from typer.testing import CliRunner

from tableslots import __version__
from tableslots.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_day_shows_closure_reason():
    result = runner.invoke(app, ["day", "2024-12-25", "--mock", "--include-past"])

    assert result.exit_code == 0
    assert "Christmas Day" in result.output


def test_day_lists_slots():
    result = runner.invoke(app, ["day", "2024-12-24", "--mock", "--include-past", "--guests", "2"])

    assert result.exit_code == 0
    assert "17:00" in result.output
    assert "21:30" in result.output


def test_day_json():
    result = runner.invoke(app, ["day", "2024-12-24", "--mock", "--include-past", "--json"])

    assert result.exit_code == 0
    assert '"isOpen": true' in result.output
    assert '"openTime": "17:00"' in result.output


def test_day_with_custom_config(isolated_cwd):
    config_path = isolated_cwd / "config.yaml"
    config_path.write_text("restaurant:\n  id: 1\n  name: Custom\ndefaults:\n  guest_count: 4\n")

    result = runner.invoke(app, ["day", "2024-12-31", "--mock", "--include-past", "--json"])

    assert result.exit_code == 0
    assert '"closeTime": "00:00"' in result.output


def test_day_rejects_bad_date():
    result = runner.invoke(app, ["day", "not-a-date", "--mock"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_day_without_config_outside_mock_mode(isolated_cwd):
    result = runner.invoke(app, ["day", "2024-12-24", "--config", str(isolated_cwd / "missing.yaml")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_month_overview():
    result = runner.invoke(app, ["month", "2024-12", "--mock", "--include-past"])

    assert result.exit_code == 0
    assert "Christmas Day" in result.output
    assert "31.12.2024" in result.output


def test_month_rejects_bad_month():
    result = runner.invoke(app, ["month", "2024-13", "--mock"])

    assert result.exit_code == 1


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
