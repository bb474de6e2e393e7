"""
Tests for the command line interface.
"""

import json

import pytest
import yaml
from typer.testing import CliRunner

from meetingslots.cli.app import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "google": {"client_id": "id", "client_secret": "secret"},
                "timezone": "America/Santiago",
                "business_slots": ["09:00", "11:00"],
                "lookahead_days": 2,
                "token_path": str(tmp_path / "tokens.json"),
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def busy_file(tmp_path):
    path = tmp_path / "busy.json"
    path.write_text(
        json.dumps([{"start": "2024-11-25T09:00:00-03:00", "end": "2024-11-25T12:00:00-03:00"}]),
        encoding="utf-8",
    )
    return path


def test_availability_json_with_mock_data(config_file, busy_file):
    result = runner.invoke(
        app,
        [
            "availability",
            "--config", str(config_file),
            "--mock",
            "--mock-data", str(busy_file),
            "--at", "2024-11-25T08:00",
            "--json",
        ],
    )

    assert result.exit_code == 0, result.output
    assert '"2024-11-26"' in result.output
    assert '"2024-11-25"' not in result.output


def test_availability_table(config_file):
    result = runner.invoke(
        app,
        ["availability", "--config", str(config_file), "--mock", "--at", "2024-11-25T08:00"],
    )

    assert result.exit_code == 0, result.output
    assert "2024-11-25" in result.output
    assert "09:00" in result.output


def test_availability_rejects_bad_lookahead(config_file):
    result = runner.invoke(app, ["availability", "--config", str(config_file), "--mock", "--lookahead", "0"])

    assert result.exit_code == 1


def test_availability_without_authorization(config_file):
    result = runner.invoke(app, ["availability", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "not connected" in result.output


def test_invalid_config_exits(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {"google": {"client_id": "id", "client_secret": "secret"}, "business_slots": ["25:00"]}
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["availability", "--config", str(path), "--mock"])

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_book_with_mock(config_file):
    result = runner.invoke(
        app,
        [
            "book",
            "--config", str(config_file),
            "--mock",
            "--start", "2024-11-25T09:00:00-03:00",
            "--end", "2024-11-25T09:45:00-03:00",
            "--name", "Ana",
            "--email", "ana@example.com",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "mock-event-1" in result.output


def test_book_with_blank_email(config_file):
    result = runner.invoke(
        app,
        [
            "book",
            "--config", str(config_file),
            "--mock",
            "--start", "2024-11-25T09:00:00-03:00",
            "--end", "2024-11-25T09:45:00-03:00",
            "--name", "Ana",
            "--email", " ",
        ],
    )

    assert result.exit_code == 1
    assert "missing required field" in result.output


def test_status_and_logout(config_file, tmp_path):
    (tmp_path / "tokens.json").write_text(json.dumps({"token": "at", "refresh_token": "rt"}), encoding="utf-8")

    assert runner.invoke(app, ["status", "--config", str(config_file)]).exit_code == 0

    result = runner.invoke(app, ["logout", "--config", str(config_file)])
    assert result.exit_code == 0
    assert not (tmp_path / "tokens.json").exists()

    assert runner.invoke(app, ["status", "--config", str(config_file)]).exit_code == 1


def test_auth_url(config_file):
    result = runner.invoke(app, ["auth-url", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "accounts.google.com" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "meetingslots" in result.output
