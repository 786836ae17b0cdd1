from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from apps.cli.main import app

runner = CliRunner()


def _write_scan(path: Path) -> Path:
    payload = {
        "categories": [
            {
                "name": "repo",
                "todos": [{"content": "@AAAAB task", "location": "a.py:1", "status": "TODO"}],
            }
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _messages(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [record.message for record in caplog.records if record.name == "unitodo.cli"]


def test_sort_logs_start_and_done(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="unitodo.cli")
    records = _write_scan(tmp_path / "scan.json")

    result = runner.invoke(app, ["sort", "--records", str(records), "--mode", "active"])

    assert result.exit_code == 0
    messages = _messages(caplog)
    assert any('"event":"start"' in message and '"command":"sort"' in message for message in messages)
    assert any(
        '"event":"done"' in message and '"count":1' in message and '"mode":"active"' in message
        for message in messages
    )


def test_sort_logs_error_code_for_bad_mode(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="unitodo.cli")
    records = _write_scan(tmp_path / "scan.json")

    result = runner.invoke(app, ["sort", "--records", str(records), "--mode", "bogus"])

    assert result.exit_code == 1
    messages = _messages(caplog)
    assert any(
        '"event":"error"' in message
        and '"error_code":"INVALID_ARGUMENT"' in message
        and '"failure_stage":"args"' in message
        for message in messages
    )
    assert not any('"event":"start"' in message for message in messages)


def test_sort_logs_failure_stage_for_bad_records(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="unitodo.cli")
    records = tmp_path / "scan.json"
    records.write_text("{broken", encoding="utf-8")

    result = runner.invoke(app, ["sort", "--records", str(records)])

    assert result.exit_code == 1
    payloads = [json.loads(message) for message in _messages(caplog)]
    errors = [payload for payload in payloads if payload["event"] == "error"]
    assert errors == [
        {
            "command": "sort",
            "error_code": "INVALID_INPUT",
            "event": "error",
            "failure_stage": "load_records",
        }
    ]


def test_cycle_logs_error_for_uncyclable_marker(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="unitodo.cli")

    result = runner.invoke(app, ["cycle", "--marker", "WAITING", "--content", "x"])

    assert result.exit_code == 2
    assert any(
        '"error_code":"MARKER_NOT_CYCLABLE"' in message and '"command":"cycle"' in message
        for message in _messages(caplog)
    )
