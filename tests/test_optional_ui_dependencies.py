"""Regression tests for the optional rich dependency.

Bootstrap commands must keep working when rich is missing, and command
output falls back to plain printing.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

from holepuncher.cli import exit_codes
from holepuncher.cli.app import main, report_error
from holepuncher.cli.console import emit_json, get_rich_console
from holepuncher.core.models import (
    LinodeRegion,
    ProviderType,
    SessionRecord,
    TunnelCreationParams,
    TunnelInstance,
)
from holepuncher.exceptions import ConfigurationError, EnvironmentError
from holepuncher.infra.session_store import save_session


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)


def test_help_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    code = main(["doctor"])
    assert code in (exit_codes.SUCCESS, exit_codes.GENERAL_ERROR)


def test_rich_console_raises_environment_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(EnvironmentError, match="rich is not installed"):
        get_rich_console()


def test_emit_json_falls_back_to_plain_print(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    emit_json([LinodeRegion(id="eu-central", country="de")])
    assert json.loads(capsys.readouterr().out) == [{"id": "eu-central", "country": "de"}]


def test_error_report_without_rich(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    code = report_error(ConfigurationError("bad config", hint="fix it"))
    err = capsys.readouterr().err
    assert code == exit_codes.CONFIGURATION_ERROR
    assert "bad config" in err
    assert "fix it" in err


def test_var_works_without_rich(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str],
) -> None:
    record = SessionRecord(
        instance_info=TunnelInstance(
            provider=ProviderType.LINODE,
            label="hp",
            ipv4=("192.0.2.1",),
            ipv6=(),
            created_at=datetime(2021, 1, 1, tzinfo=timezone.utc),
        ),
        creation_params=TunnelCreationParams(),
    )
    save_session(record, tmp_path)
    path = tmp_path / "hp.toml"
    path.write_text(f'[runtime]\nruntime_dir = "{tmp_path.as_posix()}"\n', encoding="utf-8")
    _hide_rich(monkeypatch)

    assert main(["-c", str(path), "var", "ipv4"]) == exit_codes.SUCCESS
    assert capsys.readouterr().out == "192.0.2.1\n"
