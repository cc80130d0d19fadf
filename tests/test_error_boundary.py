"""Tests for the CLI error boundary (cli/app.py).

Structured log records are captured with ``structlog.testing``; exit
codes are read from the ``SystemExit`` raised by :func:`cli`.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from holepuncher.cli import exit_codes
from holepuncher.cli.app import cli, report_error
from holepuncher.core.provider_errors import FieldError, NormalizedProviderError
from holepuncher.exceptions import (
    ConfigurationError,
    DecodeError,
    ProtocolBugError,
    RpcMethodError,
    SessionNotFoundError,
    TransportError,
    UnsupportedProviderError,
)


def _rpc_error(error: NormalizedProviderError) -> RpcMethodError:
    return RpcMethodError("RPC method returned an error", rpc="linode_create_tunnel", error=error)


# ---------------------------------------------------------------------------
# report_error
# ---------------------------------------------------------------------------

class TestReportError:
    def test_message_and_single_cause(self) -> None:
        error = NormalizedProviderError(
            message="linode api failure",
            cause="region sold out",
            details=(FieldError("region", "region sold out"),),
        )
        with capture_logs() as logs:
            code = report_error(_rpc_error(error))

        assert code == exit_codes.GENERAL_ERROR
        assert [entry.get("server_error") or entry.get("cause") for entry in logs] == [
            "linode api failure",
            "region sold out",
        ]
        assert all(entry["rpc"] == "linode_create_tunnel" for entry in logs)
        assert all(entry["log_level"] == "error" for entry in logs)

    def test_one_entry_per_detail(self) -> None:
        error = NormalizedProviderError(
            message=None,
            cause=None,
            details=(FieldError("region", "unknown"), FieldError("type", "unknown")),
        )
        with capture_logs() as logs:
            report_error(_rpc_error(error))

        assert [(entry["field"], entry["reason"]) for entry in logs] == [
            ("region", "unknown"),
            ("type", "unknown"),
        ]

    def test_protocol_bug_logged(self) -> None:
        with capture_logs() as logs:
            report_error(ProtocolBugError("Expected X, got nothing (BUG)", rpc="linode_list_plans"))

        [entry] = logs
        assert entry["event"] == "Protocol contract violation"
        assert entry["rpc"] == "linode_list_plans"

    def test_transport_error_logged_with_status(self) -> None:
        with capture_logs() as logs:
            report_error(TransportError("HTTP 502: bad gateway", status_code=502, body="bad gateway"))

        [entry] = logs
        assert entry["event"] == "Fundamental RPC failure"
        assert entry["status"] == 502

    @pytest.mark.parametrize(
        "exc",
        [DecodeError("garbled"), SessionNotFoundError("no session")],
    )
    def test_other_errors_print_only(self, exc: Exception, capsys: pytest.CaptureFixture[str]) -> None:
        with capture_logs() as logs:
            code = report_error(exc)

        assert logs == []
        assert code == exit_codes.GENERAL_ERROR
        assert str(exc) in capsys.readouterr().err

    @pytest.mark.parametrize(
        "exc",
        [ConfigurationError("bad"), UnsupportedProviderError("digital_ocean")],
    )
    def test_configuration_errors_exit_code(self, exc: ConfigurationError) -> None:
        assert report_error(exc) == exit_codes.CONFIGURATION_ERROR

    def test_hint_printed(self, capsys: pytest.CaptureFixture[str]) -> None:
        report_error(ConfigurationError("bad", hint="set runtime.provider"))
        assert "set runtime.provider" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# cli() exit codes
# ---------------------------------------------------------------------------

class TestCliBoundary:
    @staticmethod
    def _exit_code(side_effect: object) -> object:
        with patch("holepuncher.cli.app.main", side_effect=side_effect):
            with pytest.raises(SystemExit) as exc_info:
                cli([])
        return exc_info.value.code

    def test_success(self) -> None:
        with patch("holepuncher.cli.app.main", return_value=exit_codes.SUCCESS):
            with pytest.raises(SystemExit) as exc_info:
                cli([])
        assert exc_info.value.code == exit_codes.SUCCESS

    def test_domain_error(self) -> None:
        assert self._exit_code(DecodeError("garbled")) == exit_codes.GENERAL_ERROR

    def test_configuration_error(self) -> None:
        assert self._exit_code(ConfigurationError("bad")) == exit_codes.CONFIGURATION_ERROR

    def test_keyboard_interrupt(self) -> None:
        assert self._exit_code(KeyboardInterrupt()) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert self._exit_code(RuntimeError("kaboom")) == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError: kaboom" in capsys.readouterr().err

    def test_missing_config_end_to_end(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli(["create"])

        assert exc_info.value.code == exit_codes.CONFIGURATION_ERROR
        assert "Config path is empty or missing." in capsys.readouterr().err
