"""Tests for the ``holepuncher doctor`` command (cli/doctor.py).

Nothing here touches the network; configuration checks read files
written into ``tmp_path``.

Coverage:
* Individual check functions return correct tuples.
* Doctor returns GENERAL_ERROR when a check fails.
* Plain output is used when rich is not importable.
* CLI routing dispatches to ``run_doctor``.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from holepuncher.cli import exit_codes


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from holepuncher.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status


class TestLibraryCheck:
    def test_installed(self) -> None:
        from holepuncher.cli.doctor import _library_check

        label, value, status = _library_check("httpx", "httpx")
        assert label == "httpx"
        assert value != "NOT INSTALLED"
        assert "OK" in status

    @patch.dict("sys.modules", {"nacl": None})
    def test_not_installed(self) -> None:
        from holepuncher.cli.doctor import _library_check

        label, value, status = _library_check("PyNaCl", "nacl")
        assert label == "PyNaCl"
        assert value == "NOT INSTALLED"
        assert "FAIL" in status


class TestConfigCheck:
    def test_not_set_is_warning(self) -> None:
        from holepuncher.cli.doctor import _config_check

        (label, value, status), runtime_dir = _config_check("")
        assert label == "config"
        assert value == "not set"
        assert "WARN" in status
        assert runtime_dir is None

    def test_loaded(self, config_file: Path, tmp_path: Path) -> None:
        from holepuncher.cli.doctor import _config_check

        (_label, value, status), runtime_dir = _config_check(str(config_file))
        assert value == str(config_file)
        assert "OK" in status
        assert runtime_dir == tmp_path.as_posix()

    def test_unreadable_is_failure(self, tmp_path: Path) -> None:
        from holepuncher.cli.doctor import _config_check

        (_label, value, status), runtime_dir = _config_check(str(tmp_path / "missing.toml"))
        assert "Error reading config file" in value
        assert "FAIL" in status
        assert runtime_dir is None


class TestRuntimeDirCheck:
    def test_writable(self, tmp_path: Path) -> None:
        from holepuncher.cli.doctor import _runtime_dir_check

        _label, _value, status = _runtime_dir_check(str(tmp_path))
        assert "OK" in status

    def test_missing_is_warning(self, tmp_path: Path) -> None:
        from holepuncher.cli.doctor import _runtime_dir_check

        _label, value, status = _runtime_dir_check(str(tmp_path / "nope"))
        assert "WARN" in status
        assert value.endswith("nope")


class TestOsCheck:
    @patch("holepuncher.cli.doctor.platform.machine", return_value="arm64")
    @patch("holepuncher.cli.doctor.platform.release", return_value="23.4.0")
    @patch("holepuncher.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        from holepuncher.cli.doctor import _os_check

        label, value, status = _os_check()
        assert label == "OS"
        assert value == "macOS 23.4.0 (arm64)"
        assert "OK" in status


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    def test_valid_config_succeeds(self, config_file: Path) -> None:
        from holepuncher.cli.doctor import run_doctor

        assert run_doctor(str(config_file)) == exit_codes.SUCCESS

    def test_missing_config_path_only_warns(self) -> None:
        from holepuncher.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.SUCCESS

    def test_broken_config_fails(self, tmp_path: Path) -> None:
        from holepuncher.cli.doctor import run_doctor

        path = tmp_path / "broken.toml"
        path.write_text("[runtime", encoding="utf-8")
        assert run_doctor(str(path)) == exit_codes.GENERAL_ERROR

    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_without_rich(
        self, config_file: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        from holepuncher.cli.doctor import run_doctor

        code = run_doctor(str(config_file))
        captured = capsys.readouterr()
        assert code == exit_codes.SUCCESS
        assert "holepuncher doctor" in captured.err
        assert "runtime dir" in captured.err
        assert "All checks passed." in captured.err
        assert "[green]" not in captured.err


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("holepuncher.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_receives_config_path(self, mock_run: MagicMock) -> None:
        from holepuncher.cli.app import main

        assert main(["-c", "/etc/hp.toml", "doctor"]) == exit_codes.SUCCESS
        mock_run.assert_called_once_with("/etc/hp.toml")

    @patch("holepuncher.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, _mock_run: MagicMock) -> None:
        from holepuncher.cli.app import main

        assert main(["doctor"]) == exit_codes.GENERAL_ERROR
