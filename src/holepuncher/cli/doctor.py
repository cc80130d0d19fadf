"""``holepuncher doctor`` — environment diagnostics command.

Gathers interpreter, library, and configuration information and renders
a Rich table summarising whether this machine can talk to a holepuncher
server.  Nothing is sent over the network.
"""

from __future__ import annotations

import importlib
import os
import platform
import sys
from pathlib import Path

from holepuncher.cli import exit_codes
from holepuncher.cli.console import console
from holepuncher.config import load_settings
from holepuncher.exceptions import ConfigurationError
from holepuncher.version import __version__

_OK = "[green]OK[/green]"
_WARN = "[yellow]WARN[/yellow]"
_FAIL = "[red]FAIL[/red]"

_LIBRARIES: tuple[tuple[str, str], ...] = (
    ("httpx", "httpx"),
    ("PyNaCl", "nacl"),
    ("pydantic", "pydantic"),
    ("structlog", "structlog"),
)


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 11)
    status = _OK if ok else "[red]FAIL (>=3.11 required)[/red]"
    return "Python", version, status


def _library_check(label: str, module_name: str) -> tuple[str, str, str]:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return label, "NOT INSTALLED", _FAIL
    return label, str(getattr(module, "__version__", "unknown")), _OK


def _config_check(config_path: str) -> tuple[tuple[str, str, str], str | None]:
    """Return the config row and, when it loaded, the runtime directory."""
    if not config_path:
        return ("config", "not set", _WARN), None
    try:
        settings = load_settings(config_path)
    except ConfigurationError as exc:
        return ("config", str(exc), _FAIL), None
    return ("config", config_path, _OK), settings.runtime.runtime_dir


def _runtime_dir_check(runtime_dir: str) -> tuple[str, str, str]:
    path = Path(runtime_dir)
    if not runtime_dir or not path.is_dir():
        return "runtime dir", runtime_dir or "not set", _WARN
    if not os.access(path, os.W_OK):
        return "runtime dir", f"{runtime_dir} (read-only)", _WARN
    return "runtime dir", runtime_dir, _OK


def _os_check() -> tuple[str, str, str]:
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, _OK


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nholepuncher doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(config_path: str = "") -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.  Warnings do not fail.
    """
    config_row, runtime_dir = _config_check(config_path)
    checks = [
        ("holepuncher", __version__, _OK),
        _python_version_check(),
        *(_library_check(label, module) for label, module in _LIBRARIES),
        config_row,
    ]
    if runtime_dir is not None:
        checks.append(_runtime_dir_check(runtime_dir))
    checks.append(_os_check())

    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
    else:
        table = Table(
            title="holepuncher doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
        if has_failure:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            console.print("[bold green]All checks passed.[/bold green]")

    return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS
