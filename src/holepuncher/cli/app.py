"""CLI application entry point and command routing for holepuncher.

This module is the **sole error boundary** for the entire application.
It catches :class:`~holepuncher.exceptions.HolepuncherError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, logs the
structured details the lower layers attach to their errors, and returns
well-defined exit codes.

Architecture notes
------------------
* No business logic lives here; handlers in :mod:`holepuncher.cli.commands`
  delegate to the core and infrastructure layers.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys

from holepuncher.cli import exit_codes
from holepuncher.cli.console import console
from holepuncher.config import default_config_path
from holepuncher.exceptions import (
    ConfigurationError,
    HolepuncherError,
    ProtocolBugError,
    RpcMethodError,
    TransportError,
)
from holepuncher.utils.logging import configure_logging, get_logger
from holepuncher.version import __version__

logger = get_logger(__name__)

LINODE_ACTIONS: dict[str, str] = {
    "rebuild": "rebuild tunnel",
    "instances": "list currently active instances",
    "plans": "list available instance types",
    "regions": "list available regions",
    "images": "list available images",
    "stackscripts": "list available StackScripts",
}


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Commands:
    * ``holepuncher create|destroy|info``
    * ``holepuncher linode <action>``
    * ``holepuncher var <name>``
    * ``holepuncher doctor``
    """
    from holepuncher.cli.commands import SESSION_VARIABLES

    parser = argparse.ArgumentParser(
        prog="holepuncher",
        description="holepuncher client: create, inspect and destroy tunnel instances.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="config file (default: $HOLEPUNCHER_CONFIG)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", metavar="<command>")
    sub.add_parser("create", help="create tunnel")
    sub.add_parser("destroy", help="destroy tunnel")
    sub.add_parser("info", help="display tunnel info")
    sub.add_parser("doctor", help="run environment diagnostics")

    linode = sub.add_parser("linode", help="linode-specific actions")
    linode_sub = linode.add_subparsers(dest="action", metavar="<action>", required=True)
    for action, help_text in LINODE_ACTIONS.items():
        linode_sub.add_parser(action, help=help_text)

    var = sub.add_parser("var", help="print variable from current session")
    var_sub = var.add_subparsers(dest="name", metavar="<name>", required=True)
    for name, (help_text, _render) in SESSION_VARIABLES.items():
        var_sub.add_parser(name, help=help_text)

    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the holepuncher CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(verbose=args.verbose)
    config_path: str = args.config or default_config_path()

    if args.command == "doctor":
        from holepuncher.cli.doctor import run_doctor

        return run_doctor(config_path)

    from holepuncher.cli import commands

    if args.command == "create":
        return commands.handle_create(config_path)
    if args.command == "destroy":
        return commands.handle_destroy(config_path)
    if args.command == "info":
        return commands.handle_info(config_path)
    if args.command == "linode":
        return commands.handle_linode(config_path, args.action)
    return commands.handle_var(config_path, args.name)


# ---------------------------------------------------------------------------
# Error reporting
# ---------------------------------------------------------------------------

def report_error(exc: HolepuncherError) -> int:
    """Log structured details of *exc*, print it, and pick an exit code."""
    if isinstance(exc, RpcMethodError):
        for entry in exc.error.report_entries():
            logger.error("RPC method returned an error", rpc=exc.rpc, **entry)
    elif isinstance(exc, ProtocolBugError):
        logger.error("Protocol contract violation", rpc=exc.rpc, cause=str(exc))
    elif isinstance(exc, TransportError):
        logger.error(
            "Fundamental RPC failure",
            status=exc.status_code,
            cause=str(exc),
        )

    console.print(f"[bold red]Error:[/bold red] {exc}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {exc.hint}")

    if isinstance(exc, ConfigurationError):
        return exit_codes.CONFIGURATION_ERROR
    return exit_codes.GENERAL_ERROR


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli(argv: list[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except HolepuncherError as exc:
        sys.exit(report_error(exc))
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
