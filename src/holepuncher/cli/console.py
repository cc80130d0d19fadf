"""CLI console helpers with optional Rich support.

Diagnostics go to stderr through :data:`console`; command results go to
stdout through :func:`emit_json` and :func:`emit_line` so they can be
piped.  Rich is imported lazily so ``--help`` and ``--version`` keep
working without it.
"""

from __future__ import annotations

import json
import sys
from typing import Any

from pydantic_core import to_jsonable_python

from holepuncher.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console(*, stderr: bool = True) -> Any:
    console_class = _load_rich_console_class()
    return console_class(stderr=stderr)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback (stderr)."""

    def print(self, *objects: object) -> None:
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()


def emit_json(value: Any) -> None:
    """Pretty-print *value* (dataclasses, datetimes, lists) as JSON on stdout."""
    text = json.dumps(to_jsonable_python(value), indent=2)
    try:
        rich_console = get_rich_console(stderr=False)
    except EnvironmentError:
        print(text)
        return
    rich_console.print_json(text)


def emit_line(text: str) -> None:
    """Write a raw value line to stdout, unstyled."""
    print(text)
