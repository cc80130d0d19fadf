"""Allow ``python -m holepuncher`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m holepuncher`` behaves identically to the ``holepuncher``
console script.
"""

from __future__ import annotations

from holepuncher.cli.app import cli

if __name__ == "__main__":
    cli()
