"""Exit-code constants used by the CLI layer.

Every exit path of ``holepuncher`` uses one of these values; scripts
wrapping the CLI can rely on them.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Command completed without error."""

GENERAL_ERROR: int = 1
"""A known HolepuncherError was caught and its message displayed."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

CONFIGURATION_ERROR: int = 3
"""Settings were missing or invalid; nothing was sent to the server."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C (128 + SIGINT)."""
