"""Session persistence: the tunnel this client owns, across invocations.

The record lives in ``session.json`` under the runtime directory as
indented JSON.  There is no locking and no schema version: concurrent
invocations against the same runtime directory may interleave.

All ``OSError`` and pydantic failures are re-raised as
:class:`~holepuncher.exceptions.SessionError` subclasses.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from holepuncher.core.models import SessionRecord
from holepuncher.exceptions import SessionDecodeError, SessionError, SessionNotFoundError

SESSION_FILENAME = "session.json"

_RECORD_ADAPTER: TypeAdapter[SessionRecord] = TypeAdapter(SessionRecord)


def session_path(runtime_dir: str | Path) -> Path:
    return Path(runtime_dir) / SESSION_FILENAME


def save_session(record: SessionRecord, runtime_dir: str | Path) -> Path:
    """Write *record*, replacing any previous session.

    Raises
    ------
    SessionError
        If the file cannot be written.
    """
    path = session_path(runtime_dir)
    data = _RECORD_ADAPTER.dump_json(record, indent=2) + b"\n"
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise SessionError(
            f"Error saving session to {path}: {exc.strerror or exc}",
            hint="Check that runtime.runtime_dir exists and is writable.",
        ) from exc
    return path


def restore_session(runtime_dir: str | Path) -> SessionRecord:
    """Read the saved session record.

    Raises
    ------
    SessionNotFoundError
        If no session has been saved.
    SessionError
        If the file cannot be read.
    SessionDecodeError
        If the content is not a valid session record.
    """
    path = session_path(runtime_dir)
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise SessionNotFoundError(
            f"No active session in {path.parent}",
            hint="Create a tunnel first with: holepuncher create",
        ) from exc
    except OSError as exc:
        raise SessionError(
            f"Error opening {path} for reading: {exc.strerror or exc}",
        ) from exc

    try:
        return _RECORD_ADAPTER.validate_json(data)
    except ValidationError as exc:
        raise SessionDecodeError(f"Error parsing session cache {path}: {exc}") from exc


def clear_session(runtime_dir: str | Path) -> None:
    """Remove the session file; a missing file is not an error.

    Raises
    ------
    SessionError
        If the file exists but cannot be removed.
    """
    path = session_path(runtime_dir)
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise SessionError(
            f"Couldn't clear session cache {path}: {exc.strerror or exc}",
        ) from exc
