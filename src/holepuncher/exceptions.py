"""Custom exception hierarchy for holepuncher.

All exceptions that cross layer boundaries must inherit from
:class:`HolepuncherError`.  Raw third-party exceptions (httpx, PyNaCl,
pydantic, ``OSError``) must NEVER propagate beyond the infrastructure
layer.  They are caught there and re-raised as a typed subclass defined
here.

Hierarchy
---------
HolepuncherError
├── ConfigurationError
│   └── UnsupportedProviderError
├── TransportError
├── CodecError
├── DecodeError
├── ProtocolBugError
├── RpcMethodError
├── SessionError
│   ├── SessionNotFoundError
│   └── SessionDecodeError
└── EnvironmentError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from holepuncher.core.provider_errors import NormalizedProviderError


class HolepuncherError(Exception):
    """Base exception for all holepuncher errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(HolepuncherError):
    """Raised when settings are missing, malformed, or inconsistent."""


class UnsupportedProviderError(ConfigurationError):
    """Raised when ``runtime.provider`` names a provider we cannot drive."""


# --- RPC -------------------------------------------------------------------

class TransportError(HolepuncherError):
    """Raised on network I/O failure or a hard (non-envelope) HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int | None = status_code
        self.body: str | None = body


class CodecError(HolepuncherError):
    """Raised by the codec when a payload cannot be sealed or opened."""


class DecodeError(HolepuncherError):
    """Raised when a body that should hold a reply envelope is malformed."""


class ProtocolBugError(HolepuncherError):
    """Raised when a reply has a shape a matching server never produces.

    Either the expected result variant is missing, or it carries neither
    a success payload nor an error payload.
    """

    def __init__(self, message: str, *, rpc: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.rpc: str = rpc


class RpcMethodError(HolepuncherError):
    """Raised when the server reports an application-level error.

    The normalized error is attached for diagnostics; callers are not
    expected to branch on it.
    """

    def __init__(
        self,
        message: str,
        *,
        rpc: str,
        error: NormalizedProviderError,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.rpc: str = rpc
        self.error: NormalizedProviderError = error


# --- Session ---------------------------------------------------------------

class SessionError(HolepuncherError):
    """Raised when the session file cannot be read, written, or removed."""


class SessionNotFoundError(SessionError):
    """Raised when no session file exists in the runtime directory."""


class SessionDecodeError(SessionError):
    """Raised when the session file content is not a valid record."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(HolepuncherError):
    """Raised when an optional runtime dependency is not available."""
