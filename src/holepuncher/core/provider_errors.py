"""Normalization of provider errors reported by the server.

A provider error carries an optional server message plus zero or more
``(field, reason)`` details.  A single detail is surfaced as *the
cause*; several details are kept apart and reported one by one.
"""

from __future__ import annotations

from dataclasses import dataclass

from holepuncher.core.envelope import LinodeError


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    reason: str


@dataclass(frozen=True, slots=True)
class NormalizedProviderError:
    """Structured, sink-independent view of a provider error."""

    message: str | None
    cause: str | None
    """Reason of the only detail, when exactly one was reported."""

    details: tuple[FieldError, ...]
    """Every reported detail, in server order."""

    def report_entries(self) -> list[dict[str, str]]:
        """Return one structured entry per reportable component.

        The server message (if any) comes first, followed by either the
        single cause or one entry per detail.
        """
        entries: list[dict[str, str]] = []
        if self.message:
            entries.append({"server_error": self.message})
        if self.cause is not None:
            entries.append({"cause": self.cause})
        elif len(self.details) > 1:
            entries.extend(
                {"field": detail.field, "reason": detail.reason}
                for detail in self.details
            )
        return entries


def normalize_provider_error(error: LinodeError) -> NormalizedProviderError:
    message = error.error.message if error.error is not None else ""
    details = tuple(
        FieldError(field=detail.field, reason=detail.reason)
        for detail in error.details
    )
    return NormalizedProviderError(
        message=message or None,
        cause=details[0].reason if len(details) == 1 else None,
        details=details,
    )
