"""Timestamp parsing for server-provided date strings.

The server emits ``YYYY-MM-DDTHH:MM:SS`` (UTC, no offset) and, for some
records, the same with a numeric offset (``-0700``).  Anything else is
mapped to the Unix epoch instead of failing the whole operation.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

UNIX_EPOCH: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)

_NAIVE_FORMAT = "%Y-%m-%dT%H:%M:%S"
_OFFSET_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# strptime alone accepts unpadded fields such as "2021-1-2T3:4:5".
_NAIVE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
_OFFSET_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{4}")


def parse_timestamp_checked(value: str) -> tuple[datetime, bool]:
    """Parse *value* and report whether either format matched.

    Both layouts require zero-padded fields.  Returns
    ``(UNIX_EPOCH, False)`` when the string cannot be parsed.
    """
    try:
        if _NAIVE_SHAPE.fullmatch(value):
            return datetime.strptime(value, _NAIVE_FORMAT).replace(tzinfo=timezone.utc), True
        if _OFFSET_SHAPE.fullmatch(value):
            return datetime.strptime(value, _OFFSET_FORMAT), True
    except ValueError:
        pass
    return UNIX_EPOCH, False


def parse_timestamp(value: str) -> datetime:
    """Parse *value*, substituting the Unix epoch on failure."""
    parsed, _ok = parse_timestamp_checked(value)
    return parsed
