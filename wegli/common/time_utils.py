"""Timestamp parsing and formatting for API payloads and export files."""

from __future__ import annotations

import re
from datetime import datetime, timezone

# Rails renders export timestamps like "2023-10-25 09:23:00.000 +0100". Older
# exports put the space before the fraction instead ("09:23:00 .000+0100").
_EXPORT_TIMESTAMP_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[ T](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?: ?\.(?P<fraction>\d{1,6}))?"
    r" ?(?P<offset>[+-]\d{2}:?\d{2}|Z|UTC)$"
)
EXPORT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f %z"


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def parse_rfc3339(value: str) -> datetime:
    """Parse an API timestamp such as ``2023-09-18T15:30:14.053+02:00``.

    Raises ``ValueError`` for malformed or naive values.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected a timestamp string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {value!r}")
    return parsed


def format_rfc3339(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds")


def parse_export_timestamp(value: str) -> datetime:
    """Parse a timestamp column of the notices CSV export.

    Raises ``ValueError`` for malformed or naive values.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected a timestamp string, got {type(value).__name__}")
    match = _EXPORT_TIMESTAMP_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Unrecognised export timestamp: {value!r}")

    fraction = (match["fraction"] or "0").ljust(6, "0")
    offset = match["offset"]
    if offset in ("Z", "UTC"):
        offset = "+0000"
    offset = offset.replace(":", "")
    return datetime.strptime(
        f"{match['date']} {match['time']}.{fraction} {offset}",
        EXPORT_TIMESTAMP_FORMAT,
    )


def format_export_timestamp(value: datetime) -> str:
    """Format ``value`` as ``YYYY-MM-DD HH:MM:SS.fff +HHMM``.

    This is the layout current exports use. The older ``HH:MM:SS .fff+HHMM``
    layout is read by ``parse_export_timestamp`` but never written, so a row
    in that layout converts to the same instant with different text.
    """
    if value.tzinfo is None:
        raise ValueError("Cannot format a naive datetime as an export timestamp")
    millis = value.microsecond // 1000
    return f"{value.strftime('%Y-%m-%d %H:%M:%S')}.{millis:03d} {value.strftime('%z')}"
